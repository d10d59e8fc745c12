"""Core: config, constants, rate limiting and application bootstrap.

Single place for settings and shared constants.
"""

from catalog_search.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
