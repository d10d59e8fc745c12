"""API v1."""

from catalog_search.api.v1.router import api_router

__all__ = ["api_router"]
