"""Cache key builders. Single place for key format.

Key components must not contain CACHE_KEY_SEP to avoid colliding keys.
"""

from catalog_search.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_POPULARITY


def _validate_key_component(value: str, name: str) -> None:
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def popularity_key(window_days: int, namespace: str = "clicks") -> str:
    """Key for the shared popularity snapshot over a trailing window."""
    _validate_key_component(namespace, "namespace")
    return CACHE_KEY_SEP.join([CACHE_PREFIX_POPULARITY, namespace, f"{window_days}d"])
