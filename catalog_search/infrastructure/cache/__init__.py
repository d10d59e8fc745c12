"""Cache: Redis service and cache key utilities."""

from catalog_search.infrastructure.cache.keys import popularity_key
from catalog_search.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService", "popularity_key"]
