"""Core constants: query bounds, cache key prefixes and rate limit categories."""

# Query bounds
QUERY_MIN_LENGTH = 2
QUERY_MAX_LENGTH = 200
SUGGESTION_MIN_LENGTH = 2
SUGGESTION_MAX_LENGTH = 100
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_SUGGESTION_LIMIT = 10
MAX_SUGGESTION_LIMIT = 20

STOP_WORDS = frozenset(
    {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)

# Cache key prefixes
CACHE_PREFIX_POPULARITY = "popularity"
CACHE_KEY_SEP = ":"

# Rate limit categories
RATE_CATEGORY_SEARCH = "search"
RATE_CATEGORY_SUGGESTIONS = "suggestions"
RATE_CATEGORY_SAVED_SEARCH_WRITES = "saved_search_writes"
