"""Use cases: search, autocomplete, related content, saved searches, analytics."""

from catalog_search.application.use_cases.analytics import SearchAnalyticsService
from catalog_search.application.use_cases.autocomplete import AutocompleteService
from catalog_search.application.use_cases.related import RelatedContentService
from catalog_search.application.use_cases.saved_searches import SavedSearchService
from catalog_search.application.use_cases.search import SearchService

__all__ = [
    "AutocompleteService",
    "RelatedContentService",
    "SavedSearchService",
    "SearchAnalyticsService",
    "SearchService",
]
