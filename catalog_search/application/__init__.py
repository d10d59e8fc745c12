"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (index, stores, cache, tracker).
"""

from catalog_search.application.interfaces import (
    IAnalyticsEventLog,
    IAnalyticsTracker,
    ICacheService,
    IEntityIndex,
    IPopularitySource,
    IPrincipalDirectory,
    ISavedSearchRepository,
)
from catalog_search.application.use_cases import (
    AutocompleteService,
    SavedSearchService,
    SearchAnalyticsService,
    SearchService,
)

__all__ = [
    "AutocompleteService",
    "IAnalyticsEventLog",
    "IAnalyticsTracker",
    "ICacheService",
    "IEntityIndex",
    "IPopularitySource",
    "IPrincipalDirectory",
    "ISavedSearchRepository",
    "SavedSearchService",
    "SearchAnalyticsService",
    "SearchService",
]
