"""Application ports (repository and service protocols)."""

from catalog_search.application.interfaces.repositories import (
    IAnalyticsEventLog,
    IEntityIndex,
    IPrincipalDirectory,
    ISavedSearchRepository,
)
from catalog_search.application.interfaces.services import (
    IAnalyticsTracker,
    ICacheService,
    IPopularitySource,
)

__all__ = [
    "IAnalyticsEventLog",
    "IAnalyticsTracker",
    "ICacheService",
    "IEntityIndex",
    "IPopularitySource",
    "IPrincipalDirectory",
    "ISavedSearchRepository",
]
