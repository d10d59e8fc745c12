"""Postgres repositories: entity index, saved searches, analytics log, principals."""

from catalog_search.infrastructure.persistence.repositories.analytics_repo import (
    AnalyticsEventRepository,
)
from catalog_search.infrastructure.persistence.repositories.entity_index_repo import (
    SqlEntityIndex,
)
from catalog_search.infrastructure.persistence.repositories.principal_repo import (
    PrincipalRepository,
)
from catalog_search.infrastructure.persistence.repositories.saved_search_repo import (
    SavedSearchRepository,
)

__all__ = [
    "AnalyticsEventRepository",
    "PrincipalRepository",
    "SavedSearchRepository",
    "SqlEntityIndex",
]
