"""Application DTOs (read-models and commands, no ORM or HTTP types)."""

from catalog_search.application.dtos.analytics import (
    EntityTypeCount,
    PerformanceMetrics,
    PopularitySnapshot,
    QueryCount,
    RecentSearch,
    SearchAnalyticsReport,
    SlowQuery,
    TrendingSearch,
)
from catalog_search.application.dtos.saved_search import SavedSearchCreate, SavedSearchUpdate
from catalog_search.application.dtos.search import (
    AssetFilters,
    CommonFilters,
    CreatorFilters,
    LicenseFilters,
    NormalizedQuery,
    PaginationInfo,
    ProjectFilters,
    RelatedItem,
    ScoreBreakdown,
    ScoredResult,
    SearchFacets,
    SearchFilters,
    SearchResult,
    SpellingSuggestion,
    Suggestion,
)

__all__ = [
    "AssetFilters",
    "CommonFilters",
    "CreatorFilters",
    "EntityTypeCount",
    "LicenseFilters",
    "NormalizedQuery",
    "PaginationInfo",
    "PerformanceMetrics",
    "PopularitySnapshot",
    "ProjectFilters",
    "QueryCount",
    "RecentSearch",
    "RelatedItem",
    "SavedSearchCreate",
    "SavedSearchUpdate",
    "ScoreBreakdown",
    "ScoredResult",
    "SearchAnalyticsReport",
    "SearchFacets",
    "SearchFilters",
    "SearchResult",
    "SlowQuery",
    "SpellingSuggestion",
    "Suggestion",
    "TrendingSearch",
]
