"""DTOs for search analytics reports (admin read-models)."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class QueryCount:
    query: str
    count: int
    average_results_count: float | None = None


@dataclass(frozen=True)
class EntityTypeCount:
    entity_type: str
    search_count: int


@dataclass(frozen=True)
class SearchAnalyticsReport:
    """Aggregates over search events in a time range."""

    total_searches: int = 0
    average_execution_time_ms: float = 0.0
    average_results_count: float = 0.0
    zero_results_rate: float = 0.0
    click_through_rate: float = 0.0
    top_queries: list[QueryCount] = field(default_factory=list)
    top_entity_types: list[EntityTypeCount] = field(default_factory=list)
    zero_result_queries: list[QueryCount] = field(default_factory=list)


@dataclass(frozen=True)
class SlowQuery:
    query: str
    execution_time_ms: int


@dataclass(frozen=True)
class PerformanceMetrics:
    average_execution_time_ms: float = 0.0
    p50_execution_time_ms: int = 0
    p95_execution_time_ms: int = 0
    p99_execution_time_ms: int = 0
    slowest_queries: list[SlowQuery] = field(default_factory=list)


@dataclass(frozen=True)
class TrendingSearch:
    query: str
    count: int
    growth_percent: float


@dataclass(frozen=True)
class RecentSearch:
    query: str
    entity_types: list[str]
    searched_at: datetime


@dataclass(frozen=True)
class PopularitySnapshot:
    """Click counts per entity id over the trailing window, as of computed_at."""

    counts: dict[str, int]
    computed_at: datetime | None = None

    def count_for(self, entity_id: str) -> int:
        return self.counts.get(entity_id, 0)
