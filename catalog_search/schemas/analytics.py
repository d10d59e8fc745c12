"""Search analytics API schemas (admin reports)."""

from catalog_search.schemas.base import CamelModel


class QueryCountResponse(CamelModel):
    query: str
    count: int
    average_results_count: float | None = None


class EntityTypeCountResponse(CamelModel):
    entity_type: str
    search_count: int


class SearchAnalyticsResponse(CamelModel):
    """Aggregates over search events in the requested range."""

    total_searches: int
    average_execution_time_ms: float
    average_results_count: float
    zero_results_rate: float
    click_through_rate: float
    top_queries: list[QueryCountResponse]
    top_entity_types: list[EntityTypeCountResponse]
    zero_result_queries: list[QueryCountResponse]


class ZeroResultQueriesResponse(CamelModel):
    queries: list[QueryCountResponse]


class SlowQueryResponse(CamelModel):
    query: str
    execution_time_ms: int


class PerformanceMetricsResponse(CamelModel):
    average_execution_time_ms: float
    p50_execution_time_ms: int
    p95_execution_time_ms: int
    p99_execution_time_ms: int
    slowest_queries: list[SlowQueryResponse]


class TrendingSearchResponse(CamelModel):
    query: str
    count: int
    growth_percent: float


class TrendingSearchesResponse(CamelModel):
    trending: list[TrendingSearchResponse]
