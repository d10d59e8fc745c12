"""Search analytics API (admin only): reports, performance, trending and cleanup."""

from datetime import datetime

from fastapi import APIRouter, Query

from catalog_search.api.v1.dependencies import AnalyticsServiceDep, CurrentPrincipal
from catalog_search.application.use_cases.analytics import DEFAULT_RETENTION_DAYS
from catalog_search.schemas.analytics import (
    PerformanceMetricsResponse,
    QueryCountResponse,
    SearchAnalyticsResponse,
    TrendingSearchesResponse,
    TrendingSearchResponse,
    ZeroResultQueriesResponse,
)
from catalog_search.schemas.saved_search import DeletedCountResponse

router = APIRouter()


@router.get("", response_model=SearchAnalyticsResponse)
async def get_search_analytics(
    principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
) -> SearchAnalyticsResponse:
    """Totals, rates, top queries and entity types over the range (default last 30 days)."""
    report = await analytics_svc.get_report(principal, start_date, end_date)
    return SearchAnalyticsResponse.model_validate(report)


@router.get("/zero-results", response_model=ZeroResultQueriesResponse)
async def get_zero_result_queries(
    principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    limit: int = Query(20, ge=1, le=100),
) -> ZeroResultQueriesResponse:
    items = await analytics_svc.get_zero_result_queries(principal, start_date, end_date, limit)
    return ZeroResultQueriesResponse(
        queries=[QueryCountResponse.model_validate(q) for q in items]
    )


@router.get("/performance", response_model=PerformanceMetricsResponse)
async def get_performance_metrics(
    principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
) -> PerformanceMetricsResponse:
    """Execution time average, p50/p95/p99 and the slowest queries."""
    metrics = await analytics_svc.get_performance(principal, start_date, end_date)
    return PerformanceMetricsResponse.model_validate(metrics)


@router.get("/trending", response_model=TrendingSearchesResponse)
async def get_trending_searches(
    principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
    hours: int = Query(24, ge=1, le=24 * 30),
    limit: int = Query(10, ge=1, le=50),
) -> TrendingSearchesResponse:
    """Queries growing against the previous window of the same length."""
    items = await analytics_svc.get_trending(principal, hours=hours, limit=limit)
    return TrendingSearchesResponse(
        trending=[TrendingSearchResponse.model_validate(t) for t in items]
    )


@router.delete("/events", response_model=DeletedCountResponse)
async def cleanup_search_events(
    principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
    days_to_keep: int = Query(DEFAULT_RETENTION_DAYS, alias="daysToKeep"),
) -> DeletedCountResponse:
    """Delete analytics events older than daysToKeep days."""
    deleted = await analytics_svc.cleanup(principal, days_to_keep=days_to_keep)
    return DeletedCountResponse(deleted=deleted)
