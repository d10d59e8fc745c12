"""Search analytics use cases: click capture, recent searches and admin reports.

Reports are computed from the append-only event log. Admin-only operations
raise AuthorizationException for every other role.
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from catalog_search.application.dtos.analytics import (
    EntityTypeCount,
    PerformanceMetrics,
    QueryCount,
    RecentSearch,
    SearchAnalyticsReport,
    SlowQuery,
    TrendingSearch,
)
from catalog_search.domain.entities.analytics import ClickEvent
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.exceptions import AuthorizationException, ValidationException
from catalog_search.shared.utils.datetime import ensure_utc, utc_now
from catalog_search.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IAnalyticsEventLog
    from catalog_search.application.interfaces.services import IAnalyticsTracker

TOP_QUERIES_LIMIT = 20
SLOWEST_QUERIES_LIMIT = 10
TRENDING_MIN_COUNT = 3
DEFAULT_RETENTION_DAYS = 90


def percentile(sorted_values: list[int], fraction: float) -> int:
    """Value at floor(n * fraction), clamped to the last index; 0 when empty."""
    if not sorted_values:
        return 0
    index = min(math.floor(len(sorted_values) * fraction), len(sorted_values) - 1)
    return sorted_values[index]


def _require_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise AuthorizationException(resource="search_analytics", action="read")


class SearchAnalyticsService:
    def __init__(
        self,
        event_log: IAnalyticsEventLog,
        tracker: IAnalyticsTracker | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.event_log = event_log
        self.tracker = tracker
        self.clock = clock

    def track_click(
        self, event_id: str, result_id: str, position: int, entity_type: str
    ) -> None:
        """Hand a click to the tracker. Never raises and never waits on storage."""
        if self.tracker is None:
            return
        self.tracker.record_click(
            ClickEvent(
                id=generate_cuid(),
                event_id=event_id,
                result_id=result_id,
                position=position,
                entity_type=entity_type,
                clicked_at=self.clock(),
            )
        )

    async def recent_searches(self, principal: Principal, limit: int = 10) -> list[RecentSearch]:
        """Caller's recent distinct queries, newest first."""
        events = await self.event_log.recent_queries(principal.user_id, limit)
        return [
            RecentSearch(query=e.query, entity_types=list(e.entity_types), searched_at=e.timestamp)
            for e in events
        ]

    def _range(self, start: datetime | None, end: datetime | None) -> tuple[datetime, datetime]:
        end = ensure_utc(end) or self.clock()
        start = ensure_utc(start) or end - timedelta(days=30)
        if start > end:
            raise ValidationException("startDate must not be after endDate", field="startDate")
        return start, end

    async def get_report(
        self,
        principal: Principal,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> SearchAnalyticsReport:
        _require_admin(principal)
        start, end = self._range(start, end)
        events = await self.event_log.list_search_events(start, end)
        if not events:
            return SearchAnalyticsReport()
        clicks = await self.event_log.list_click_events(start, end)
        clicked_ids = {c.event_id for c in clicks}

        total = len(events)
        per_query: dict[str, list[int]] = defaultdict(list)
        entity_counter: Counter[str] = Counter()
        zero_counter: Counter[str] = Counter()
        for e in events:
            per_query[e.query].append(e.result_count)
            entity_counter.update(e.entity_types)
            if e.result_count == 0:
                zero_counter[e.query] += 1

        top_queries = sorted(
            (
                QueryCount(query=q, count=len(r), average_results_count=sum(r) / len(r))
                for q, r in per_query.items()
            ),
            key=lambda item: (-item.count, item.query),
        )[:TOP_QUERIES_LIMIT]

        return SearchAnalyticsReport(
            total_searches=total,
            average_execution_time_ms=sum(e.execution_time_ms for e in events) / total,
            average_results_count=sum(e.result_count for e in events) / total,
            zero_results_rate=sum(1 for e in events if e.result_count == 0) / total,
            click_through_rate=sum(1 for e in events if e.id in clicked_ids) / total,
            top_queries=top_queries,
            top_entity_types=[
                EntityTypeCount(entity_type=t, search_count=c)
                for t, c in sorted(entity_counter.items(), key=lambda kv: (-kv[1], kv[0]))
            ],
            zero_result_queries=[
                QueryCount(query=q, count=c)
                for q, c in sorted(zero_counter.items(), key=lambda kv: (-kv[1], kv[0]))
            ][:TOP_QUERIES_LIMIT],
        )

    async def get_zero_result_queries(
        self,
        principal: Principal,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = TOP_QUERIES_LIMIT,
    ) -> list[QueryCount]:
        _require_admin(principal)
        start, end = self._range(start, end)
        events = await self.event_log.list_search_events(start, end)
        counter = Counter(e.query for e in events if e.result_count == 0)
        return [
            QueryCount(query=q, count=c)
            for q, c in sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]
        ]

    async def get_performance(
        self,
        principal: Principal,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> PerformanceMetrics:
        _require_admin(principal)
        start, end = self._range(start, end)
        events = await self.event_log.list_search_events(start, end)
        if not events:
            return PerformanceMetrics()
        times = sorted(e.execution_time_ms for e in events)
        slowest = sorted(events, key=lambda e: (-e.execution_time_ms, e.id))[:SLOWEST_QUERIES_LIMIT]
        return PerformanceMetrics(
            average_execution_time_ms=sum(times) / len(times),
            p50_execution_time_ms=percentile(times, 0.5),
            p95_execution_time_ms=percentile(times, 0.95),
            p99_execution_time_ms=percentile(times, 0.99),
            slowest_queries=[
                SlowQuery(query=e.query, execution_time_ms=e.execution_time_ms) for e in slowest
            ],
        )

    async def get_trending(
        self, principal: Principal, hours: int = 24, limit: int = 10
    ) -> list[TrendingSearch]:
        """Queries seen at least TRENDING_MIN_COUNT times in the last window, by growth."""
        _require_admin(principal)
        if hours < 1:
            raise ValidationException("hours must be >= 1", field="hours")
        now = self.clock()
        recent_start = now - timedelta(hours=hours)
        previous_start = recent_start - timedelta(hours=hours)
        recent = Counter(e.query for e in await self.event_log.list_search_events(recent_start, now))
        previous = Counter(
            e.query
            for e in await self.event_log.list_search_events(previous_start, recent_start)
            if e.timestamp < recent_start
        )
        trending = []
        for query, count in recent.items():
            if count < TRENDING_MIN_COUNT:
                continue
            before = previous.get(query, 0)
            growth = ((count - before) / before) * 100 if before else 100.0
            trending.append(TrendingSearch(query=query, count=count, growth_percent=growth))
        trending.sort(key=lambda t: (-t.growth_percent, -t.count, t.query))
        return trending[:limit]

    async def cleanup(self, principal: Principal, days_to_keep: int = DEFAULT_RETENTION_DAYS) -> int:
        """Delete events older than days_to_keep; returns rows removed."""
        _require_admin(principal)
        if days_to_keep < 1:
            raise ValidationException("daysToKeep must be >= 1", field="daysToKeep")
        return await self.event_log.delete_before(self.clock() - timedelta(days=days_to_keep))
