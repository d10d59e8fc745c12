"""Search analytics reports, recent searches and retention cleanup."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from catalog_search.application.use_cases.analytics import SearchAnalyticsService, percentile
from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent
from catalog_search.domain.exceptions import AuthorizationException, ValidationException
from catalog_search.infrastructure.memory.repositories import InMemoryAnalyticsEventLog


def _event(event_id, query, at, results=3, ms=10, actor="admin-user", types=("asset",)):
    return SearchEvent(
        id=event_id,
        actor_id=actor,
        query=query,
        timestamp=at,
        result_count=results,
        execution_time_ms=ms,
        entity_types=types,
    )


@pytest.fixture
def log() -> InMemoryAnalyticsEventLog:
    return InMemoryAnalyticsEventLog()


@pytest.fixture
def service(log, now) -> SearchAnalyticsService:
    return SearchAnalyticsService(log, tracker=MagicMock(), clock=lambda: now)


async def test_report_aggregates(service, log, principals, now) -> None:
    """Totals, averages, zero-result rate and click-through rate over the range."""
    hour = timedelta(hours=1)
    await log.append_search(_event("e1", "logo", now - hour, results=4, ms=10))
    await log.append_search(_event("e2", "logo", now - hour, results=2, ms=30))
    await log.append_search(
        _event("e3", "missing", now - hour, results=0, ms=20, types=("asset", "creator"))
    )
    await log.append_search(_event("e4", "logo", now - timedelta(days=60)))
    await log.append_click(ClickEvent("c1", "e1", "a1", 0, "asset", now))
    await log.append_click(ClickEvent("c2", "e1", "a2", 1, "asset", now))

    report = await service.get_report(principals["admin-user"])
    assert report.total_searches == 3
    assert report.average_execution_time_ms == pytest.approx(20.0)
    assert report.average_results_count == pytest.approx(2.0)
    assert report.zero_results_rate == pytest.approx(1 / 3)
    assert report.click_through_rate == pytest.approx(1 / 3)
    assert report.top_queries[0].query == "logo"
    assert report.top_queries[0].count == 2
    assert report.top_queries[0].average_results_count == pytest.approx(3.0)
    assert [(t.entity_type, t.search_count) for t in report.top_entity_types] == [
        ("asset", 3),
        ("creator", 1),
    ]
    assert [(q.query, q.count) for q in report.zero_result_queries] == [("missing", 1)]


async def test_empty_report(service, principals) -> None:
    report = await service.get_report(principals["admin-user"])
    assert report.total_searches == 0
    assert report.top_queries == []


@pytest.mark.parametrize("user", ["viewer-user", "brand-user", "creator-user"])
async def test_reports_admin_only(service, principals, user) -> None:
    """Every role other than admin is refused."""
    principal = principals[user]
    with pytest.raises(AuthorizationException):
        await service.get_report(principal)
    with pytest.raises(AuthorizationException):
        await service.get_performance(principal)
    with pytest.raises(AuthorizationException):
        await service.get_trending(principal)
    with pytest.raises(AuthorizationException):
        await service.cleanup(principal)


async def test_inverted_range_rejected(service, principals, now) -> None:
    with pytest.raises(ValidationException):
        await service.get_report(principals["admin-user"], start=now, end=now - timedelta(days=1))


def test_percentile() -> None:
    values = list(range(1, 101))
    assert percentile(values, 0.5) == 51
    assert percentile(values, 0.95) == 96
    assert percentile(values, 0.99) == 100
    assert percentile([7], 0.99) == 7
    assert percentile([], 0.5) == 0


async def test_performance_metrics(service, log, principals, now) -> None:
    for i, ms in enumerate([5, 50, 10, 500]):
        await log.append_search(_event(f"e{i}", f"q{i}", now - timedelta(minutes=i), ms=ms))
    metrics = await service.get_performance(principals["admin-user"])
    assert metrics.average_execution_time_ms == pytest.approx(141.25)
    assert metrics.p50_execution_time_ms == 50
    assert metrics.p99_execution_time_ms == 500
    assert [q.execution_time_ms for q in metrics.slowest_queries] == [500, 50, 10, 5]


async def test_zero_result_queries(service, log, principals, now) -> None:
    await log.append_search(_event("e1", "nothing", now, results=0))
    await log.append_search(_event("e2", "nothing", now, results=0))
    await log.append_search(_event("e3", "nada", now, results=0))
    await log.append_search(_event("e4", "logo", now, results=9))
    queries = await service.get_zero_result_queries(principals["admin-user"], limit=1)
    assert [(q.query, q.count) for q in queries] == [("nothing", 2)]


async def test_trending_growth(service, log, principals, now) -> None:
    """Queries with at least three recent searches rank by growth over the prior window."""
    for i in range(4):
        await log.append_search(_event(f"r{i}", "logo", now - timedelta(hours=1)))
    for i in range(3):
        await log.append_search(_event(f"p{i}", "logo", now - timedelta(hours=30)))
    for i in range(3):
        await log.append_search(_event(f"n{i}", "brand", now - timedelta(hours=2)))
    await log.append_search(_event("x0", "rare", now - timedelta(hours=1)))

    trending = await service.get_trending(principals["admin-user"], hours=24)
    assert [(t.query, t.count) for t in trending] == [("brand", 3), ("logo", 4)]
    assert trending[0].growth_percent == 100.0
    assert trending[1].growth_percent == pytest.approx(100 / 3)


async def test_trending_hours_validated(service, principals) -> None:
    with pytest.raises(ValidationException):
        await service.get_trending(principals["admin-user"], hours=0)


async def test_cleanup(service, log, principals, now) -> None:
    await log.append_search(_event("old", "logo", now - timedelta(days=100)))
    await log.append_search(_event("new", "logo", now - timedelta(days=1)))
    await log.append_click(ClickEvent("c1", "old", "a1", 0, "asset", now - timedelta(days=100)))
    assert await service.cleanup(principals["admin-user"], days_to_keep=90) == 2
    assert [e.id for e in log.search_events] == ["new"]
    with pytest.raises(ValidationException):
        await service.cleanup(principals["admin-user"], days_to_keep=0)


async def test_recent_searches_distinct_newest_first(service, log, principals, now) -> None:
    await log.append_search(_event("e1", "Logo", now - timedelta(minutes=3), actor="brand-user"))
    await log.append_search(_event("e2", "brand", now - timedelta(minutes=2), actor="brand-user"))
    await log.append_search(_event("e3", "logo", now - timedelta(minutes=1), actor="brand-user"))
    await log.append_search(_event("e4", "other", now, actor="admin-user"))
    recent = await service.recent_searches(principals["brand-user"], limit=10)
    assert [r.query for r in recent] == ["logo", "brand"]


def test_track_click_hands_to_tracker(service) -> None:
    service.track_click("e1", "a1", 2, "asset")
    click = service.tracker.record_click.call_args.args[0]
    assert (click.event_id, click.result_id, click.position) == ("e1", "a1", 2)


def test_track_click_without_tracker(log) -> None:
    SearchAnalyticsService(log).track_click("e1", "a1", 0, "asset")
