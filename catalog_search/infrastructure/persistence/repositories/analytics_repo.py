"""Analytics event log (Postgres). Append-only; used by background workers.

Opens a session per call from the session factory because writes come from
the tracker worker and reads from the popularity aggregator, outside any
request.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent
from catalog_search.infrastructure.persistence.models.analytics import (
    ClickEventModel,
    SearchEventModel,
)
from catalog_search.shared.utils.datetime import ensure_utc


def _search_to_domain(row: SearchEventModel) -> SearchEvent:
    return SearchEvent(
        id=row.id,
        actor_id=row.actor_id,
        query=row.query,
        timestamp=ensure_utc(row.created_at),
        result_count=row.result_count,
        execution_time_ms=row.execution_time_ms,
        entity_types=tuple(row.entity_types or ()),
        filters=dict(row.filters or {}),
    )


def _click_to_domain(row: ClickEventModel) -> ClickEvent:
    return ClickEvent(
        id=row.id,
        event_id=row.event_id,
        result_id=row.result_id,
        position=row.position,
        entity_type=row.entity_type,
        clicked_at=ensure_utc(row.clicked_at),
    )


class AnalyticsEventRepository:
    """IAnalyticsEventLog on the search_event and click_event tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def append_search(self, event: SearchEvent) -> None:
        async with self.session_factory() as session, session.begin():
            session.add(
                SearchEventModel(
                    id=event.id,
                    actor_id=event.actor_id,
                    query=event.query,
                    entity_types=list(event.entity_types),
                    filters=dict(event.filters),
                    result_count=event.result_count,
                    execution_time_ms=event.execution_time_ms,
                    created_at=event.timestamp,
                )
            )

    async def append_click(self, event: ClickEvent) -> None:
        async with self.session_factory() as session, session.begin():
            session.add(
                ClickEventModel(
                    id=event.id,
                    event_id=event.event_id,
                    result_id=event.result_id,
                    position=event.position,
                    entity_type=event.entity_type,
                    clicked_at=event.clicked_at,
                )
            )

    async def list_search_events(
        self, start: datetime, end: datetime, actor_id: str | None = None
    ) -> list[SearchEvent]:
        stmt = (
            select(SearchEventModel)
            .where(SearchEventModel.created_at >= start, SearchEventModel.created_at <= end)
            .order_by(SearchEventModel.created_at.asc())
        )
        if actor_id is not None:
            stmt = stmt.where(SearchEventModel.actor_id == actor_id)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_search_to_domain(row) for row in result.scalars().all()]

    async def list_click_events(self, start: datetime, end: datetime) -> list[ClickEvent]:
        stmt = select(ClickEventModel).where(
            ClickEventModel.clicked_at >= start, ClickEventModel.clicked_at <= end
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_click_to_domain(row) for row in result.scalars().all()]

    async def click_counts_since(self, since: datetime) -> dict[str, int]:
        stmt = (
            select(ClickEventModel.result_id, func.count())
            .where(ClickEventModel.clicked_at >= since)
            .group_by(ClickEventModel.result_id)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return {result_id: int(count) for result_id, count in result.all()}

    async def recent_queries(self, actor_id: str, limit: int) -> list[SearchEvent]:
        latest = (
            select(
                SearchEventModel.id,
                func.row_number()
                .over(
                    partition_by=func.lower(SearchEventModel.query),
                    order_by=SearchEventModel.created_at.desc(),
                )
                .label("rn"),
            )
            .where(SearchEventModel.actor_id == actor_id)
            .subquery()
        )
        stmt = (
            select(SearchEventModel)
            .join(latest, latest.c.id == SearchEventModel.id)
            .where(latest.c.rn == 1)
            .order_by(SearchEventModel.created_at.desc())
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_search_to_domain(row) for row in result.scalars().all()]

    async def delete_before(self, cutoff: datetime) -> int:
        async with self.session_factory() as session, session.begin():
            clicks = await session.execute(
                delete(ClickEventModel).where(ClickEventModel.clicked_at < cutoff)
            )
            searches = await session.execute(
                delete(SearchEventModel).where(SearchEventModel.created_at < cutoff)
            )
            return int(clicks.rowcount or 0) + int(searches.rowcount or 0)
