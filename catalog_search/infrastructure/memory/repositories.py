"""In-process stores: saved searches, analytics event log, principal directory."""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterable
from datetime import datetime

from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.saved_search import SavedSearchEntity


def _detached(saved: SavedSearchEntity) -> SavedSearchEntity:
    """Copy that shares no mutable state with the stored record."""
    return dataclasses.replace(
        saved, entity_types=list(saved.entity_types), filters=copy.deepcopy(saved.filters)
    )


class InMemorySavedSearchRepository:
    def __init__(self) -> None:
        self._items: dict[str, SavedSearchEntity] = {}

    async def create(self, saved: SavedSearchEntity) -> SavedSearchEntity:
        self._items[saved.id] = _detached(saved)
        return saved

    async def get_by_id(self, saved_search_id: str) -> SavedSearchEntity | None:
        saved = self._items.get(saved_search_id)
        return _detached(saved) if saved else None

    async def list_by_owner(self, owner_id: str) -> list[SavedSearchEntity]:
        owned = [s for s in self._items.values() if s.owner_id == owner_id]
        owned.sort(key=lambda s: (s.created_at, s.id), reverse=True)
        return [_detached(s) for s in owned]

    async def update(self, saved: SavedSearchEntity) -> SavedSearchEntity:
        self._items[saved.id] = _detached(saved)
        return saved

    async def delete(self, saved_search_id: str) -> bool:
        return self._items.pop(saved_search_id, None) is not None

    async def delete_by_owner(self, owner_id: str) -> int:
        doomed = [k for k, s in self._items.items() if s.owner_id == owner_id]
        for key in doomed:
            del self._items[key]
        return len(doomed)


class InMemoryAnalyticsEventLog:
    """Append-only lists; delete_before is the only removal path."""

    def __init__(self) -> None:
        self.search_events: list[SearchEvent] = []
        self.click_events: list[ClickEvent] = []

    async def append_search(self, event: SearchEvent) -> None:
        self.search_events.append(event)

    async def append_click(self, event: ClickEvent) -> None:
        self.click_events.append(event)

    async def list_search_events(
        self, start: datetime, end: datetime, actor_id: str | None = None
    ) -> list[SearchEvent]:
        events = [
            e
            for e in self.search_events
            if start <= e.timestamp <= end and (actor_id is None or e.actor_id == actor_id)
        ]
        return sorted(events, key=lambda e: e.timestamp)

    async def list_click_events(self, start: datetime, end: datetime) -> list[ClickEvent]:
        return [c for c in self.click_events if start <= c.clicked_at <= end]

    async def click_counts_since(self, since: datetime) -> dict[str, int]:
        counts: dict[str, int] = {}
        for click in self.click_events:
            if click.clicked_at >= since:
                counts[click.result_id] = counts.get(click.result_id, 0) + 1
        return counts

    async def recent_queries(self, actor_id: str, limit: int) -> list[SearchEvent]:
        seen: set[str] = set()
        recent: list[SearchEvent] = []
        for event in sorted(self.search_events, key=lambda e: e.timestamp, reverse=True):
            if event.actor_id != actor_id:
                continue
            key = event.query.casefold()
            if key in seen:
                continue
            seen.add(key)
            recent.append(event)
            if len(recent) >= limit:
                break
        return recent

    async def delete_before(self, cutoff: datetime) -> int:
        before = len(self.search_events) + len(self.click_events)
        self.search_events = [e for e in self.search_events if e.timestamp >= cutoff]
        self.click_events = [c for c in self.click_events if c.clicked_at >= cutoff]
        return before - len(self.search_events) - len(self.click_events)


class InMemoryPrincipalDirectory:
    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        self._principals = {p.user_id: p for p in principals}

    def put(self, principal: Principal) -> None:
        self._principals[principal.user_id] = principal

    def remove(self, user_id: str) -> None:
        self._principals.pop(user_id, None)

    async def get(self, user_id: str) -> Principal | None:
        return self._principals.get(user_id)
