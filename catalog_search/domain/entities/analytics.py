"""Append-only analytics events: search executions and result clicks."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class SearchEvent:
    """One executed search. Never mutated after it is recorded."""

    id: str
    actor_id: str | None
    query: str
    timestamp: datetime
    result_count: int
    execution_time_ms: int
    entity_types: tuple[str, ...] = ()
    filters: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class ClickEvent:
    """A result selected from a recorded search (event_id references SearchEvent.id)."""

    id: str
    event_id: str
    result_id: str
    position: int
    entity_type: str
    clicked_at: datetime
