"""DTOs for saved search create/update (no dependency on HTTP schemas)."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SavedSearchCreate:
    name: str
    query: str
    entity_types: list[str] = field(default_factory=list)
    filters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SavedSearchUpdate:
    """Partial update: None means leave unchanged."""

    name: str | None = None
    query: str | None = None
    entity_types: list[str] | None = None
    filters: dict[str, Any] | None = None

    def is_empty(self) -> bool:
        return (
            self.name is None
            and self.query is None
            and self.entity_types is None
            and self.filters is None
        )
