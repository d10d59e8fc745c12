"""Saved search domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from catalog_search.domain.exceptions import ValidationException

NAME_MAX_LENGTH = 100
# Same text bounds as a search query, so every saved search can be executed.
QUERY_MIN_LENGTH = 2
QUERY_MAX_LENGTH = 200


@dataclass
class SavedSearchEntity:
    """Persisted, re-executable query definition owned by a single identity.

    Stores the raw query definition only; no permission snapshot is kept,
    execution always re-evaluates visibility for the caller.
    """

    id: str
    owner_id: str
    name: str
    query: str
    entity_types: list[str]
    created_at: datetime
    updated_at: datetime
    filters: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate name and query bounds. Raises ValidationException if invalid."""
        name = (self.name or "").strip()
        if not 1 <= len(name) <= NAME_MAX_LENGTH:
            raise ValidationException(
                f"Saved search name must be 1-{NAME_MAX_LENGTH} characters", field="name"
            )
        query = (self.query or "").strip()
        if not QUERY_MIN_LENGTH <= len(query) <= QUERY_MAX_LENGTH:
            raise ValidationException(
                f"Saved search query must be {QUERY_MIN_LENGTH}-{QUERY_MAX_LENGTH} characters",
                field="query",
            )
        self.name = name
        self.query = query

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id
