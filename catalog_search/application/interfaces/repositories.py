"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities, predicates or application DTOs only; no
infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent
    from catalog_search.domain.entities.principal import Principal
    from catalog_search.domain.entities.saved_search import SavedSearchEntity
    from catalog_search.domain.entities.searchable import SearchableEntity
    from catalog_search.domain.value_objects.predicates import Predicate
    from catalog_search.domain.value_objects.ranking import RetrievalOrder


# Entity index interface
class IEntityIndex(Protocol):
    """Protocol for the indexed store over searchable entities.

    Every lookup takes a predicate that already combines the caller's
    visibility rule with the query filters; implementations must apply it
    inside the lookup (never fetch broadly and post-filter in the caller).
    Raise IndexUnavailableException when the underlying store fails.
    """

    async def find(
        self, predicate: Predicate, limit: int, order: RetrievalOrder | None = None
    ) -> list[SearchableEntity]:
        """Return up to limit matching entities, strongest first under order.

        Without an order: updated_at desc, id asc.
        """

    async def count(self, predicate: Predicate) -> int:
        """Return the number of matching entities."""

    async def count_by_field(self, predicate: Predicate, field: str) -> dict[str, int]:
        """Return value -> count over matching entities.

        field is a filterable attribute or "tags" (multi-valued: each tag counted
        once per entity). Entities with a null value are omitted.
        """

    async def find_by_prefix(
        self, prefix: str, predicate: Predicate, limit: int
    ) -> list[SearchableEntity]:
        """Return up to limit matching entities whose title starts with or closely resembles prefix."""

    async def vocabulary(self, predicate: Predicate, limit: int = 5000) -> set[str]:
        """Return lowercase words (length > 2) from titles and tags of matching entities."""

    async def get_by_id(self, entity_id: str) -> SearchableEntity | None:
        """Return entity by ID."""


# Saved search repository interface
class ISavedSearchRepository(Protocol):
    """Protocol for saved search persistence (DIP)."""

    async def create(self, saved: SavedSearchEntity) -> SavedSearchEntity:
        """Persist a new saved search."""

    async def get_by_id(self, saved_search_id: str) -> SavedSearchEntity | None:
        """Return saved search by ID."""

    async def list_by_owner(self, owner_id: str) -> list[SavedSearchEntity]:
        """Return owner's saved searches (newest first)."""

    async def update(self, saved: SavedSearchEntity) -> SavedSearchEntity:
        """Persist changed fields of an existing saved search."""

    async def delete(self, saved_search_id: str) -> bool:
        """Delete saved search; return True if it existed."""

    async def delete_by_owner(self, owner_id: str) -> int:
        """Delete all saved searches for owner; return number removed."""


# Analytics event log interface
class IAnalyticsEventLog(Protocol):
    """Protocol for the append-only search/click event log."""

    async def append_search(self, event: SearchEvent) -> None:
        """Append a search event."""

    async def append_click(self, event: ClickEvent) -> None:
        """Append a click event."""

    async def list_search_events(
        self, start: datetime, end: datetime, actor_id: str | None = None
    ) -> list[SearchEvent]:
        """Return search events with start <= timestamp <= end (oldest first)."""

    async def list_click_events(self, start: datetime, end: datetime) -> list[ClickEvent]:
        """Return click events with start <= clicked_at <= end."""

    async def click_counts_since(self, since: datetime) -> dict[str, int]:
        """Return result_id -> click count for clicks at or after since."""

    async def recent_queries(self, actor_id: str, limit: int) -> list[SearchEvent]:
        """Return actor's most recent search events (newest first), at most one per query text."""

    async def delete_before(self, cutoff: datetime) -> int:
        """Delete search and click events older than cutoff; return rows removed."""


# Principal directory interface
class IPrincipalDirectory(Protocol):
    """Protocol for resolving an authenticated identity to its role and profiles."""

    async def get(self, user_id: str) -> Principal | None:
        """Return principal for user_id, or None when unknown."""
