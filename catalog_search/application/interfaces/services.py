"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from catalog_search.application.dtos.analytics import PopularitySnapshot
    from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent


# Cache service interface
class ICacheService(Protocol):
    """Protocol for the shared cache (Redis or no-op)."""

    def is_available(self) -> bool:
        """Return True when the cache backend is connected."""

    async def get(self, key: str) -> Any | None:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL in seconds; return True on success."""


# Analytics tracker interface
class IAnalyticsTracker(Protocol):
    """Protocol for fire-and-forget analytics recording.

    Implementations never raise and never block the caller.
    """

    def record_search(self, event: SearchEvent) -> None:
        """Enqueue a search event."""

    def record_click(self, event: ClickEvent) -> None:
        """Enqueue a click event."""


# Popularity source interface
class IPopularitySource(Protocol):
    """Protocol for the read-only popularity snapshot used by the scorer."""

    def snapshot(self) -> PopularitySnapshot:
        """Return the most recently published snapshot."""
