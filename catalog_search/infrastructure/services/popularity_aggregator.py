"""Popularity aggregation over the append-only click log.

Periodically counts clicks per entity over a trailing window and publishes
an immutable snapshot for the scorer. With Redis enabled the snapshot is
shared through the cache so all workers score with the same counts.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from catalog_search.application.dtos.analytics import PopularitySnapshot
from catalog_search.infrastructure.cache.keys import popularity_key
from catalog_search.shared.utils.datetime import parse_utc, utc_now

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IAnalyticsEventLog
    from catalog_search.application.interfaces.services import ICacheService

logger = logging.getLogger(__name__)


class PopularityAggregator:
    """IPopularitySource refreshed from the click log."""

    def __init__(
        self,
        event_log: IAnalyticsEventLog,
        window_days: int = 30,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.event_log = event_log
        self.window_days = window_days
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.clock = clock
        self._snapshot = PopularitySnapshot(counts={})

    def snapshot(self) -> PopularitySnapshot:
        return self._snapshot

    async def _from_cache(self) -> PopularitySnapshot | None:
        if self.cache is None or not self.cache.is_available():
            return None
        cached = await self.cache.get(popularity_key(self.window_days))
        if not cached:
            return None
        return PopularitySnapshot(
            counts={k: int(v) for k, v in cached.get("counts", {}).items()},
            computed_at=parse_utc(cached["computedAt"]) if cached.get("computedAt") else None,
        )

    async def _publish(self, snapshot: PopularitySnapshot) -> None:
        if self.cache is None or not self.cache.is_available():
            return
        await self.cache.set(
            popularity_key(self.window_days),
            {
                "counts": snapshot.counts,
                "computedAt": snapshot.computed_at.isoformat() if snapshot.computed_at else None,
            },
            ttl=self.cache_ttl,
        )

    async def refresh(self, use_cache: bool = True) -> PopularitySnapshot:
        """Recompute (or load the shared) snapshot. On failure the previous one stays."""
        try:
            snapshot = await self._from_cache() if use_cache else None
            if snapshot is None:
                now = self.clock()
                counts = await self.event_log.click_counts_since(
                    now - timedelta(days=self.window_days)
                )
                snapshot = PopularitySnapshot(counts=counts, computed_at=now)
                await self._publish(snapshot)
        except Exception:
            logger.exception("Popularity refresh failed; keeping previous snapshot")
            return self._snapshot
        self._snapshot = snapshot
        logger.debug("Popularity snapshot refreshed: %d entities", len(snapshot.counts))
        return snapshot

    async def run_periodic(self, interval_seconds: float) -> None:
        """Refresh forever every interval_seconds (cancel to stop)."""
        while True:
            await self.refresh()
            await asyncio.sleep(interval_seconds)
