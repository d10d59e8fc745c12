"""Fire-and-forget analytics recording.

Search and click events are put on a bounded asyncio queue and written to the
event log by a single background worker started in the app lifespan. A full
queue or a failing store drops the event with a log line; the request that
produced it is never delayed or failed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IAnalyticsEventLog

logger = logging.getLogger(__name__)


class AnalyticsTracker:
    """IAnalyticsTracker backed by an asyncio queue and one worker task."""

    def __init__(self, event_log: IAnalyticsEventLog, maxsize: int = 10_000) -> None:
        self.event_log = event_log
        self._queue: asyncio.Queue[SearchEvent | ClickEvent] = asyncio.Queue(maxsize=maxsize)
        self._task: asyncio.Task[None] | None = None
        self.dropped = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def _enqueue(self, event: SearchEvent | ClickEvent) -> None:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Analytics queue full; dropped %s %s", type(event).__name__, event.id
            )

    def record_search(self, event: SearchEvent) -> None:
        self._enqueue(event)

    def record_click(self, event: ClickEvent) -> None:
        self._enqueue(event)

    async def _write(self, event: SearchEvent | ClickEvent) -> None:
        try:
            if isinstance(event, SearchEvent):
                await self.event_log.append_search(event)
            else:
                await self.event_log.append_click(event)
        except Exception:
            self.failed += 1
            logger.exception("Failed to persist %s %s", type(event).__name__, event.id)

    async def run(self) -> None:
        """Worker loop: persist events until cancelled."""
        while True:
            event = await self._queue.get()
            try:
                await self._write(event)
            finally:
                self._queue.task_done()

    async def drain(self) -> int:
        """Persist everything currently queued in the calling task; returns count written."""
        written = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return written
            try:
                await self._write(event)
                written += 1
            finally:
                self._queue.task_done()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="analytics-tracker")
            logger.info("Analytics tracker started")

    async def stop(self, timeout: float = 5.0) -> None:
        """Flush what is queued (bounded by timeout) and stop the worker."""
        if self._task is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except TimeoutError:
            logger.warning("Analytics tracker stopped with %d events unflushed", self.pending)
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Analytics tracker stopped")
