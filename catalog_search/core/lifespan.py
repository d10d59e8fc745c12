"""Application lifespan: startup and shutdown.

Services are already wired on app.state.container by create_app(); this
only starts and stops background infrastructure (analytics worker,
popularity refresh loop, Redis cache, telemetry, DB engine dispose).
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from catalog_search.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: Redis cache (if enabled), analytics tracker, popularity
    refresh loop, telemetry (if enabled). Shutdown runs in reverse and
    finishes with the SQL engine dispose.
    """
    settings = get_settings()
    container = app.state.container

    # ---- Startup ----
    if settings.redis_enabled:
        from catalog_search.infrastructure.cache.redis_cache import CacheService

        cache = CacheService(settings=settings)
        await cache.connect()
        app.state.cache = cache
        container.popularity.cache = cache
    else:
        app.state.cache = None

    container.tracker.start()
    app.state.popularity_task = asyncio.create_task(
        container.popularity.run_periodic(settings.popularity_refresh_seconds),
        name="popularity-refresh",
    )

    if settings.telemetry_enabled:
        from catalog_search.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.setup() is not None:
            set_telemetry(telemetry)
            telemetry.instrument_fastapi(app)

    yield

    # ---- Shutdown ----
    popularity_task = getattr(app.state, "popularity_task", None)
    if popularity_task is not None:
        popularity_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await popularity_task
        logger.info("Popularity refresh task stopped")

    await container.tracker.stop()

    if getattr(app.state, "cache", None) is not None:
        container.popularity.cache = None
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    from catalog_search.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")

    from catalog_search.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
