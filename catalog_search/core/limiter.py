"""Rate limiting: SlowAPI per-IP limiter and per-identity sliding windows.

The SlowAPI instance is shared so both main (app.state.limiter) and route
modules can use the same instance without circular imports. Per-identity
budgets (searches, suggestions, saved-search writes) use the moving-window
strategy from the limits library that SlowAPI is built on, so the reset
time can be reported to the caller.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from limits import parse
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from catalog_search.core.config import Settings, get_settings
from catalog_search.core.constants import (
    RATE_CATEGORY_SAVED_SEARCH_WRITES,
    RATE_CATEGORY_SEARCH,
    RATE_CATEGORY_SUGGESTIONS,
)
from catalog_search.domain.exceptions import RateLimitException
from catalog_search.shared.utils.datetime import from_timestamp_utc

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

# Route names whose over-budget requests are dropped instead of rejected.
BEST_EFFORT_ROUTES = frozenset({"track_click"})


def click_ip_limit() -> str:
    """Per-IP budget for click tracking, read from settings at request time."""
    return get_settings().click_ip_rate_limit


# Click tracking is high volume and carries no per-identity budget; guard it per IP.
limit_clicks = limiter.limit(click_ip_limit)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 from SlowAPI, except for best-effort routes which report success.

    A dropped click is logged and never recorded; the caller cannot tell.
    """
    route = request.scope.get("route")
    if getattr(route, "name", None) in BEST_EFFORT_ROUTES:
        logger.warning(
            "Dropped %s from %s: over limit %s",
            route.name,
            get_remote_address(request),
            exc.detail,
        )
        return JSONResponse(status_code=200, content={"success": True})
    return _rate_limit_exceeded_handler(request, exc)


class IdentityRateLimiter:
    """Moving-window limiter keyed by (category, identity).

    check() records a hit and raises RateLimitException carrying the window
    reset time when the identity is over budget for the category.
    """

    def __init__(self, limits_by_category: dict[str, str], storage_uri: str = "memory://") -> None:
        self._storage = storage_from_string(storage_uri)
        self._strategy = MovingWindowRateLimiter(self._storage)
        self._limits = {
            category: (raw, parse(raw)) for category, raw in limits_by_category.items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityRateLimiter":
        return cls(
            {
                RATE_CATEGORY_SEARCH: settings.search_rate_limit,
                RATE_CATEGORY_SUGGESTIONS: settings.suggestion_rate_limit,
                RATE_CATEGORY_SAVED_SEARCH_WRITES: settings.saved_search_write_limit,
            },
            storage_uri=settings.rate_limit_storage_uri,
        )

    def check(self, category: str, identity: str) -> None:
        """Count one request for identity in category; raise when over budget."""
        raw, item = self._limits[category]
        if self._strategy.hit(item, category, identity):
            return
        reset_time, _remaining = self._strategy.get_window_stats(item, category, identity)
        raise RateLimitException(category, raw, from_timestamp_utc(reset_time))

    def reset(self) -> None:
        """Clear all windows (tests and admin tooling)."""
        self._storage.reset()
