"""FastAPI application entry point.

Wiring only: services, lifespan, exception handlers, middleware, routers.
See catalog_search.core.container, .lifespan and .exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from catalog_search.api.v1 import api_router
from catalog_search.core.config import get_settings
from catalog_search.core.container import build_container
from catalog_search.core.exception_handlers import register_exception_handlers
from catalog_search.core.lifespan import create_lifespan
from catalog_search.core.limiter import limiter, rate_limit_exceeded_handler
from catalog_search.middleware import RequestIDMiddleware
from catalog_search.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.container = build_container(settings)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # First added = innermost. Request ID wraps CORS so every response carries it.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
