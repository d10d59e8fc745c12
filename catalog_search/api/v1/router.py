"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes take
their services from catalog_search.api.v1.dependencies.
"""

from fastapi import APIRouter

from catalog_search.api.v1.endpoints import analytics, health, saved_searches, search

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
# Analytics first so /search/analytics is not shadowed by search routes.
api_router.include_router(
    analytics.router, prefix="/search/analytics", tags=["search-analytics"]
)
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(
    saved_searches.router, prefix="/saved-searches", tags=["saved-searches"]
)
