"""Presentation-layer dependency injection.

Routes depend only on these; services come from the container wired in
create_app() (app.state.container). The caller is resolved from the bearer
token on every request, and per-identity rate limits are enforced here
before any use case runs.
"""

from collections.abc import AsyncIterator, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog_search.application.interfaces.repositories import ISavedSearchRepository
from catalog_search.application.use_cases.analytics import SearchAnalyticsService
from catalog_search.application.use_cases.autocomplete import AutocompleteService
from catalog_search.application.use_cases.related import RelatedContentService
from catalog_search.application.use_cases.saved_searches import SavedSearchService
from catalog_search.application.use_cases.search import SearchService
from catalog_search.core.constants import (
    RATE_CATEGORY_SAVED_SEARCH_WRITES,
    RATE_CATEGORY_SEARCH,
    RATE_CATEGORY_SUGGESTIONS,
)
from catalog_search.core.container import ServiceContainer
from catalog_search.domain.entities.principal import Principal

_http_bearer = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    container: ContainerDep,
) -> Principal:
    """Resolve the caller from the bearer token; AuthenticationException (401) otherwise."""
    token = credentials.credentials if credentials else None
    return await container.identity.resolve(token)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def rate_limited(category: str) -> Callable[..., Principal]:
    """Dependency factory: resolve the caller and count one hit in category."""

    def _check(principal: CurrentPrincipal, container: ContainerDep) -> Principal:
        container.rate_limiter.check(category, principal.user_id)
        return principal

    return _check


SearchPrincipal = Annotated[Principal, Depends(rate_limited(RATE_CATEGORY_SEARCH))]
SuggestionPrincipal = Annotated[Principal, Depends(rate_limited(RATE_CATEGORY_SUGGESTIONS))]
SavedSearchWriter = Annotated[
    Principal, Depends(rate_limited(RATE_CATEGORY_SAVED_SEARCH_WRITES))
]


def get_search_service(container: ContainerDep) -> SearchService:
    return container.search


def get_autocomplete_service(container: ContainerDep) -> AutocompleteService:
    return container.autocomplete


def get_related_service(container: ContainerDep) -> RelatedContentService:
    return container.related


def get_analytics_service(container: ContainerDep) -> SearchAnalyticsService:
    return container.analytics


async def get_saved_search_repo(
    container: ContainerDep,
) -> AsyncIterator[ISavedSearchRepository]:
    """In-process store, or a Postgres repository bound to a per-request transaction."""
    if container.saved_searches is not None:
        yield container.saved_searches
        return
    from catalog_search.infrastructure.persistence.database import get_db_transactional
    from catalog_search.infrastructure.persistence.repositories import SavedSearchRepository

    async for session in get_db_transactional():
        yield SavedSearchRepository(session)


async def get_saved_search_service(
    container: ContainerDep,
    repo: Annotated[ISavedSearchRepository, Depends(get_saved_search_repo)],
) -> SavedSearchService:
    return SavedSearchService(repo, container.search)


SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
AutocompleteServiceDep = Annotated[AutocompleteService, Depends(get_autocomplete_service)]
RelatedServiceDep = Annotated[RelatedContentService, Depends(get_related_service)]
AnalyticsServiceDep = Annotated[SearchAnalyticsService, Depends(get_analytics_service)]
SavedSearchServiceDep = Annotated[SavedSearchService, Depends(get_saved_search_service)]
