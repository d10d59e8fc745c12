"""Search API: search, suggestions, related content, clicks and recent searches."""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from catalog_search.api.v1.dependencies import (
    AnalyticsServiceDep,
    AutocompleteServiceDep,
    CurrentPrincipal,
    RelatedServiceDep,
    SearchPrincipal,
    SearchServiceDep,
    SuggestionPrincipal,
)
from catalog_search.core.limiter import limit_clicks
from catalog_search.schemas.search import (
    ClickRequest,
    RecentSearchesResponse,
    RecentSearchResponse,
    RelatedContentResponse,
    RelatedItemResponse,
    SearchRequest,
    SearchResponse,
    SuggestionResponse,
    SuggestionsResponse,
    SuccessResponse,
)

router = APIRouter()


def _split_types(values: list[str] | None) -> list[str] | None:
    """Accept repeated ?entityTypes=a&entityTypes=b as well as a comma-separated value."""
    if not values:
        return None
    return [part.strip() for value in values for part in value.split(",") if part.strip()]


@router.post("", response_model=SearchResponse)
async def search(
    body: SearchRequest,
    principal: SearchPrincipal,
    search_svc: SearchServiceDep,
) -> SearchResponse:
    """Search assets, creators, projects and licenses visible to the caller."""
    result = await search_svc.search(principal, body.to_raw())
    return SearchResponse.from_result(result)


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    principal: SuggestionPrincipal,
    autocomplete_svc: AutocompleteServiceDep,
    query: str = Query(..., description="Title prefix (2-100 characters)"),
    limit: int | None = Query(None, description="Maximum suggestions (1-20, default 10)"),
    entity_types: Annotated[list[str] | None, Query(alias="entityTypes")] = None,
) -> SuggestionsResponse:
    """Title suggestions grouped by normalized title, ordered by popularity and recency."""
    items = await autocomplete_svc.suggest(
        principal, query, limit=limit, entity_types=_split_types(entity_types)
    )
    return SuggestionsResponse(suggestions=[SuggestionResponse.from_suggestion(s) for s in items])


@router.post("/clicks", response_model=SuccessResponse)
@limit_clicks
async def track_click(
    request: Request,
    body: ClickRequest,
    _principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
) -> SuccessResponse:
    """Record a result click. Tracking is best effort; the response is always success."""
    analytics_svc.track_click(
        event_id=body.event_id,
        result_id=body.result_id,
        position=body.position,
        entity_type=body.entity_type.value,
    )
    return SuccessResponse()


@router.get("/recent", response_model=RecentSearchesResponse)
async def recent_searches(
    principal: CurrentPrincipal,
    analytics_svc: AnalyticsServiceDep,
    limit: int = Query(10, ge=1, le=50),
) -> RecentSearchesResponse:
    """Caller's recent distinct queries, newest first."""
    items = await analytics_svc.recent_searches(principal, limit=limit)
    return RecentSearchesResponse(
        searches=[RecentSearchResponse.model_validate(item) for item in items]
    )


@router.get("/related/{entity_id}", response_model=RelatedContentResponse)
async def related_content(
    entity_id: str,
    principal: SearchPrincipal,
    related_svc: RelatedServiceDep,
    limit: int | None = Query(None, description="Maximum results (1-50, default 10)"),
    entity_types: Annotated[list[str] | None, Query(alias="entityTypes")] = None,
    relationships: Annotated[list[str] | None, Query()] = None,
) -> RelatedContentResponse:
    """Entities sharing a project, brand, tags or creator with entity_id.

    Returns 404 when the entity does not exist or the caller cannot see it.
    """
    items = await related_svc.related(
        principal,
        entity_id,
        limit=limit,
        entity_types=_split_types(entity_types),
        relationships=_split_types(relationships),
    )
    return RelatedContentResponse(
        source_id=entity_id, results=[RelatedItemResponse.from_item(i) for i in items]
    )
