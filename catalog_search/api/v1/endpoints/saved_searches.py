"""Saved searches API: owner-scoped CRUD, execution and owner cascade delete."""

from fastapi import APIRouter, Response, status

from catalog_search.api.v1.dependencies import (
    CurrentPrincipal,
    SavedSearchServiceDep,
    SavedSearchWriter,
    SearchPrincipal,
)
from catalog_search.application.dtos.saved_search import SavedSearchCreate, SavedSearchUpdate
from catalog_search.schemas.saved_search import (
    DeletedCountResponse,
    SavedSearchCreateRequest,
    SavedSearchExecuteRequest,
    SavedSearchListResponse,
    SavedSearchResponse,
    SavedSearchUpdateRequest,
)
from catalog_search.schemas.search import SearchResponse

router = APIRouter()


@router.post("", response_model=SavedSearchResponse, status_code=status.HTTP_201_CREATED)
async def create_saved_search(
    body: SavedSearchCreateRequest,
    principal: SavedSearchWriter,
    saved_svc: SavedSearchServiceDep,
) -> SavedSearchResponse:
    """Save a query definition owned by the caller."""
    saved = await saved_svc.create(
        principal,
        SavedSearchCreate(
            name=body.name,
            query=body.query,
            entity_types=body.entity_types,
            filters=body.filters,
        ),
    )
    return SavedSearchResponse.model_validate(saved)


@router.get("", response_model=SavedSearchListResponse)
async def list_saved_searches(
    principal: CurrentPrincipal,
    saved_svc: SavedSearchServiceDep,
) -> SavedSearchListResponse:
    """List the caller's saved searches, newest first."""
    items = await saved_svc.list_for_owner(principal)
    return SavedSearchListResponse(
        saved_searches=[SavedSearchResponse.model_validate(s) for s in items]
    )


@router.delete("/owners/{owner_id}", response_model=DeletedCountResponse)
async def delete_owner_saved_searches(
    owner_id: str,
    principal: CurrentPrincipal,
    saved_svc: SavedSearchServiceDep,
) -> DeletedCountResponse:
    """Remove every saved search of an owner (account deletion). Admin only."""
    deleted = await saved_svc.delete_for_owner(principal, owner_id)
    return DeletedCountResponse(deleted=deleted)


@router.get("/{saved_search_id}", response_model=SavedSearchResponse)
async def get_saved_search(
    saved_search_id: str,
    principal: CurrentPrincipal,
    saved_svc: SavedSearchServiceDep,
) -> SavedSearchResponse:
    saved = await saved_svc.get(principal, saved_search_id)
    return SavedSearchResponse.model_validate(saved)


@router.patch("/{saved_search_id}", response_model=SavedSearchResponse)
async def update_saved_search(
    saved_search_id: str,
    body: SavedSearchUpdateRequest,
    principal: SavedSearchWriter,
    saved_svc: SavedSearchServiceDep,
) -> SavedSearchResponse:
    """Partially update a saved search owned by the caller."""
    saved = await saved_svc.update(
        principal,
        saved_search_id,
        SavedSearchUpdate(
            name=body.name,
            query=body.query,
            entity_types=body.entity_types,
            filters=body.filters,
        ),
    )
    return SavedSearchResponse.model_validate(saved)


@router.delete("/{saved_search_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_search(
    saved_search_id: str,
    principal: SavedSearchWriter,
    saved_svc: SavedSearchServiceDep,
) -> Response:
    await saved_svc.delete(principal, saved_search_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{saved_search_id}/execute", response_model=SearchResponse)
async def execute_saved_search(
    saved_search_id: str,
    principal: SearchPrincipal,
    saved_svc: SavedSearchServiceDep,
    body: SavedSearchExecuteRequest | None = None,
) -> SearchResponse:
    """Run the stored definition with the caller's current visibility."""
    page = body.page if body else None
    limit = body.limit if body else None
    result = await saved_svc.execute(principal, saved_search_id, page=page, limit=limit)
    return SearchResponse.from_result(result)
