"""Saved search use cases: owner-scoped CRUD and re-execution.

Absent and not-owned saved searches are reported identically
(ResourceNotFoundException). Execute re-validates the stored definition and
runs it through SearchService with the caller's current principal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from catalog_search.application.dtos.saved_search import SavedSearchCreate, SavedSearchUpdate
from catalog_search.application.dtos.search import SearchResult
from catalog_search.application.services.query_validator import (
    parse_entity_types,
    validate_search_query,
)
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.saved_search import SavedSearchEntity
from catalog_search.domain.exceptions import AuthorizationException, ResourceNotFoundException
from catalog_search.shared.utils.datetime import utc_now
from catalog_search.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import ISavedSearchRepository
    from catalog_search.application.use_cases.search import SearchService

logger = logging.getLogger(__name__)

_RESOURCE = "SavedSearch"


class SavedSearchService:
    def __init__(
        self,
        repo: ISavedSearchRepository,
        search_service: SearchService,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repo
        self.search_service = search_service
        self.clock = clock

    async def _get_owned(self, principal: Principal, saved_search_id: str) -> SavedSearchEntity:
        saved = await self.repo.get_by_id(saved_search_id)
        if saved is None or not saved.is_owned_by(principal.user_id):
            raise ResourceNotFoundException(_RESOURCE, saved_search_id)
        return saved

    @staticmethod
    def _definition(query: str, entity_types: list[str] | None, filters: dict) -> dict:
        return {"query": query, "entityTypes": entity_types or None, "filters": filters}

    @classmethod
    def _check_definition(cls, query: str, entity_types: list[str], filters: dict) -> list[str]:
        """Reject at save time any definition that execute would reject."""
        validate_search_query(cls._definition(query, entity_types, filters))
        return [t.value for t in parse_entity_types(entity_types)]

    async def create(self, principal: Principal, data: SavedSearchCreate) -> SavedSearchEntity:
        entity_types = self._check_definition(data.query, data.entity_types, data.filters)
        now = self.clock()
        saved = SavedSearchEntity(
            id=generate_cuid(),
            owner_id=principal.user_id,
            name=data.name,
            query=data.query,
            entity_types=entity_types,
            created_at=now,
            updated_at=now,
            filters=dict(data.filters),
        )
        created = await self.repo.create(saved)
        logger.info("Saved search %s created for %s", created.id, principal.user_id)
        return created

    async def list_for_owner(self, principal: Principal) -> list[SavedSearchEntity]:
        return await self.repo.list_by_owner(principal.user_id)

    async def get(self, principal: Principal, saved_search_id: str) -> SavedSearchEntity:
        return await self._get_owned(principal, saved_search_id)

    async def update(
        self, principal: Principal, saved_search_id: str, data: SavedSearchUpdate
    ) -> SavedSearchEntity:
        """Apply a partial update; fields left as None are unchanged."""
        saved = await self._get_owned(principal, saved_search_id)
        if data.is_empty():
            return saved
        entity_types = data.entity_types if data.entity_types is not None else saved.entity_types
        filters = data.filters if data.filters is not None else saved.filters
        query = data.query if data.query is not None else saved.query
        entity_types = self._check_definition(query, entity_types, filters)
        updated = SavedSearchEntity(
            id=saved.id,
            owner_id=saved.owner_id,
            name=data.name if data.name is not None else saved.name,
            query=query,
            entity_types=entity_types,
            created_at=saved.created_at,
            updated_at=self.clock(),
            filters=dict(filters),
        )
        return await self.repo.update(updated)

    async def delete(self, principal: Principal, saved_search_id: str) -> None:
        await self._get_owned(principal, saved_search_id)
        await self.repo.delete(saved_search_id)
        logger.info("Saved search %s deleted by %s", saved_search_id, principal.user_id)

    async def delete_for_owner(self, principal: Principal, owner_id: str) -> int:
        """Cascade delete on account removal. Admin only."""
        if not principal.is_admin:
            raise AuthorizationException(resource="saved_search", action="delete")
        removed = await self.repo.delete_by_owner(owner_id)
        logger.info("Deleted %d saved searches for owner %s", removed, owner_id)
        return removed

    async def execute(
        self,
        principal: Principal,
        saved_search_id: str,
        page: int | None = None,
        limit: int | None = None,
    ) -> SearchResult:
        """Re-run the stored definition with the caller's current visibility."""
        saved = await self._get_owned(principal, saved_search_id)
        raw = self._definition(saved.query, saved.entity_types, saved.filters)
        raw.update(page=page, limit=limit)
        query = validate_search_query(raw)
        return await self.search_service.execute(principal, query)
