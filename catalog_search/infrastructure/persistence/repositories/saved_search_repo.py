"""Saved search repository (Postgres)."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_search.domain.entities.saved_search import SavedSearchEntity
from catalog_search.domain.exceptions import ResourceNotFoundException
from catalog_search.infrastructure.persistence.models.saved_search import SavedSearchModel
from catalog_search.shared.utils.datetime import ensure_utc


def _to_domain(row: SavedSearchModel) -> SavedSearchEntity:
    return SavedSearchEntity(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        query=row.query,
        entity_types=list(row.entity_types or []),
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
        filters=dict(row.filters or {}),
    )


class SavedSearchRepository:
    """ISavedSearchRepository on the saved_search table. Caller owns the transaction."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, saved: SavedSearchEntity) -> SavedSearchEntity:
        row = SavedSearchModel(
            id=saved.id,
            owner_id=saved.owner_id,
            name=saved.name,
            query=saved.query,
            entity_types=list(saved.entity_types),
            filters=dict(saved.filters),
            created_at=saved.created_at,
            updated_at=saved.updated_at,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _to_domain(row)

    async def get_by_id(self, saved_search_id: str) -> SavedSearchEntity | None:
        row = await self.db.get(SavedSearchModel, saved_search_id)
        return _to_domain(row) if row else None

    async def list_by_owner(self, owner_id: str) -> list[SavedSearchEntity]:
        result = await self.db.execute(
            select(SavedSearchModel)
            .where(SavedSearchModel.owner_id == owner_id)
            .order_by(SavedSearchModel.created_at.desc(), SavedSearchModel.id.desc())
        )
        return [_to_domain(row) for row in result.scalars().all()]

    async def update(self, saved: SavedSearchEntity) -> SavedSearchEntity:
        row = await self.db.get(SavedSearchModel, saved.id)
        if row is None:
            raise ResourceNotFoundException("SavedSearch", saved.id)
        row.name = saved.name
        row.query = saved.query
        row.entity_types = list(saved.entity_types)
        row.filters = dict(saved.filters)
        row.updated_at = saved.updated_at
        await self.db.flush()
        await self.db.refresh(row)
        return _to_domain(row)

    async def delete(self, saved_search_id: str) -> bool:
        result = await self.db.execute(
            delete(SavedSearchModel).where(SavedSearchModel.id == saved_search_id)
        )
        return bool(result.rowcount)

    async def delete_by_owner(self, owner_id: str) -> int:
        result = await self.db.execute(
            delete(SavedSearchModel).where(SavedSearchModel.owner_id == owner_id)
        )
        return int(result.rowcount or 0)
