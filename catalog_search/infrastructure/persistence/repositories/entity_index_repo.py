"""Postgres entity index. Predicates are compiled into the WHERE clause.

Fuzzy autocomplete uses pg_trgm similarity(); the extension and a trigram
index on title are created by the initial migration.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_search.domain.entities.searchable import (
    LicenseGrant,
    Participation,
    SearchableEntity,
)
from catalog_search.domain.enums import EntityType
from catalog_search.domain.exceptions import IndexUnavailableException
from catalog_search.domain.value_objects.predicates import FILTERABLE_FIELDS, Predicate
from catalog_search.domain.value_objects.ranking import RetrievalOrder
from catalog_search.infrastructure.persistence.models.searchable import SearchableEntityModel
from catalog_search.infrastructure.persistence.repositories.predicate_compiler import (
    column_for,
    compile_order,
    compile_predicate,
    escape_like,
)
from catalog_search.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")

_E = SearchableEntityModel
_WORD_RE = re.compile(r"\w+")
# pg_trgm similarity() threshold for fuzzy prefix hits.
TRIGRAM_THRESHOLD = 0.3


def to_domain(row: SearchableEntityModel) -> SearchableEntity:
    return SearchableEntity(
        id=row.id,
        entity_type=EntityType(row.entity_type),
        title=row.title,
        status=row.status,
        owner_id=row.owner_id,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
        description=row.description,
        tags=tuple(row.tags or ()),
        kind=row.kind,
        project_id=row.project_id,
        brand_id=row.brand_id,
        expires_at=ensure_utc(row.expires_at),
        participants=tuple(
            Participation(p.creator_id, ensure_utc(p.ended_at)) for p in row.participants
        ),
        grants=tuple(
            LicenseGrant(g.brand_id, g.status, ensure_utc(g.expires_at)) for g in row.grants
        ),
        metadata=dict(row.entity_metadata or {}),
    )


class SqlEntityIndex:
    """IEntityIndex over the searchable_entity projection tables.

    Each lookup opens its own short-lived session so search can run retrieval,
    counting and facet queries concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def _guard(
        self, operation: str, call: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        try:
            async with self.session_factory() as session:
                return await call(session)
        except SQLAlchemyError as e:
            logger.exception("Entity index %s failed", operation)
            raise IndexUnavailableException() from e

    async def find(
        self, predicate: Predicate, limit: int, order: RetrievalOrder | None = None
    ) -> list[SearchableEntity]:
        stmt = (
            select(_E)
            .where(compile_predicate(predicate))
            .order_by(*compile_order(order))
            .limit(limit)
        )

        async def run(db: AsyncSession) -> list[SearchableEntity]:
            result = await db.execute(stmt)
            return [to_domain(row) for row in result.scalars().all()]

        return await self._guard("find", run)

    async def count(self, predicate: Predicate) -> int:
        stmt = select(func.count()).select_from(_E).where(compile_predicate(predicate))

        async def run(db: AsyncSession) -> int:
            return int((await db.execute(stmt)).scalar_one())

        return await self._guard("count", run)

    async def count_by_field(self, predicate: Predicate, field: str) -> dict[str, int]:
        where = compile_predicate(predicate)
        if field == "tags":
            tag = func.unnest(_E.tags).label("tag")
            per_entity = select(_E.id, tag).where(where).distinct().subquery()
            stmt: Any = (
                select(per_entity.c.tag, func.count())
                .group_by(per_entity.c.tag)
            )
        elif field in FILTERABLE_FIELDS:
            column = column_for(field)
            stmt = (
                select(column, func.count())
                .where(where, column.is_not(None))
                .group_by(column)
            )
        else:
            raise ValueError(f"Unknown facet field: {field}")

        async def run(db: AsyncSession) -> dict[str, int]:
            result = await db.execute(stmt)
            return {str(value): int(count) for value, count in result.all()}

        return await self._guard("count_by_field", run)

    async def find_by_prefix(
        self, prefix: str, predicate: Predicate, limit: int
    ) -> list[SearchableEntity]:
        needle = prefix.strip()
        escaped = escape_like(needle)
        stmt = (
            select(_E)
            .where(
                compile_predicate(predicate),
                or_(
                    _E.title.ilike(f"{escaped}%", escape="\\"),
                    _E.title.ilike(f"% {escaped}%", escape="\\"),
                    func.similarity(_E.title, needle) > TRIGRAM_THRESHOLD,
                ),
            )
            .order_by(_E.updated_at.desc(), _E.id.asc())
            .limit(limit)
        )

        async def run(db: AsyncSession) -> list[SearchableEntity]:
            result = await db.execute(stmt)
            return [to_domain(row) for row in result.scalars().all()]

        return await self._guard("find_by_prefix", run)

    async def vocabulary(self, predicate: Predicate, limit: int = 5000) -> set[str]:
        stmt = (
            select(_E.title, _E.tags_normalized)
            .where(compile_predicate(predicate))
            .order_by(_E.updated_at.desc(), _E.id.asc())
            .limit(limit)
        )

        async def run(db: AsyncSession) -> set[str]:
            words: set[str] = set()
            for title, tags in (await db.execute(stmt)).all():
                for text in (title, *(tags or ())):
                    words.update(w for w in _WORD_RE.findall(text.lower()) if len(w) > 2)
            return words

        return await self._guard("vocabulary", run)

    async def get_by_id(self, entity_id: str) -> SearchableEntity | None:
        async def run(db: AsyncSession) -> SearchableEntity | None:
            row = await db.get(_E, entity_id)
            return to_domain(row) if row else None

        return await self._guard("get_by_id", run)
