"""Principal directory (Postgres)."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.enums import Role
from catalog_search.infrastructure.persistence.models.principal import PrincipalModel

logger = logging.getLogger(__name__)


class PrincipalRepository:
    """IPrincipalDirectory on the principal table.

    Looked up once per request by the identity resolver, which outlives any
    single request session, so each lookup opens its own session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, user_id: str) -> Principal | None:
        async with self.session_factory() as session:
            row = await session.get(PrincipalModel, user_id)
        if row is None:
            return None
        try:
            role = Role(row.role)
        except ValueError:
            # Kept unresolved; visibility for an unknown role matches nothing.
            logger.warning("Principal %s has unknown role %r", user_id, row.role)
            return Principal(user_id=row.user_id, role=row.role)  # type: ignore[arg-type]
        return Principal(
            user_id=row.user_id,
            role=role,
            creator_id=row.creator_id,
            brand_id=row.brand_id,
        )
