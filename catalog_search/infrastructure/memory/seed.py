"""JSON seed loading for the memory backend.

File shape (camelCase keys)::

    {
      "entities": [{"id": ..., "entityType": "asset", "title": ..., ...}],
      "principals": [{"userId": ..., "role": "brand", "brandId": ...}]
    }
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.searchable import (
    LicenseGrant,
    Participation,
    SearchableEntity,
)
from catalog_search.domain.enums import EntityType, Role
from catalog_search.infrastructure.memory.entity_index import InMemoryEntityIndex
from catalog_search.infrastructure.memory.repositories import InMemoryPrincipalDirectory
from catalog_search.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class _SeedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParticipationSeed(_SeedModel):
    creator_id: str
    ended_at: datetime | None = None


class GrantSeed(_SeedModel):
    brand_id: str
    status: str
    expires_at: datetime | None = None


class EntitySeed(_SeedModel):
    id: str
    entity_type: EntityType
    title: str
    status: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    kind: str | None = None
    project_id: str | None = None
    brand_id: str | None = None
    expires_at: datetime | None = None
    participants: list[ParticipationSeed] = Field(default_factory=list)
    grants: list[GrantSeed] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> SearchableEntity:
        return SearchableEntity(
            id=self.id,
            entity_type=self.entity_type,
            title=self.title,
            status=self.status,
            owner_id=self.owner_id,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
            description=self.description,
            tags=tuple(self.tags),
            kind=self.kind,
            project_id=self.project_id,
            brand_id=self.brand_id,
            expires_at=ensure_utc(self.expires_at),
            participants=tuple(
                Participation(p.creator_id, ensure_utc(p.ended_at)) for p in self.participants
            ),
            grants=tuple(
                LicenseGrant(g.brand_id, g.status, ensure_utc(g.expires_at)) for g in self.grants
            ),
            metadata=dict(self.metadata),
        )


class PrincipalSeed(_SeedModel):
    user_id: str
    role: Role
    creator_id: str | None = None
    brand_id: str | None = None

    def to_domain(self) -> Principal:
        return Principal(
            user_id=self.user_id,
            role=self.role,
            creator_id=self.creator_id,
            brand_id=self.brand_id,
        )


class SeedFile(_SeedModel):
    entities: list[EntitySeed] = Field(default_factory=list)
    principals: list[PrincipalSeed] = Field(default_factory=list)


def load_seed(
    path: str | Path, index: InMemoryEntityIndex, directory: InMemoryPrincipalDirectory
) -> tuple[int, int]:
    """Load entities and principals from path; returns (entities, principals) loaded."""
    seed = SeedFile.model_validate_json(Path(path).read_text(encoding="utf-8"))
    for entity in seed.entities:
        index.upsert(entity.to_domain())
    for principal in seed.principals:
        directory.put(principal.to_domain())
    logger.info(
        "Loaded seed %s: %d entities, %d principals",
        path,
        len(seed.entities),
        len(seed.principals),
    )
    return len(seed.entities), len(seed.principals)
