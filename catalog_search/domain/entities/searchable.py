"""Searchable entity projection.

Read-only projection of an asset, creator, project or license as the index
sees it. The owning domain mutates the source record; search never creates
or deletes these.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from catalog_search.domain.enums import EntityType, LicenseStatus


@dataclass(frozen=True)
class Participation:
    """Creator ownership/participation record on an entity.

    Active while ended_at is None or in the future.
    """

    creator_id: str
    ended_at: datetime | None = None

    def is_active(self, at: datetime) -> bool:
        return self.ended_at is None or self.ended_at > at


@dataclass(frozen=True)
class LicenseGrant:
    """License coverage of an asset for a brand."""

    brand_id: str
    status: str
    expires_at: datetime | None = None

    def is_active(self, at: datetime) -> bool:
        """Return True when the grant is ACTIVE and not expired at the given time."""
        if self.status.upper() != LicenseStatus.ACTIVE.value:
            return False
        return self.expires_at is None or self.expires_at > at


@dataclass(frozen=True)
class SearchableEntity:
    """Indexed projection of a domain entity.

    kind holds the asset/project/license type (None for creators).
    brand_id is the brand an asset's project or a license belongs to.
    """

    id: str
    entity_type: EntityType
    title: str
    status: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    tags: tuple[str, ...] = ()
    kind: str | None = None
    project_id: str | None = None
    brand_id: str | None = None
    expires_at: datetime | None = None
    participants: tuple[Participation, ...] = ()
    grants: tuple[LicenseGrant, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def attribute(self, name: str) -> Any:
        """Return a filterable attribute by name (used by predicates and facets)."""
        if name == "entity_type":
            return self.entity_type.value
        return getattr(self, name)
