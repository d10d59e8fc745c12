"""Searchable entity projection ORM models.

Tables: searchable_entity, entity_participant, entity_license_grant. Rows
are written by the owning domains' sync jobs; search only reads them.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Connection, DateTime, ForeignKey, Index, String, Text, event
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, Mapper, mapped_column, relationship

from catalog_search.infrastructure.persistence.database import Base
from catalog_search.infrastructure.persistence.models.mixins import CuidMixin


class SearchableEntityModel(Base):
    """Indexed projection of an asset, creator, project or license. Table: searchable_entity."""

    __tablename__ = "searchable_entity"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    entity_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    # Lowercased copy of tags for case-insensitive containment; kept in sync on write.
    tags_normalized: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list
    )
    status: Mapped[str] = mapped_column(String, nullable=False, index=True)
    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    kind: Mapped[str | None] = mapped_column(String, index=True)
    project_id: Mapped[str | None] = mapped_column(String, index=True)
    brand_id: Mapped[str | None] = mapped_column(String, index=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    entity_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONB, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    participants: Mapped[list["EntityParticipantModel"]] = relationship(
        back_populates="entity", cascade="all, delete-orphan", lazy="selectin"
    )
    grants: Mapped[list["EntityLicenseGrantModel"]] = relationship(
        back_populates="entity", cascade="all, delete-orphan", lazy="selectin"
    )

    __table_args__ = (
        Index("ix_searchable_entity_updated_id", "updated_at", "id"),
        Index("ix_searchable_entity_type_created", "entity_type", "created_at"),
    )


class EntityParticipantModel(CuidMixin, Base):
    """Creator participation on an entity; active while ended_at is null or future."""

    __tablename__ = "entity_participant"

    entity_id: Mapped[str] = mapped_column(
        String, ForeignKey("searchable_entity.id", ondelete="CASCADE"), nullable=False
    )
    creator_id: Mapped[str] = mapped_column(String, nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    entity: Mapped[SearchableEntityModel] = relationship(back_populates="participants")

    __table_args__ = (
        Index("ix_entity_participant_creator_entity", "creator_id", "entity_id"),
    )


class EntityLicenseGrantModel(CuidMixin, Base):
    """License grant covering an entity for a brand."""

    __tablename__ = "entity_license_grant"

    entity_id: Mapped[str] = mapped_column(
        String, ForeignKey("searchable_entity.id", ondelete="CASCADE"), nullable=False
    )
    brand_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    entity: Mapped[SearchableEntityModel] = relationship(back_populates="grants")

    __table_args__ = (
        Index("ix_entity_license_grant_brand_entity", "brand_id", "entity_id"),
    )


@event.listens_for(SearchableEntityModel, "before_insert")
@event.listens_for(SearchableEntityModel, "before_update")
def _normalize_tags(
    _mapper: Mapper[Any], _connection: Connection, target: SearchableEntityModel
) -> None:
    """Keep tags_normalized equal to the lowercased tags."""
    target.tags_normalized = [t.casefold() for t in (target.tags or [])]
