"""Saved search ORM model. Table: saved_search."""

from typing import Any

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from catalog_search.infrastructure.persistence.database import Base
from catalog_search.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class SavedSearchModel(CuidMixin, TimestampMixin, Base):
    """Query definition owned by one identity; no permission snapshot is stored."""

    __tablename__ = "saved_search"

    owner_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    query: Mapped[str] = mapped_column(String(200), nullable=False)
    entity_types: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    filters: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
