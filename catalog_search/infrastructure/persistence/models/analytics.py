"""Analytics event ORM models. Append-only; immutable after creation.

Tables: search_event, click_event.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Connection, DateTime, Index, Integer, String, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from catalog_search.infrastructure.persistence.database import Base


class SearchEventModel(Base):
    __tablename__ = "search_event"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    actor_id: Mapped[str | None] = mapped_column(String, index=True)
    query: Mapped[str] = mapped_column(String(200), nullable=False)
    entity_types: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    filters: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    result_count: Mapped[int] = mapped_column(Integer, nullable=False)
    execution_time_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_search_event_created_at", "created_at"),
        Index("ix_search_event_actor_created", "actor_id", "created_at"),
    )


class ClickEventModel(Base):
    __tablename__ = "click_event"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    event_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    result_id: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    entity_type: Mapped[str] = mapped_column(String(16), nullable=False)
    clicked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_click_event_clicked_result", "clicked_at", "result_id"),)


@event.listens_for(SearchEventModel, "before_update")
@event.listens_for(ClickEventModel, "before_update")
def _prevent_event_updates(_mapper: Mapper[Any], _connection: Connection, _target: Any) -> None:
    """Analytics events are append-only; updates are forbidden."""
    raise ValueError("Analytics events are immutable and cannot be updated.")
