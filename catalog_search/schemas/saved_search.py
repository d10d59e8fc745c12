"""Saved search API schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from catalog_search.schemas.base import CamelModel


class SavedSearchCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    query: str = Field(..., min_length=1, max_length=200)
    entity_types: list[str] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "query")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class SavedSearchUpdateRequest(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    query: str | None = Field(default=None, min_length=1, max_length=200)
    entity_types: list[str] | None = None
    filters: dict[str, Any] | None = None


class SavedSearchResponse(CamelModel):
    id: str
    owner_id: str
    name: str
    query: str
    entity_types: list[str]
    filters: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class SavedSearchListResponse(CamelModel):
    saved_searches: list[SavedSearchResponse]


class SavedSearchExecuteRequest(CamelModel):
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)


class DeletedCountResponse(CamelModel):
    deleted: int
