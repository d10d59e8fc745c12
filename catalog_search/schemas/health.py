"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    backend: str = Field(..., description="Storage backend in use (memory | postgres)")
    indexed_entities: int | None = Field(
        default=None, description="Entities held by the in-memory index; null for postgres"
    )
