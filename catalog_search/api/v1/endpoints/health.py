"""Health check endpoint. No authentication; used for liveness probes."""

from fastapi import APIRouter

from catalog_search.api.v1.dependencies import ContainerDep
from catalog_search.infrastructure.memory import InMemoryEntityIndex
from catalog_search.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(container: ContainerDep) -> HealthResponse:
    """Return ok with the active backend."""
    index = container.index
    return HealthResponse(
        backend=container.settings.database_backend,
        indexed_entities=len(index) if isinstance(index, InMemoryEntityIndex) else None,
    )
