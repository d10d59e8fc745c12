"""In-process backend: entity index, stores and JSON seed loader."""

from catalog_search.infrastructure.memory.entity_index import InMemoryEntityIndex
from catalog_search.infrastructure.memory.repositories import (
    InMemoryAnalyticsEventLog,
    InMemoryPrincipalDirectory,
    InMemorySavedSearchRepository,
)
from catalog_search.infrastructure.memory.seed import load_seed

__all__ = [
    "InMemoryAnalyticsEventLog",
    "InMemoryEntityIndex",
    "InMemoryPrincipalDirectory",
    "InMemorySavedSearchRepository",
    "load_seed",
]
