"""Autocomplete suggestions under caller visibility."""

import pytest

from catalog_search.application.dtos.analytics import PopularitySnapshot
from catalog_search.application.use_cases.autocomplete import AutocompleteService, normalize_title
from catalog_search.domain.enums import EntityType
from catalog_search.domain.exceptions import ValidationException
from catalog_search.infrastructure.memory.entity_index import InMemoryEntityIndex


class _StaticPopularity:
    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self._snapshot = PopularitySnapshot(counts=counts or {})

    def snapshot(self) -> PopularitySnapshot:
        return self._snapshot


@pytest.fixture
def index(catalog) -> InMemoryEntityIndex:
    return InMemoryEntityIndex(catalog)


@pytest.fixture
def service(index, now) -> AutocompleteService:
    return AutocompleteService(index, _StaticPopularity(), clock=lambda: now)


async def test_ordered_by_recency_without_clicks(service, principals) -> None:
    """With no popularity spread, newer titles rank first."""
    suggestions = await service.suggest(principals["admin-user"], "brand")
    assert [s.id for s in suggestions] == ["a1", "p1", "a2", "a4"]
    assert suggestions[0].type == EntityType.ASSET
    assert suggestions[0].title == "Brand logo refresh"
    assert all(s.match_count == 1 for s in suggestions)


async def test_limit_truncates(service, principals) -> None:
    suggestions = await service.suggest(principals["admin-user"], "brand", limit=2)
    assert [s.id for s in suggestions] == ["a1", "p1"]


async def test_popularity_lifts_older_title(index, principals, now) -> None:
    service = AutocompleteService(index, _StaticPopularity({"a4": 50}), clock=lambda: now)
    suggestions = await service.suggest(principals["admin-user"], "brand")
    assert suggestions[0].id == "a4"


async def test_visibility_applies(service, principals) -> None:
    """Creators only get suggestions they may see."""
    suggestions = await service.suggest(principals["creator-user"], "brand")
    assert [s.id for s in suggestions] == ["a1", "p1", "a2"]
    assert await service.suggest(principals["no-profile-creator"], "brand") == []


async def test_duplicate_titles_grouped(index, make_entity, principals, now) -> None:
    """Entities sharing a normalized title become one suggestion with a match count."""
    index.upsert(make_entity("z9", title="brand  LOGO refresh", created_days_ago=30))
    service = AutocompleteService(index, _StaticPopularity(), clock=lambda: now)
    suggestions = await service.suggest(principals["admin-user"], "brand", entity_types=["asset"])
    first = suggestions[0]
    assert first.id == "a1"
    assert first.match_count == 2
    assert len(suggestions) == 3


async def test_invalid_prefix(service, principals) -> None:
    with pytest.raises(ValidationException):
        await service.suggest(principals["admin-user"], "b")


def test_normalize_title() -> None:
    assert normalize_title("  Brand   LOGO ") == "brand logo"
