"""SearchService end-to-end over the in-memory index."""

from unittest.mock import MagicMock

import pytest

from catalog_search.application.dtos.analytics import PopularitySnapshot
from catalog_search.application.services.query_validator import validate_search_query
from catalog_search.application.services.spelling import SpellingSuggester
from catalog_search.application.use_cases.search import SearchService
from catalog_search.domain.entities.analytics import SearchEvent
from catalog_search.domain.exceptions import ValidationException
from catalog_search.infrastructure.memory.entity_index import InMemoryEntityIndex


class _StaticPopularity:
    def snapshot(self) -> PopularitySnapshot:
        return PopularitySnapshot(counts={})


@pytest.fixture
def index(catalog) -> InMemoryEntityIndex:
    return InMemoryEntityIndex(catalog)


@pytest.fixture
def tracker() -> MagicMock:
    return MagicMock()


@pytest.fixture
def service(index, tracker, now) -> SearchService:
    return SearchService(
        index,
        _StaticPopularity(),
        tracker=tracker,
        spelling=SpellingSuggester(index),
        clock=lambda: now,
    )


async def test_filtered_asset_search(service, principals) -> None:
    """Asset type and status filters narrow results; facets match the total."""
    result = await service.search(
        principals["admin-user"],
        {
            "query": "brand logo",
            "filters": {"assetType": ["IMAGE"], "assetStatus": ["APPROVED", "PUBLISHED"]},
            "page": 1,
            "limit": 20,
        },
    )
    assert {r.entity.id for r in result.results} == {"a1", "a4"}
    assert all(r.entity.kind == "IMAGE" for r in result.results)
    assert all(r.entity.status in {"APPROVED", "PUBLISHED"} for r in result.results)
    assert result.pagination.total == 2
    assert result.facets.get("assetTypes") == {"IMAGE": 2}
    assert sum(result.facets.get("entityTypes").values()) == 2


async def test_results_carry_breakdown_and_highlights(service, principals) -> None:
    result = await service.search(principals["admin-user"], {"query": "brand logo"})
    top = result.results[0]
    assert top.relevance_score == top.breakdown.final
    assert "<mark>" in top.highlights["title"]
    assert result.query == "brand logo"
    assert result.execution_time_ms >= 0


async def test_short_query_rejected(service, principals) -> None:
    with pytest.raises(ValidationException):
        await service.search(principals["admin-user"], {"query": "l"})


async def test_creator_without_participation_gets_empty_assets(service, principals) -> None:
    """No active participation means no assets, not an error."""
    result = await service.search(
        principals["idle-creator"], {"query": "logo", "entityTypes": ["asset"]}
    )
    assert result.results == []
    assert result.pagination.total == 0
    assert result.pagination.total_pages == 0


async def test_creator_sees_only_participations(service, principals) -> None:
    result = await service.search(principals["creator-user"], {"query": "logo"})
    assert {r.entity.id for r in result.results} == {"a1", "a2", "p1", "c1"}
    assert result.pagination.total == 4


async def test_search_event_recorded(service, tracker, principals) -> None:
    """Each search hands one event to the tracker with the response's event id."""
    result = await service.search(principals["brand-user"], {"query": "logo"})
    tracker.record_search.assert_called_once()
    event = tracker.record_search.call_args.args[0]
    assert isinstance(event, SearchEvent)
    assert event.id == result.search_event_id
    assert event.actor_id == "brand-user"
    assert event.result_count == result.pagination.total
    assert event.entity_types == ("asset", "creator", "project", "license")


async def test_execute_without_recording(service, tracker, principals) -> None:
    query = validate_search_query({"query": "logo"})
    result = await service.execute(principals["admin-user"], query, record=False)
    assert result.search_event_id is None
    tracker.record_search.assert_not_called()


async def test_did_you_mean_on_low_results(service, principals) -> None:
    result = await service.search(principals["admin-user"], {"query": "brand lgo"})
    assert result.pagination.total == 0
    assert result.did_you_mean is not None
    assert result.did_you_mean.suggested_query == "brand logo"


async def test_capped_candidates_fill_every_page(index, principals, now) -> None:
    """Pages inside totalPages are never empty when matches exceed the cap."""
    capped = SearchService(index, _StaticPopularity(), max_candidates=2, clock=lambda: now)
    full = await capped.search(principals["admin-user"], {"query": "logo", "limit": 10})
    third = await capped.search(
        principals["admin-user"], {"query": "logo", "limit": 2, "page": 3}
    )
    last = await capped.search(
        principals["admin-user"], {"query": "logo", "limit": 2, "page": 4}
    )
    assert third.pagination.total == 7
    assert third.pagination.total_pages == 4
    assert len(third.results) == 2
    assert len(last.results) == 1
    assert len(full.results) == 7


async def test_cap_keeps_strongest_title_match(make_entity, principals, now) -> None:
    """An older exact-title match survives the cap and ranks first."""
    entities = [
        make_entity(f"n{i}", title=f"Brand new logo pack {i}", created_days_ago=i)
        for i in range(3)
    ]
    entities.append(make_entity("exact", title="Brand logo", created_days_ago=20))
    capped = SearchService(
        InMemoryEntityIndex(entities), _StaticPopularity(), max_candidates=3, clock=lambda: now
    )
    result = await capped.search(
        principals["admin-user"], {"query": "brand logo", "limit": 1}
    )
    assert result.pagination.total == 4
    assert [r.entity.id for r in result.results] == ["exact"]


async def test_capped_field_sort_keeps_oldest(make_entity, principals, now) -> None:
    """created_at asc under a cap returns the oldest matches, not the newest."""
    entities = [
        make_entity(f"e{i}", title=f"Logo {i}", created_days_ago=i) for i in range(5)
    ]
    capped = SearchService(
        InMemoryEntityIndex(entities), _StaticPopularity(), max_candidates=2, clock=lambda: now
    )
    result = await capped.search(
        principals["admin-user"],
        {"query": "logo", "limit": 2, "sortBy": "created_at", "sortOrder": "asc"},
    )
    assert [r.entity.id for r in result.results] == ["e4", "e3"]


async def test_pages_do_not_overlap(service, principals) -> None:
    first = await service.search(principals["admin-user"], {"query": "logo", "limit": 3})
    second = await service.search(
        principals["admin-user"], {"query": "logo", "limit": 3, "page": 2}
    )
    first_ids = {r.entity.id for r in first.results}
    second_ids = {r.entity.id for r in second.results}
    assert len(first_ids) == 3
    assert first_ids.isdisjoint(second_ids)
