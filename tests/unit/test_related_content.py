"""RelatedContentService over the in-memory index."""

import pytest

from catalog_search.application.use_cases.related import RelatedContentService, relation_score
from catalog_search.domain.enums import EntityType, RelationshipType
from catalog_search.domain.exceptions import ResourceNotFoundException, ValidationException
from catalog_search.infrastructure.memory.entity_index import InMemoryEntityIndex


@pytest.fixture
def index(catalog) -> InMemoryEntityIndex:
    return InMemoryEntityIndex(catalog)


@pytest.fixture
def service(index, now) -> RelatedContentService:
    return RelatedContentService(index, clock=lambda: now)


def _ids(items) -> list[str]:
    return [item.entity.id for item in items]


async def test_ordered_by_strength_then_recency(service, principals) -> None:
    """a2 shares brand, tags and creator; a3 and a4 tie on tags and the newer one wins."""
    items = await service.related(principals["admin-user"], "a1")
    assert _ids(items) == ["a2", "p1", "a3", "a4", "c1"]
    assert [item.relevance_score for item in items] == [0.95, 0.9, 0.8, 0.8, 0.75]
    assert items[0].relationships == (
        RelationshipType.SAME_BRAND,
        RelationshipType.SHARED_TAGS,
        RelationshipType.SAME_CREATOR,
    )


async def test_source_never_returned(service, principals) -> None:
    items = await service.related(principals["admin-user"], "a2")
    assert "a2" not in _ids(items)


async def test_results_limited_to_caller_visibility(service, principals) -> None:
    """creator-1 no longer participates in a3 and never did in a4."""
    items = await service.related(principals["creator-user"], "a1")
    assert _ids(items) == ["a2", "p1", "c1"]


async def test_hidden_source_is_not_found(service, principals) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.related(principals["brand2-user"], "a1")


async def test_missing_source_is_not_found(service, principals) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.related(principals["admin-user"], "nope")


async def test_licensed_brand_sees_nothing_beyond_its_grant(service, principals) -> None:
    """brand-2 can see a4 through its grant but none of a4's tag neighbours."""
    assert await service.related(principals["brand2-user"], "a4") == []
    admin_items = await service.related(principals["admin-user"], "a4", entity_types=["asset"])
    assert _ids(admin_items) == ["a1", "a2", "a3"]


async def test_relationship_filter(service, principals) -> None:
    items = await service.related(
        principals["admin-user"], "a1", relationships=["same_creator"]
    )
    assert _ids(items) == ["p1", "a2", "c1"]
    assert all(item.relationships == (RelationshipType.SAME_CREATOR,) for item in items)


async def test_same_project_links_assets_and_project(
    index, service, principals, make_entity
) -> None:
    index.upsert(make_entity("a9", title="Campaign storyboard", project_id="p1"))
    from_asset = await service.related(principals["admin-user"], "a9")
    assert _ids(from_asset) == ["p1"]
    assert from_asset[0].relationships == (RelationshipType.SAME_PROJECT,)

    from_project = await service.related(principals["admin-user"], "p1")
    assert _ids(from_project)[0] == "a9"
    assert from_project[0].entity.entity_type == EntityType.ASSET


async def test_limit(service, principals) -> None:
    items = await service.related(principals["admin-user"], "a1", limit=2)
    assert _ids(items) == ["a2", "p1"]


@pytest.mark.parametrize(
    "kwargs",
    [{"limit": 0}, {"limit": 51}, {"limit": "5"}, {"relationships": ["same_planet"]}],
)
async def test_bad_arguments_rejected(service, principals, kwargs) -> None:
    with pytest.raises(ValidationException):
        await service.related(principals["admin-user"], "a1", **kwargs)


def test_relation_score_caps_at_one() -> None:
    assert relation_score([RelationshipType.SHARED_TAGS]) == 0.8
    assert relation_score(list(RelationshipType)) == 1.0
