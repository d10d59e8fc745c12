"""In-memory entity index behaviour."""

import pytest

from catalog_search.domain.enums import EntityType
from catalog_search.domain.value_objects.predicates import (
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    TextMatch,
    all_of,
)
from catalog_search.domain.value_objects.ranking import (
    TIER_EXACT_TITLE,
    TIER_NO_TITLE_MATCH,
    TIER_TITLE_ALL_TERMS,
    TIER_TITLE_ANY_TERM,
    TIER_TITLE_PHRASE,
    RetrievalOrder,
)
from catalog_search.infrastructure.memory.entity_index import (
    InMemoryEntityIndex,
    title_matches_prefix,
)


@pytest.fixture
def index(catalog) -> InMemoryEntityIndex:
    return InMemoryEntityIndex(catalog)


async def test_find_orders_by_updated_desc_then_id(index) -> None:
    """Candidates come back newest first, capped at the limit."""
    found = await index.find(MatchAll(), limit=3)
    assert [e.id for e in found] == ["a1", "p1", "l1"]


async def test_find_relevance_order_puts_title_matches_first(index) -> None:
    """Exact title beats newer entities when the window is capped."""
    order = RetrievalOrder(phrase="Logo sketches", terms=("logo", "sketches"))
    found = await index.find(MatchAll(), limit=1, order=order)
    assert [e.id for e in found] == ["a3"]


async def test_find_field_order(index) -> None:
    order = RetrievalOrder(sort_field="title", descending=False)
    found = await index.find(MatchAll(), limit=2, order=order)
    assert [e.id for e in found] == ["a2", "a4"]


def test_title_tiers() -> None:
    order = RetrievalOrder(phrase="brand logo", terms=("brand", "logo"))
    assert order.title_tier("Brand Logo") == TIER_EXACT_TITLE
    assert order.title_tier("New brand logo pack") == TIER_TITLE_PHRASE
    assert order.title_tier("Logo for a brand") == TIER_TITLE_ALL_TERMS
    assert order.title_tier("Logo sketches") == TIER_TITLE_ANY_TERM
    assert order.title_tier("Summer campaign") == TIER_NO_TITLE_MATCH


def test_unknown_sort_field_rejected() -> None:
    with pytest.raises(ValueError):
        RetrievalOrder(sort_field="popularity")


async def test_count_matches_find(index) -> None:
    predicate = all_of(FieldEquals("entity_type", "asset"), TextMatch(("logo",)))
    assert await index.count(predicate) == len(await index.find(predicate, limit=100)) == 4
    assert await index.count(MatchNone()) == 0


async def test_field_in_is_case_insensitive(index) -> None:
    found = await index.find(FieldIn("status", frozenset({"published"})), limit=10)
    assert {e.id for e in found} == {"a2", "a4"}


async def test_count_by_field(index) -> None:
    counts = await index.count_by_field(FieldEquals("entity_type", "asset"), "status")
    assert counts == {"APPROVED": 1, "PUBLISHED": 2, "DRAFT": 1}


async def test_count_by_unknown_field_raises(index) -> None:
    """Only filterable fields (and tags) can be faceted."""
    with pytest.raises(ValueError, match="Unknown facet field"):
        await index.count_by_field(MatchAll(), "description")


def test_unknown_predicate_field_rejected() -> None:
    with pytest.raises(ValueError):
        FieldEquals("description", "x")


async def test_find_by_prefix(index) -> None:
    """Prefix matches the title start or any title word."""
    found = await index.find_by_prefix("brand", MatchAll(), limit=10)
    assert [e.id for e in found] == ["a1", "p1", "a2", "a4"]


def test_title_prefix_fuzzy() -> None:
    assert title_matches_prefix("Brand logo", "bran")
    assert title_matches_prefix("Summer brand logo", "LOGO")
    assert title_matches_prefix("Brand logo", "brnad")
    assert not title_matches_prefix("Brand logo", "zebra")


async def test_vocabulary_from_titles_and_tags(index) -> None:
    words = await index.vocabulary(FieldEquals("entity_type", EntityType.CREATOR.value))
    assert words == {"jane", "logo", "designer", "illustration"}


async def test_upsert_replaces_and_remove(index, make_entity) -> None:
    index.upsert(make_entity("a1", title="Renamed"))
    assert (await index.get_by_id("a1")).title == "Renamed"
    index.remove("a1")
    assert await index.get_by_id("a1") is None
    index.remove("missing")
    assert len(index) == 6
