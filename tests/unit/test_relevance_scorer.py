"""Relevance scoring: components, weighted sum, ordering and highlights."""

from datetime import timedelta

import pytest

from catalog_search.application.dtos.analytics import PopularitySnapshot
from catalog_search.application.services.query_validator import validate_search_query
from catalog_search.application.services.relevance_scorer import (
    RelevanceScorer,
    ScoringConfig,
    highlight,
    normalize_popularity,
    quality_score,
    recency_score,
    textual_score,
)
from catalog_search.domain.enums import SortBy, SortOrder

EMPTY = PopularitySnapshot(counts={})


def test_final_is_weighted_sum(catalog, now) -> None:
    """final equals the configured weighted sum of the four components."""
    config = ScoringConfig(
        textual_weight=0.4, recency_weight=0.3, popularity_weight=0.2, quality_weight=0.1
    )
    scorer = RelevanceScorer(config)
    query = validate_search_query({"query": "brand logo"})
    snapshot = PopularitySnapshot(counts={"a1": 10, "a2": 3})
    for result in scorer.score(catalog, query, snapshot, now):
        b = result.breakdown
        expected = 0.4 * b.textual + 0.3 * b.recency + 0.2 * b.popularity + 0.1 * b.quality
        assert b.final == pytest.approx(expected, abs=1e-6)
        for component in (b.textual, b.recency, b.popularity, b.quality):
            assert 0.0 <= component <= 1.0


def test_textual_weights_fields(make_entity) -> None:
    """Exact title scores 0.6; phrase inside title 0.48; partial terms scale."""
    query = validate_search_query({"query": "brand logo"})
    assert textual_score(make_entity("x", title="Brand Logo"), query) == pytest.approx(0.6)
    assert textual_score(make_entity("x", title="New brand logo"), query) == pytest.approx(0.48)
    assert textual_score(make_entity("x", title="Logo only"), query) == pytest.approx(0.18)
    tagged = make_entity("x", title="Other", description="a brand logo here", tags=("logo",))
    assert textual_score(tagged, query) == pytest.approx(0.25 * 0.8 + 0.15 * 0.3)


def test_recency_half_life_and_cutoff(now) -> None:
    config = ScoringConfig(half_life_days=30, max_age_days=730)
    assert recency_score(now, now, config) == pytest.approx(1.0)
    assert recency_score(now - timedelta(days=30), now, config) == pytest.approx(0.5)
    assert recency_score(now - timedelta(days=731), now, config) == 0.0


def test_popularity_min_max(make_entity) -> None:
    entities = [make_entity("a"), make_entity("b"), make_entity("c")]
    normalized = normalize_popularity(entities, PopularitySnapshot(counts={"a": 10, "b": 5}))
    assert normalized == {"a": 1.0, "b": 0.5, "c": 0.0}


def test_popularity_without_spread_is_zero(make_entity) -> None:
    entities = [make_entity("a"), make_entity("b")]
    assert normalize_popularity(entities, PopularitySnapshot(counts={"a": 4, "b": 4})) == {
        "a": 0.0,
        "b": 0.0,
    }
    assert normalize_popularity([], EMPTY) == {}


@pytest.mark.parametrize(
    ("status", "expected"),
    [("PUBLISHED", 1.0), ("approved", 0.9), ("DRAFT", 0.4), ("REJECTED", 0.1), ("WEIRD", 0.5)],
)
def test_quality_by_status(status: str, expected: float) -> None:
    assert quality_score(status) == expected


def test_relevance_order_ties_break_on_updated_then_id(make_entity, now) -> None:
    """Equal final scores order by updated_at desc, then id asc."""
    entities = [
        make_entity("b", title="Logo", updated_days_ago=5),
        make_entity("a", title="Logo", updated_days_ago=5),
        make_entity("c", title="Logo", updated_days_ago=1),
    ]
    config = ScoringConfig(
        textual_weight=1.0, recency_weight=0.0, popularity_weight=0.0, quality_weight=0.0
    )
    query = validate_search_query({"query": "logo"})
    ordered = RelevanceScorer(config).score(entities, query, EMPTY, now)
    assert [r.entity.id for r in ordered] == ["c", "a", "b"]


def test_deterministic_ordering(catalog, now) -> None:
    """Same inputs give the same order every time."""
    scorer = RelevanceScorer()
    query = validate_search_query({"query": "logo"})
    first = [r.entity.id for r in scorer.score(catalog, query, EMPTY, now)]
    second = [r.entity.id for r in scorer.score(list(reversed(catalog)), query, EMPTY, now)]
    assert first == second


def test_field_sort_stable_by_id(make_entity, now) -> None:
    entities = [
        make_entity("b", title="Zeta", created_days_ago=3),
        make_entity("a", title="zeta", created_days_ago=3),
        make_entity("c", title="Alpha", created_days_ago=1),
    ]
    scorer = RelevanceScorer()
    asc = validate_search_query({"query": "zz", "sortBy": "title", "sortOrder": "asc"})
    assert [r.entity.id for r in scorer.score(entities, asc, EMPTY, now)] == ["c", "a", "b"]
    desc = validate_search_query({"query": "zz", "sortBy": "created_at"})
    assert desc.sort_by == SortBy.CREATED_AT and desc.sort_order == SortOrder.DESC
    assert [r.entity.id for r in scorer.score(entities, desc, EMPTY, now)] == ["c", "a", "b"]


def test_highlight_escapes_html() -> None:
    """Matched terms are wrapped in <mark>; surrounding markup is escaped."""
    snippet = highlight("<b>Logo</b> & more", ("logo",))
    assert snippet == "&lt;b&gt;<mark>Logo</mark>&lt;/b&gt; &amp; more"
    assert highlight("nothing here", ("logo",)) is None
    assert highlight(None, ("logo",)) is None


def test_highlight_snippet_ellipsis() -> None:
    text = "x" * 100 + " logo " + "y" * 100
    snippet = highlight(text, ("logo",))
    assert snippet.startswith("...")
    assert snippet.endswith("...")
    assert "<mark>logo</mark>" in snippet
