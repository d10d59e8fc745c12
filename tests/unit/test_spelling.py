"""'Did you mean' suggestions."""

import pytest

from catalog_search.application.services.spelling import SpellingSuggester, extract_words
from catalog_search.domain.value_objects.predicates import FieldEquals, MatchAll, MatchNone
from catalog_search.infrastructure.memory.entity_index import InMemoryEntityIndex


@pytest.fixture
def suggester(catalog) -> SpellingSuggester:
    return SpellingSuggester(InMemoryEntityIndex(catalog))


async def test_suggests_correction_that_finds_more(suggester) -> None:
    """A misspelt term is replaced by a close vocabulary word with more results."""
    suggestion = await suggester.suggest("brand lgo", 0, MatchAll())
    assert suggestion is not None
    assert suggestion.suggested_query == "brand logo"
    assert suggestion.original_query == "brand lgo"
    assert suggestion.expected_result_count == 4
    assert 0.7 < suggestion.confidence <= 1.0


async def test_no_suggestion_when_enough_results(suggester) -> None:
    assert await suggester.suggest("brand lgo", 6, MatchAll()) is None


async def test_no_suggestion_for_known_words(suggester) -> None:
    assert await suggester.suggest("brand logo", 0, MatchAll()) is None


async def test_vocabulary_limited_to_visible_entities(suggester) -> None:
    """Words only present on hidden entities are never suggested."""
    licenses_only = FieldEquals("entity_type", "license")
    assert await suggester.suggest("sketchs", 0, licenses_only) is None
    assert await suggester.suggest("brand lgo", 0, MatchNone()) is None


async def test_requires_more_than_double_current_count(suggester) -> None:
    """4 expected results do not beat a current count of 2."""
    assert await suggester.suggest("brand lgo", 2, MatchAll()) is None


def test_extract_words_skips_short() -> None:
    assert extract_words("A to logo, Brand!") == ["logo", "brand"]
