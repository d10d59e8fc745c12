"""'Did you mean' suggestions for low-result searches.

The vocabulary comes from titles and tags of entities the caller can see, so
a suggestion never reveals words from hidden entities.
"""

from __future__ import annotations

import difflib
import re

from catalog_search.application.dtos.search import SpellingSuggestion
from catalog_search.application.interfaces.repositories import IEntityIndex
from catalog_search.application.services.query_validator import tokenize
from catalog_search.domain.value_objects.predicates import Predicate, TextMatch, all_of

MAX_RESULTS_FOR_SUGGESTION = 5
MIN_SIMILARITY = 0.7
MIN_WORD_LENGTH = 3
_CANDIDATES_PER_WORD = 3
_WORD_RE = re.compile(r"\w+")


def extract_words(text: str) -> list[str]:
    return [w for w in _WORD_RE.findall(text.lower()) if len(w) >= MIN_WORD_LENGTH]


class SpellingSuggester:
    def __init__(self, index: IEntityIndex) -> None:
        self.index = index

    async def suggest(
        self, query_text: str, result_count: int, base_predicate: Predicate
    ) -> SpellingSuggestion | None:
        """Return the best single-word correction that at least doubles the result count."""
        if result_count > MAX_RESULTS_FOR_SUGGESTION:
            return None
        vocabulary = await self.index.vocabulary(base_predicate)
        if not vocabulary:
            return None

        best: tuple[float, SpellingSuggestion] | None = None
        for word in extract_words(query_text):
            if word in vocabulary:
                continue
            for candidate in difflib.get_close_matches(
                word, sorted(vocabulary), n=_CANDIDATES_PER_WORD, cutoff=MIN_SIMILARITY
            ):
                similarity = difflib.SequenceMatcher(None, word, candidate).ratio()
                if similarity <= MIN_SIMILARITY:
                    continue
                corrected = re.sub(
                    rf"\b{re.escape(word)}\b", candidate, query_text, flags=re.IGNORECASE
                )
                expected = await self.index.count(
                    all_of(base_predicate, TextMatch(tokenize(corrected)))
                )
                if expected <= result_count * 2 or expected == 0:
                    continue
                rank = similarity * 0.6 + min(expected / 100, 1.0) * 0.4
                suggestion = SpellingSuggestion(
                    original_query=query_text,
                    suggested_query=corrected,
                    confidence=round(similarity, 4),
                    expected_result_count=expected,
                )
                if best is None or rank > best[0]:
                    best = (rank, suggestion)
        return best[1] if best else None
