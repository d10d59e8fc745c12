"""Retrieval order for capped candidate lookups.

Search scores at most a fixed number of candidates, so the index must hand
back the strongest ones first. For relevance that means title match strength
(the largest textual weight) and then recency; for field sorts it is the
requested field itself.
"""

from __future__ import annotations

from dataclasses import dataclass

# Title match tiers, strongest first.
TIER_EXACT_TITLE = 0
TIER_TITLE_PHRASE = 1
TIER_TITLE_ALL_TERMS = 2
TIER_TITLE_ANY_TERM = 3
TIER_NO_TITLE_MATCH = 4

SORT_FIELDS = frozenset({"created_at", "updated_at", "title"})


@dataclass(frozen=True)
class RetrievalOrder:
    """Ordering hint for IEntityIndex.find.

    With sort_field unset: title tier, then updated_at desc, then id asc.
    With sort_field set: that field in the given direction, then id asc.
    """

    phrase: str = ""
    terms: tuple[str, ...] = ()
    sort_field: str | None = None
    descending: bool = True

    def __post_init__(self) -> None:
        if self.sort_field is not None and self.sort_field not in SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {self.sort_field}")
        object.__setattr__(self, "phrase", self.phrase.casefold().strip())
        object.__setattr__(self, "terms", tuple(t.casefold() for t in self.terms))

    @property
    def match_terms(self) -> tuple[str, ...]:
        if self.terms:
            return self.terms
        return (self.phrase,) if self.phrase else ()

    def title_tier(self, title: str) -> int:
        if not self.phrase:
            return TIER_NO_TITLE_MATCH
        lowered = title.casefold()
        if lowered == self.phrase:
            return TIER_EXACT_TITLE
        if self.phrase in lowered:
            return TIER_TITLE_PHRASE
        hits = [term in lowered for term in self.match_terms]
        if hits and all(hits):
            return TIER_TITLE_ALL_TERMS
        if any(hits):
            return TIER_TITLE_ANY_TERM
        return TIER_NO_TITLE_MATCH
