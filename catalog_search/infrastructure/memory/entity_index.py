"""In-process entity index (default backend and tests).

Evaluates predicates directly against the stored projections. Ordering and
counting semantics match the SQL index so the two are interchangeable.
"""

from __future__ import annotations

import difflib
import re
from collections import Counter
from collections.abc import Iterable

from catalog_search.domain.entities.searchable import SearchableEntity
from catalog_search.domain.value_objects.predicates import FILTERABLE_FIELDS, Predicate
from catalog_search.domain.value_objects.ranking import RetrievalOrder

_WORD_RE = re.compile(r"\w+")
# Minimum similarity between the prefix and a title's leading text for a fuzzy hit.
FUZZY_PREFIX_CUTOFF = 0.75


def _order_key(entity: SearchableEntity) -> tuple[float, str]:
    return (-entity.updated_at.timestamp(), entity.id)


def _ordered(
    entities: list[SearchableEntity], order: RetrievalOrder | None
) -> list[SearchableEntity]:
    if order is None:
        return sorted(entities, key=_order_key)
    if order.sort_field is None:
        return sorted(
            entities,
            key=lambda e: (order.title_tier(e.title), -e.updated_at.timestamp(), e.id),
        )
    # Stable: id asc first, then the field in the requested direction.
    by_id = sorted(entities, key=lambda e: e.id)
    if order.sort_field == "title":
        return sorted(by_id, key=lambda e: e.title.lower(), reverse=order.descending)
    return sorted(
        by_id, key=lambda e: getattr(e, order.sort_field), reverse=order.descending
    )


def title_matches_prefix(title: str, prefix: str) -> bool:
    """Prefix of the title or of any title word, or a close fuzzy match of the leading text."""
    lowered = title.casefold()
    needle = prefix.casefold().strip()
    if lowered.startswith(needle):
        return True
    if any(word.startswith(needle) for word in _WORD_RE.findall(lowered)):
        return True
    head = lowered[: len(needle)]
    return difflib.SequenceMatcher(None, needle, head).ratio() >= FUZZY_PREFIX_CUTOFF


class InMemoryEntityIndex:
    """IEntityIndex over a dict of projections."""

    def __init__(self, entities: Iterable[SearchableEntity] = ()) -> None:
        self._entities: dict[str, SearchableEntity] = {}
        for entity in entities:
            self.upsert(entity)

    def upsert(self, entity: SearchableEntity) -> None:
        """Replace the projection for entity.id (called by the owning domain's sync)."""
        self._entities[entity.id] = entity

    def remove(self, entity_id: str) -> None:
        self._entities.pop(entity_id, None)

    def __len__(self) -> int:
        return len(self._entities)

    def _matching(self, predicate: Predicate) -> list[SearchableEntity]:
        return [e for e in self._entities.values() if predicate.matches(e)]

    async def find(
        self, predicate: Predicate, limit: int, order: RetrievalOrder | None = None
    ) -> list[SearchableEntity]:
        return _ordered(self._matching(predicate), order)[:limit]

    async def count(self, predicate: Predicate) -> int:
        return sum(1 for e in self._entities.values() if predicate.matches(e))

    async def count_by_field(self, predicate: Predicate, field: str) -> dict[str, int]:
        counts: Counter[str] = Counter()
        if field == "tags":
            for entity in self._matching(predicate):
                counts.update(set(entity.tags))
            return dict(counts)
        if field not in FILTERABLE_FIELDS:
            raise ValueError(f"Unknown facet field: {field}")
        for entity in self._matching(predicate):
            value = entity.attribute(field)
            if value is not None:
                counts[str(value)] += 1
        return dict(counts)

    async def find_by_prefix(
        self, prefix: str, predicate: Predicate, limit: int
    ) -> list[SearchableEntity]:
        hits = [
            e for e in self._matching(predicate) if title_matches_prefix(e.title, prefix)
        ]
        return sorted(hits, key=_order_key)[:limit]

    async def vocabulary(self, predicate: Predicate, limit: int = 5000) -> set[str]:
        words: set[str] = set()
        for entity in sorted(self._matching(predicate), key=_order_key):
            for text in (entity.title, *entity.tags):
                words.update(w for w in _WORD_RE.findall(text.lower()) if len(w) > 2)
            if len(words) >= limit:
                break
        return words

    async def get_by_id(self, entity_id: str) -> SearchableEntity | None:
        return self._entities.get(entity_id)
