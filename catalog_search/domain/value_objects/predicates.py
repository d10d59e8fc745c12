"""Entity predicates: a small, closed expression tree over indexed attributes.

Predicates are built by the permission filter and the query validator and
handed to the index adapter, which either evaluates them in memory
(matches) or compiles them to its own query language. Only the attributes in
FILTERABLE_FIELDS may be referenced.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from catalog_search.domain.entities.searchable import SearchableEntity

FILTERABLE_FIELDS = frozenset(
    {
        "id",
        "entity_type",
        "status",
        "kind",
        "owner_id",
        "project_id",
        "brand_id",
        "created_at",
        "updated_at",
    }
)


def _fold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


class Predicate:
    """Base node. Subclasses are frozen dataclasses."""

    def matches(self, entity: SearchableEntity) -> bool:  # pragma: no cover - abstract
        raise NotImplementedError


@dataclass(frozen=True)
class MatchAll(Predicate):
    def matches(self, entity: SearchableEntity) -> bool:
        return True


@dataclass(frozen=True)
class MatchNone(Predicate):
    def matches(self, entity: SearchableEntity) -> bool:
        return False


@dataclass(frozen=True)
class FieldEquals(Predicate):
    """Exact equality on an identifier-like attribute."""

    field: str
    value: Any

    def __post_init__(self) -> None:
        if self.field not in FILTERABLE_FIELDS:
            raise ValueError(f"Unknown filterable field: {self.field}")

    def matches(self, entity: SearchableEntity) -> bool:
        return entity.attribute(self.field) == self.value


@dataclass(frozen=True)
class FieldIn(Predicate):
    """Case-insensitive membership on a categorical attribute."""

    field: str
    values: frozenset[str]

    def __post_init__(self) -> None:
        if self.field not in FILTERABLE_FIELDS:
            raise ValueError(f"Unknown filterable field: {self.field}")
        object.__setattr__(self, "values", frozenset(_fold(v) for v in self.values))

    def matches(self, entity: SearchableEntity) -> bool:
        value = entity.attribute(self.field)
        return value is not None and _fold(value) in self.values


@dataclass(frozen=True)
class DateBetween(Predicate):
    """Inclusive date range; either bound may be open."""

    field: str
    start: datetime | None = None
    end: datetime | None = None

    def matches(self, entity: SearchableEntity) -> bool:
        value = entity.attribute(self.field)
        if value is None:
            return False
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True


@dataclass(frozen=True)
class TagsContainAll(Predicate):
    tags: frozenset[str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", frozenset(t.casefold() for t in self.tags))

    def matches(self, entity: SearchableEntity) -> bool:
        entity_tags = {t.casefold() for t in entity.tags}
        return self.tags.issubset(entity_tags)


@dataclass(frozen=True)
class TextMatch(Predicate):
    """Every term occurs in the title, the description or one of the tags."""

    terms: tuple[str, ...]

    def matches(self, entity: SearchableEntity) -> bool:
        haystacks = [entity.title.casefold(), (entity.description or "").casefold()]
        haystacks.extend(t.casefold() for t in entity.tags)
        return all(any(term in h for h in haystacks) for term in self.terms)


@dataclass(frozen=True)
class ActiveParticipant(Predicate):
    """Entity has a participation record for creator_id that is active at `at`."""

    creator_id: str
    at: datetime

    def matches(self, entity: SearchableEntity) -> bool:
        return any(
            p.creator_id == self.creator_id and p.is_active(self.at)
            for p in entity.participants
        )


@dataclass(frozen=True)
class ActiveGrant(Predicate):
    """Entity is covered by an ACTIVE, unexpired license grant to brand_id."""

    brand_id: str
    at: datetime

    def matches(self, entity: SearchableEntity) -> bool:
        return any(
            g.brand_id == self.brand_id and g.is_active(self.at) for g in entity.grants
        )


@dataclass(frozen=True)
class AllOf(Predicate):
    items: tuple[Predicate, ...]

    def matches(self, entity: SearchableEntity) -> bool:
        return all(p.matches(entity) for p in self.items)


@dataclass(frozen=True)
class AnyOf(Predicate):
    items: tuple[Predicate, ...]

    def matches(self, entity: SearchableEntity) -> bool:
        return any(p.matches(entity) for p in self.items)


def all_of(*items: Predicate) -> Predicate:
    """Conjunction with MatchAll/MatchNone folded away."""
    kept: list[Predicate] = []
    for item in items:
        if isinstance(item, MatchNone):
            return MatchNone()
        if isinstance(item, MatchAll):
            continue
        kept.append(item)
    if not kept:
        return MatchAll()
    if len(kept) == 1:
        return kept[0]
    return AllOf(tuple(kept))


def any_of(*items: Predicate) -> Predicate:
    """Disjunction with MatchAll/MatchNone folded away."""
    kept: list[Predicate] = []
    for item in items:
        if isinstance(item, MatchAll):
            return MatchAll()
        if isinstance(item, MatchNone):
            continue
        kept.append(item)
    if not kept:
        return MatchNone()
    if len(kept) == 1:
        return kept[0]
    return AnyOf(tuple(kept))
