"""Compile entity predicates into SQLAlchemy boolean expressions.

Participation and grant rules become correlated EXISTS subqueries so the
visibility constraint is evaluated by Postgres inside the lookup.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any

from sqlalchemy import ColumnElement, and_, case, exists, false, func, or_, select, true

from catalog_search.domain.enums import LicenseStatus
from catalog_search.domain.value_objects.predicates import (
    ActiveGrant,
    ActiveParticipant,
    AllOf,
    AnyOf,
    DateBetween,
    FieldEquals,
    FieldIn,
    MatchAll,
    MatchNone,
    Predicate,
    TagsContainAll,
    TextMatch,
)
from catalog_search.domain.value_objects.ranking import (
    TIER_EXACT_TITLE,
    TIER_NO_TITLE_MATCH,
    TIER_TITLE_ALL_TERMS,
    TIER_TITLE_ANY_TERM,
    TIER_TITLE_PHRASE,
    RetrievalOrder,
)
from catalog_search.infrastructure.persistence.models.searchable import (
    EntityLicenseGrantModel,
    EntityParticipantModel,
    SearchableEntityModel,
)

_E = SearchableEntityModel


def column_for(field: str) -> Any:
    """Map a filterable attribute name to its column."""
    return getattr(_E, field)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so value matches literally (escape char is backslash)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@singledispatch
def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


@compile_predicate.register
def _(predicate: MatchAll) -> ColumnElement[bool]:
    return true()


@compile_predicate.register
def _(predicate: MatchNone) -> ColumnElement[bool]:
    return false()


@compile_predicate.register
def _(predicate: FieldEquals) -> ColumnElement[bool]:
    return column_for(predicate.field) == predicate.value


@compile_predicate.register
def _(predicate: FieldIn) -> ColumnElement[bool]:
    return func.lower(column_for(predicate.field)).in_(sorted(predicate.values))


@compile_predicate.register
def _(predicate: DateBetween) -> ColumnElement[bool]:
    column = column_for(predicate.field)
    parts = []
    if predicate.start is not None:
        parts.append(column >= predicate.start)
    if predicate.end is not None:
        parts.append(column <= predicate.end)
    return and_(true(), *parts)


@compile_predicate.register
def _(predicate: TagsContainAll) -> ColumnElement[bool]:
    return _E.tags_normalized.contains(sorted(predicate.tags))


@compile_predicate.register
def _(predicate: TextMatch) -> ColumnElement[bool]:
    clauses = []
    for term in predicate.terms:
        pattern = f"%{escape_like(term)}%"
        clauses.append(
            or_(
                _E.title.ilike(pattern, escape="\\"),
                _E.description.ilike(pattern, escape="\\"),
                func.array_to_string(_E.tags_normalized, " ").like(pattern, escape="\\"),
            )
        )
    return and_(true(), *clauses)


@compile_predicate.register
def _(predicate: ActiveParticipant) -> ColumnElement[bool]:
    p = EntityParticipantModel
    return exists(
        select(p.id).where(
            p.entity_id == _E.id,
            p.creator_id == predicate.creator_id,
            or_(p.ended_at.is_(None), p.ended_at > predicate.at),
        )
    )


@compile_predicate.register
def _(predicate: ActiveGrant) -> ColumnElement[bool]:
    g = EntityLicenseGrantModel
    return exists(
        select(g.id).where(
            g.entity_id == _E.id,
            g.brand_id == predicate.brand_id,
            func.upper(g.status) == LicenseStatus.ACTIVE.value,
            or_(g.expires_at.is_(None), g.expires_at > predicate.at),
        )
    )


@compile_predicate.register
def _(predicate: AllOf) -> ColumnElement[bool]:
    return and_(*(compile_predicate(p) for p in predicate.items))


@compile_predicate.register
def _(predicate: AnyOf) -> ColumnElement[bool]:
    return or_(*(compile_predicate(p) for p in predicate.items))


def _title_contains(title: Any, text: str) -> ColumnElement[bool]:
    return title.like(f"%{escape_like(text)}%", escape="\\")


def compile_order(order: RetrievalOrder | None) -> list[Any]:
    """ORDER BY clauses equivalent to the in-process RetrievalOrder sort."""
    if order is None:
        return [_E.updated_at.desc(), _E.id.asc()]
    if order.sort_field is not None:
        if order.sort_field == "title":
            column = func.lower(_E.title)
        else:
            column = column_for(order.sort_field)
        primary = column.desc() if order.descending else column.asc()
        return [primary, _E.id.asc()]
    if not order.phrase:
        return [_E.updated_at.desc(), _E.id.asc()]
    title = func.lower(_E.title)
    terms = order.match_terms
    tier = case(
        (title == order.phrase, TIER_EXACT_TITLE),
        (_title_contains(title, order.phrase), TIER_TITLE_PHRASE),
        (and_(*(_title_contains(title, t) for t in terms)), TIER_TITLE_ALL_TERMS),
        (or_(*(_title_contains(title, t) for t in terms)), TIER_TITLE_ANY_TERM),
        else_=TIER_NO_TITLE_MATCH,
    )
    return [tier.asc(), _E.updated_at.desc(), _E.id.asc()]
