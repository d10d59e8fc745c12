"""Permission filter: role-based visibility expressed as entity predicates.

The predicate is pushed into the index lookup so that candidates, counts and
facets never include entities the caller may not see. Missing profiles and
unknown roles produce MatchNone (an empty result), never an error.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.searchable import SearchableEntity
from catalog_search.domain.enums import EntityType, Role
from catalog_search.domain.value_objects.predicates import (
    ActiveGrant,
    ActiveParticipant,
    FieldEquals,
    MatchAll,
    MatchNone,
    Predicate,
    all_of,
    any_of,
)


def _has_required_profile(principal: Principal) -> bool:
    if principal.role == Role.CREATOR:
        return bool(principal.creator_id)
    if principal.role == Role.BRAND:
        return bool(principal.brand_id)
    return principal.role in (Role.ADMIN, Role.VIEWER)


def visibility_predicate(
    principal: Principal | None, entity_type: EntityType, now: datetime
) -> Predicate:
    """Return the visibility rule for principal on one entity type at time now."""
    if principal is None or not isinstance(principal.role, Role):
        return MatchNone()
    if not _has_required_profile(principal):
        return MatchNone()
    if principal.role in (Role.ADMIN, Role.VIEWER):
        return MatchAll()
    if entity_type == EntityType.CREATOR:
        return MatchAll()

    if principal.role == Role.CREATOR:
        assert principal.creator_id is not None
        return ActiveParticipant(principal.creator_id, now)

    assert principal.brand_id is not None
    owned = any_of(
        FieldEquals("owner_id", principal.brand_id),
        FieldEquals("brand_id", principal.brand_id),
    )
    if entity_type == EntityType.ASSET:
        return any_of(owned, ActiveGrant(principal.brand_id, now))
    return owned


def scope_predicate(
    principal: Principal | None,
    entity_types: Iterable[EntityType],
    now: datetime,
    per_type: Callable[[EntityType], Predicate] | None = None,
) -> Predicate:
    """Combine visibility across requested entity types.

    Each type contributes (entity_type == t AND visibility(t) AND per_type(t));
    the types are OR-ed together.
    """
    branches: list[Predicate] = []
    for entity_type in entity_types:
        visible = visibility_predicate(principal, entity_type, now)
        if isinstance(visible, MatchNone):
            continue
        extra = per_type(entity_type) if per_type is not None else MatchAll()
        branches.append(
            all_of(FieldEquals("entity_type", entity_type.value), visible, extra)
        )
    return any_of(*branches)


class PermissionFilter:
    """Builds caller-scoped predicates for search, autocomplete and facets."""

    def for_types(
        self,
        principal: Principal | None,
        entity_types: Iterable[EntityType],
        now: datetime,
        per_type: Callable[[EntityType], Predicate] | None = None,
    ) -> Predicate:
        return scope_predicate(principal, entity_types, now, per_type)

    def is_visible(
        self, principal: Principal | None, entity: SearchableEntity, now: datetime
    ) -> bool:
        """Evaluate visibility for a single entity (used for click and test checks)."""
        return visibility_predicate(principal, entity.entity_type, now).matches(entity)

