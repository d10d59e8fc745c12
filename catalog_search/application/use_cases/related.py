"""Related content: entities sharing a project, brand, tags or creator with a source.

Both the source and every related entity are checked against the caller's
visibility. A source the caller cannot see is reported as not found, so the
endpoint never confirms that a hidden entity exists.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from catalog_search.application.dtos.search import RelatedItem
from catalog_search.application.services.permission_filter import PermissionFilter
from catalog_search.application.services.query_validator import parse_entity_types
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.searchable import SearchableEntity
from catalog_search.domain.enums import EntityType, RelationshipType
from catalog_search.domain.exceptions import ResourceNotFoundException, ValidationException
from catalog_search.domain.value_objects.predicates import (
    ActiveParticipant,
    FieldEquals,
    FieldIn,
    MatchNone,
    Predicate,
    TagsContainAll,
    all_of,
    any_of,
)
from catalog_search.shared.telemetry.telemetry import pipeline_span
from catalog_search.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IEntityIndex

logger = logging.getLogger(__name__)

RELATIONSHIP_WEIGHTS: dict[RelationshipType, float] = {
    RelationshipType.SAME_PROJECT: 0.9,
    RelationshipType.SAME_BRAND: 0.85,
    RelationshipType.SHARED_TAGS: 0.8,
    RelationshipType.SAME_CREATOR: 0.75,
}
# Added once per relationship beyond the strongest.
EXTRA_RELATIONSHIP_BONUS = 0.05

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def _parse_limit(raw: Any) -> int:
    if raw is None:
        return DEFAULT_LIMIT
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValidationException("limit must be an integer", field="limit")
    if not 1 <= raw <= MAX_LIMIT:
        raise ValidationException(f"limit must be between 1 and {MAX_LIMIT}", field="limit")
    return raw


def _parse_relationships(raw: Any) -> tuple[RelationshipType, ...]:
    if not raw:
        return tuple(RelationshipType)
    parsed: list[RelationshipType] = []
    for value in raw:
        try:
            relationship = RelationshipType(value)
        except ValueError:
            raise ValidationException(
                f"Unknown relationship: {value!r}. "
                f"Allowed: {', '.join(RelationshipType.values())}",
                field="relationships",
            ) from None
        if relationship not in parsed:
            parsed.append(relationship)
    return tuple(parsed)


def source_creator_ids(source: SearchableEntity, now: datetime) -> frozenset[str]:
    """Creators behind source: its own profile for a creator, active participants otherwise."""
    if source.entity_type == EntityType.CREATOR:
        return frozenset({source.owner_id})
    return frozenset(p.creator_id for p in source.participants if p.is_active(now))


def relationship_predicates(
    source: SearchableEntity,
    relationships: tuple[RelationshipType, ...],
    now: datetime,
) -> dict[RelationshipType, Predicate]:
    """One predicate per requested relationship the source can take part in."""
    predicates: dict[RelationshipType, Predicate] = {}
    for relationship in relationships:
        if relationship == RelationshipType.SAME_PROJECT:
            project_ids = {source.project_id} if source.project_id else set()
            if source.entity_type == EntityType.PROJECT:
                project_ids.add(source.id)
            predicate = any_of(
                *(FieldEquals("project_id", pid) for pid in sorted(project_ids)),
                *(FieldEquals("id", pid) for pid in sorted(project_ids - {source.id})),
            )
        elif relationship == RelationshipType.SAME_BRAND:
            predicate = (
                FieldEquals("brand_id", source.brand_id) if source.brand_id else MatchNone()
            )
        elif relationship == RelationshipType.SHARED_TAGS:
            predicate = any_of(*(TagsContainAll(frozenset({tag})) for tag in sorted(source.tags)))
        else:
            creators = sorted(source_creator_ids(source, now))
            predicate = any_of(
                *(ActiveParticipant(creator_id, now) for creator_id in creators),
                all_of(
                    FieldEquals("entity_type", EntityType.CREATOR.value),
                    FieldIn("owner_id", frozenset(creators)),
                )
                if creators
                else MatchNone(),
            )
        if not isinstance(predicate, MatchNone):
            predicates[relationship] = predicate
    return predicates


def relation_score(relationships: list[RelationshipType]) -> float:
    """Strongest relationship weight plus a small bonus for each further one."""
    weights = sorted((RELATIONSHIP_WEIGHTS[r] for r in relationships), reverse=True)
    score = weights[0] + EXTRA_RELATIONSHIP_BONUS * (len(weights) - 1)
    return round(min(score, 1.0), 4)


class RelatedContentService:
    """Related entities for a source entity, scoped to what the caller may see."""

    def __init__(
        self,
        index: IEntityIndex,
        permission_filter: PermissionFilter | None = None,
        max_candidates: int = 1000,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.index = index
        self.permission_filter = permission_filter or PermissionFilter()
        self.max_candidates = max_candidates
        self.clock = clock

    async def _visible_source(
        self, principal: Principal | None, entity_id: str, now: datetime
    ) -> SearchableEntity:
        source = await self.index.get_by_id(entity_id)
        if source is None or not self.permission_filter.is_visible(principal, source, now):
            raise ResourceNotFoundException("entity", entity_id)
        return source

    async def related(
        self,
        principal: Principal | None,
        entity_id: str,
        limit: Any = None,
        entity_types: Any = None,
        relationships: Any = None,
    ) -> list[RelatedItem]:
        """Return up to limit related entities.

        Ordered by relevance_score desc, then updated_at desc, then id asc.
        The source itself is never returned.
        """
        limit = _parse_limit(limit)
        types = parse_entity_types(entity_types) or tuple(EntityType)
        wanted = _parse_relationships(relationships)
        now = self.clock()
        source = await self._visible_source(principal, entity_id, now)

        by_relationship = relationship_predicates(source, wanted, now)
        if not by_relationship:
            return []
        predicate = all_of(
            self.permission_filter.for_types(principal, types, now),
            any_of(*by_relationship.values()),
        )
        if isinstance(predicate, MatchNone):
            return []

        with pipeline_span("related", relationships=len(by_relationship)) as span:
            candidates = await self.index.find(predicate, self.max_candidates + 1)
            span.set_attribute("search.candidates", len(candidates))

        items: list[RelatedItem] = []
        for entity in candidates:
            if entity.id == source.id:
                continue
            matched = [r for r, p in by_relationship.items() if p.matches(entity)]
            if not matched:
                continue
            matched.sort(key=lambda r: -RELATIONSHIP_WEIGHTS[r])
            items.append(RelatedItem(entity, relation_score(matched), tuple(matched)))

        items.sort(key=lambda item: item.entity.id)
        items.sort(
            key=lambda item: (item.relevance_score, item.entity.updated_at), reverse=True
        )
        logger.debug(
            "Related to %s: %d candidates, %d kept", entity_id, len(candidates), len(items)
        )
        return items[:limit]
