"""Autocomplete use case: prefix/fuzzy title lookup under the caller's visibility.

Skips full scoring and faceting. Suggestions are grouped by normalized title
and ordered by a popularity/recency signal with a title, id tie-break.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from catalog_search.application.dtos.search import Suggestion
from catalog_search.application.services.permission_filter import PermissionFilter
from catalog_search.application.services.query_validator import validate_suggestion_query
from catalog_search.application.services.relevance_scorer import (
    ScoringConfig,
    normalize_popularity,
    recency_score,
)
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.searchable import SearchableEntity
from catalog_search.domain.value_objects.predicates import MatchNone
from catalog_search.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IEntityIndex
    from catalog_search.application.interfaces.services import IPopularitySource

# Entities pulled from the index per call; groups and match counts are built from these.
CANDIDATE_LIMIT = 200
_POPULARITY_SHARE = 0.6
_RECENCY_SHARE = 0.4


def normalize_title(title: str) -> str:
    return " ".join(title.split()).casefold()


class AutocompleteService:
    def __init__(
        self,
        index: IEntityIndex,
        popularity: IPopularitySource,
        permission_filter: PermissionFilter | None = None,
        scoring: ScoringConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.index = index
        self.popularity = popularity
        self.permission_filter = permission_filter or PermissionFilter()
        self.scoring = scoring or ScoringConfig()
        self.clock = clock

    async def suggest(
        self,
        principal: Principal | None,
        query: Any,
        limit: Any = None,
        entity_types: Any = None,
    ) -> list[Suggestion]:
        """Return at most limit suggestions visible to principal."""
        prefix, limit, types = validate_suggestion_query(query, limit, entity_types)
        now = self.clock()
        predicate = self.permission_filter.for_types(principal, types, now)
        if isinstance(predicate, MatchNone):
            return []
        candidates = await self.index.find_by_prefix(prefix, predicate, CANDIDATE_LIMIT)
        if not candidates:
            return []

        popularity = normalize_popularity(candidates, self.popularity.snapshot())

        def signal(entity: SearchableEntity) -> float:
            recency = recency_score(entity.updated_at, now, self.scoring)
            return _POPULARITY_SHARE * popularity.get(entity.id, 0.0) + _RECENCY_SHARE * recency

        groups: dict[str, list[SearchableEntity]] = {}
        for entity in candidates:
            groups.setdefault(normalize_title(entity.title), []).append(entity)

        ranked: list[tuple[float, str, str, Suggestion]] = []
        for key, members in groups.items():
            best = min(members, key=lambda e: (-signal(e), e.id))
            ranked.append(
                (
                    -signal(best),
                    key,
                    best.id,
                    Suggestion(
                        id=best.id,
                        title=best.title,
                        type=best.entity_type,
                        status=best.status,
                        match_count=len(members),
                    ),
                )
            )
        ranked.sort(key=lambda item: item[:3])
        return [item[3] for item in ranked[:limit]]
