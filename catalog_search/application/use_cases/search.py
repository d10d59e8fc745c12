"""Search use case: validate, scope, retrieve, score, facet and assemble.

Retrieval+scoring and facet aggregation run concurrently over the same
caller-scoped predicate and are joined before assembly. The search event is
handed to the analytics tracker without awaiting persistence.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from catalog_search.application.dtos.analytics import PopularitySnapshot
from catalog_search.application.dtos.search import NormalizedQuery, ScoredResult, SearchResult
from catalog_search.application.services.facet_aggregator import FacetAggregator
from catalog_search.application.services.permission_filter import PermissionFilter
from catalog_search.application.services.query_validator import (
    common_filter_predicate,
    scoped_filter_predicate,
    validate_search_query,
)
from catalog_search.application.services.relevance_scorer import RelevanceScorer
from catalog_search.application.services.result_assembler import assemble
from catalog_search.application.services.spelling import SpellingSuggester
from catalog_search.domain.entities.analytics import SearchEvent
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.enums import SortBy, SortOrder
from catalog_search.domain.value_objects.predicates import Predicate, TextMatch, all_of
from catalog_search.domain.value_objects.ranking import RetrievalOrder
from catalog_search.shared.telemetry.telemetry import pipeline_span
from catalog_search.shared.utils.datetime import utc_now
from catalog_search.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IEntityIndex
    from catalog_search.application.interfaces.services import (
        IAnalyticsTracker,
        IPopularitySource,
    )

logger = logging.getLogger(__name__)


def build_base_predicate(
    principal: Principal | None,
    query: NormalizedQuery,
    now: datetime,
    permission_filter: PermissionFilter,
) -> Predicate:
    """Visibility plus filters, without the text match."""
    scoped = permission_filter.for_types(
        principal,
        query.entity_types,
        now,
        per_type=lambda entity_type: scoped_filter_predicate(query.filters, entity_type, now),
    )
    return all_of(scoped, common_filter_predicate(query.filters))


def retrieval_order(query: NormalizedQuery) -> RetrievalOrder:
    """Index order that keeps the strongest candidates for query.sort_by under the cap."""
    if query.sort_by == SortBy.RELEVANCE:
        return RetrievalOrder(phrase=query.normalized_text, terms=query.terms)
    return RetrievalOrder(
        sort_field=query.sort_by.value, descending=query.sort_order == SortOrder.DESC
    )


class SearchService:
    """Unified search across assets, creators, projects and licenses."""

    def __init__(
        self,
        index: IEntityIndex,
        popularity: IPopularitySource,
        scorer: RelevanceScorer | None = None,
        tracker: IAnalyticsTracker | None = None,
        permission_filter: PermissionFilter | None = None,
        max_candidates: int = 1000,
        spelling: SpellingSuggester | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.index = index
        self.popularity = popularity
        self.scorer = scorer or RelevanceScorer()
        self.tracker = tracker
        self.permission_filter = permission_filter or PermissionFilter()
        self.facets = FacetAggregator(index)
        self.max_candidates = max_candidates
        self.spelling = spelling
        self.clock = clock

    async def search(self, principal: Principal | None, raw: Mapping[str, Any]) -> SearchResult:
        """Validate raw request and run it. Timing starts at validator entry."""
        started = time.perf_counter()
        query = validate_search_query(raw)
        return await self.execute(principal, query, started=started)

    async def _retrieve_and_score(
        self,
        predicate: Predicate,
        query: NormalizedQuery,
        snapshot: PopularitySnapshot,
        now: datetime,
    ) -> tuple[list[ScoredResult], int]:
        # The window always reaches the end of the requested page.
        window = max(self.max_candidates, query.page * query.limit)
        with pipeline_span("retrieve", window=window) as span:
            candidates, total = await asyncio.gather(
                self.index.find(predicate, window, retrieval_order(query)),
                self.index.count(predicate),
            )
            span.set_attribute("search.candidates", len(candidates))
            span.set_attribute("search.total", total)
        with pipeline_span("score", candidates=len(candidates)):
            ordered = self.scorer.score(candidates, query, snapshot, now)
        return ordered, total

    async def _facets(self, predicate: Predicate, now: datetime):
        with pipeline_span("facets"):
            return await self.facets.aggregate(predicate, now)

    async def execute(
        self,
        principal: Principal | None,
        query: NormalizedQuery,
        started: float | None = None,
        record: bool = True,
    ) -> SearchResult:
        """Run an already-validated query for principal.

        Visibility is evaluated now, for the principal as given; nothing is
        cached between calls.
        """
        if started is None:
            started = time.perf_counter()
        now = self.clock()
        base = build_base_predicate(principal, query, now, self.permission_filter)
        predicate = all_of(base, TextMatch(query.terms))
        snapshot = self.popularity.snapshot()

        (ordered, total), facets = await asyncio.gather(
            self._retrieve_and_score(predicate, query, snapshot, now),
            self._facets(predicate, now),
        )

        did_you_mean = None
        if self.spelling is not None:
            did_you_mean = await self.spelling.suggest(query.text, total, base)

        event_id = generate_cuid() if record else None
        result = assemble(
            ordered,
            facets,
            query=query.text,
            page=query.page,
            limit=query.limit,
            total=total,
            started=started,
            search_event_id=event_id,
            did_you_mean=did_you_mean,
        )
        if record and event_id and self.tracker is not None:
            self.tracker.record_search(
                SearchEvent(
                    id=event_id,
                    actor_id=principal.user_id if principal else None,
                    query=query.text,
                    timestamp=now,
                    result_count=total,
                    execution_time_ms=result.execution_time_ms,
                    entity_types=tuple(t.value for t in query.entity_types),
                    filters=query.raw_filters,
                )
            )
        logger.debug(
            "Search %r: total=%d page=%d in %dms",
            query.text,
            total,
            query.page,
            result.execution_time_ms,
        )
        return result
