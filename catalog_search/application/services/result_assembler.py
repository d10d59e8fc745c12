"""Result assembly: page slice, pagination metadata and timing."""

from __future__ import annotations

import math
import time

from catalog_search.application.dtos.search import (
    PaginationInfo,
    ScoredResult,
    SearchFacets,
    SearchResult,
    SpellingSuggestion,
)


def build_pagination(page: int, limit: int, total: int) -> PaginationInfo:
    total_pages = math.ceil(total / limit) if total else 0
    return PaginationInfo(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def assemble(
    ordered: list[ScoredResult],
    facets: SearchFacets,
    *,
    query: str,
    page: int,
    limit: int,
    total: int,
    started: float,
    search_event_id: str | None = None,
    did_you_mean: SpellingSuggestion | None = None,
) -> SearchResult:
    """Slice the requested page out of the ordered candidates and attach metadata.

    started is the time.perf_counter() reading taken at validator entry;
    execution_time_ms covers everything up to the finished slice.
    """
    start = (page - 1) * limit
    results = ordered[start : start + limit]
    pagination = build_pagination(page, limit, total)
    return SearchResult(
        results=results,
        pagination=pagination,
        facets=facets,
        query=query,
        execution_time_ms=int((time.perf_counter() - started) * 1000),
        search_event_id=search_event_id,
        did_you_mean=did_you_mean,
    )
