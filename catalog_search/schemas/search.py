"""Search, suggestion, related content and click API schemas."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from catalog_search.application.dtos.search import (
    RelatedItem,
    ScoredResult,
    SearchResult,
    Suggestion,
)
from catalog_search.domain.enums import EntityType, RelationshipType
from catalog_search.schemas.base import CamelModel


class SearchRequest(CamelModel):
    """Raw search body.

    Fields are intentionally loose: shape and bounds are checked by the query
    validator so that every malformed query yields the same 400 error body.
    Unknown top-level keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    query: Any = None
    entity_types: Any = None
    filters: Any = None
    page: Any = None
    limit: Any = None
    sort_by: Any = None
    sort_order: Any = None

    def to_raw(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ScoreBreakdownResponse(CamelModel):
    textual: float
    recency: float
    popularity: float
    quality: float
    final: float


class SearchResultItemResponse(CamelModel):
    """Single scored hit."""

    id: str
    entity_type: EntityType
    title: str
    description: str | None = None
    status: str
    tags: list[str] = Field(default_factory=list)
    relevance_score: float
    score_breakdown: ScoreBreakdownResponse
    highlights: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_result(cls, result: ScoredResult) -> "SearchResultItemResponse":
        entity = result.entity
        b = result.breakdown
        return cls(
            id=entity.id,
            entity_type=entity.entity_type,
            title=entity.title,
            description=entity.description,
            status=entity.status,
            tags=list(entity.tags),
            relevance_score=result.relevance_score,
            score_breakdown=ScoreBreakdownResponse(
                textual=b.textual,
                recency=b.recency,
                popularity=b.popularity,
                quality=b.quality,
                final=b.final,
            ),
            highlights=dict(result.highlights),
            metadata=dict(entity.metadata),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class PaginationResponse(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class DidYouMeanResponse(CamelModel):
    original_query: str
    suggested_query: str
    confidence: float
    expected_result_count: int


class SearchResponse(CamelModel):
    """Assembled search page. Facets map facet name -> value -> count."""

    results: list[SearchResultItemResponse]
    pagination: PaginationResponse
    facets: dict[str, dict[str, int]]
    query: str
    execution_time_ms: int
    search_event_id: str | None = None
    did_you_mean: DidYouMeanResponse | None = None

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResponse":
        p = result.pagination
        suggestion = result.did_you_mean
        return cls(
            results=[SearchResultItemResponse.from_result(r) for r in result.results],
            pagination=PaginationResponse(
                page=p.page,
                limit=p.limit,
                total=p.total,
                total_pages=p.total_pages,
                has_next_page=p.has_next_page,
                has_previous_page=p.has_previous_page,
            ),
            facets=result.facets.fields,
            query=result.query,
            execution_time_ms=result.execution_time_ms,
            search_event_id=result.search_event_id,
            did_you_mean=(
                DidYouMeanResponse(
                    original_query=suggestion.original_query,
                    suggested_query=suggestion.suggested_query,
                    confidence=suggestion.confidence,
                    expected_result_count=suggestion.expected_result_count,
                )
                if suggestion
                else None
            ),
        )


class SuggestionResponse(CamelModel):
    id: str
    title: str
    type: EntityType
    status: str
    match_count: int

    @classmethod
    def from_suggestion(cls, s: Suggestion) -> "SuggestionResponse":
        return cls(id=s.id, title=s.title, type=s.type, status=s.status, match_count=s.match_count)


class SuggestionsResponse(CamelModel):
    suggestions: list[SuggestionResponse]


class RelatedItemResponse(CamelModel):
    id: str
    entity_type: EntityType
    title: str
    description: str | None = None
    status: str
    tags: list[str] = Field(default_factory=list)
    relevance_score: float
    relationships: list[RelationshipType]
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_item(cls, item: RelatedItem) -> "RelatedItemResponse":
        entity = item.entity
        return cls(
            id=entity.id,
            entity_type=entity.entity_type,
            title=entity.title,
            description=entity.description,
            status=entity.status,
            tags=list(entity.tags),
            relevance_score=item.relevance_score,
            relationships=list(item.relationships),
            metadata=dict(entity.metadata),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class RelatedContentResponse(CamelModel):
    """Entities related to source_id, strongest relationship first."""

    source_id: str
    results: list[RelatedItemResponse]


class ClickRequest(CamelModel):
    """Result click reported by the client; event_id is the searchEventId of the search."""

    event_id: str = Field(..., min_length=1, max_length=64)
    result_id: str = Field(..., min_length=1, max_length=64)
    position: int = Field(..., ge=0)
    entity_type: EntityType


class SuccessResponse(CamelModel):
    success: bool = True


class RecentSearchResponse(CamelModel):
    query: str
    entity_types: list[str]
    searched_at: datetime


class RecentSearchesResponse(CamelModel):
    searches: list[RecentSearchResponse]
