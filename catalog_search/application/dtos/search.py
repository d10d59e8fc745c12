"""DTOs for the search pipeline (no dependency on ORM or HTTP schemas)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from catalog_search.domain.entities.searchable import SearchableEntity
from catalog_search.domain.enums import EntityType, RelationshipType, SortBy, SortOrder


@dataclass(frozen=True)
class CommonFilters:
    """Filters applying to every entity type."""

    kinds: tuple[str, ...] = ()
    statuses: tuple[str, ...] = ()
    owner_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class AssetFilters:
    asset_types: tuple[str, ...] = ()
    asset_statuses: tuple[str, ...] = ()
    project_id: str | None = None
    creator_id: str | None = None


@dataclass(frozen=True)
class CreatorFilters:
    verification_statuses: tuple[str, ...] = ()
    specialties: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectFilters:
    project_types: tuple[str, ...] = ()
    project_statuses: tuple[str, ...] = ()
    brand_id: str | None = None


@dataclass(frozen=True)
class LicenseFilters:
    license_types: tuple[str, ...] = ()
    license_statuses: tuple[str, ...] = ()
    brand_id: str | None = None


@dataclass(frozen=True)
class SearchFilters:
    """Tagged filter structure: common part plus one variant per entity type.

    A type-scoped variant constrains only entities of its own type.
    """

    common: CommonFilters = CommonFilters()
    asset: AssetFilters = AssetFilters()
    creator: CreatorFilters = CreatorFilters()
    project: ProjectFilters = ProjectFilters()
    license: LicenseFilters = LicenseFilters()

    def scoped(self, entity_type: EntityType) -> AssetFilters | CreatorFilters | ProjectFilters | LicenseFilters:
        return {
            EntityType.ASSET: self.asset,
            EntityType.CREATOR: self.creator,
            EntityType.PROJECT: self.project,
            EntityType.LICENSE: self.license,
        }[entity_type]


@dataclass(frozen=True)
class NormalizedQuery:
    """Validated and normalized search query.

    text is the trimmed original (used for highlights and analytics);
    normalized_text and terms are lowercased for matching.
    """

    text: str
    normalized_text: str
    terms: tuple[str, ...]
    entity_types: tuple[EntityType, ...]
    filters: SearchFilters
    page: int
    limit: int
    sort_by: SortBy
    sort_order: SortOrder
    raw_filters: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ScoreBreakdown:
    textual: float
    recency: float
    popularity: float
    quality: float
    final: float


@dataclass(frozen=True)
class ScoredResult:
    entity: SearchableEntity
    breakdown: ScoreBreakdown
    highlights: dict[str, str]

    @property
    def relevance_score(self) -> float:
        return self.breakdown.final


@dataclass(frozen=True)
class FacetValue:
    """One facet bucket: count of matched, visible entities holding value in field."""

    field: str
    value: str
    count: int


@dataclass(frozen=True)
class SearchFacets:
    """Facet counts keyed by facet field, each mapping value -> count."""

    fields: dict[str, dict[str, int]]

    def get(self, name: str) -> dict[str, int]:
        return self.fields.get(name, {})

    def flatten(self) -> list[FacetValue]:
        return [
            FacetValue(field=name, value=value, count=count)
            for name, counts in self.fields.items()
            for value, count in counts.items()
        ]


@dataclass(frozen=True)
class PaginationInfo:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


@dataclass(frozen=True)
class SpellingSuggestion:
    original_query: str
    suggested_query: str
    confidence: float
    expected_result_count: int


@dataclass(frozen=True)
class SearchResult:
    """Assembled search response (read-model)."""

    results: list[ScoredResult]
    pagination: PaginationInfo
    facets: SearchFacets
    query: str
    execution_time_ms: int
    search_event_id: str | None = None
    did_you_mean: SpellingSuggestion | None = None


@dataclass(frozen=True)
class Suggestion:
    """Autocomplete suggestion; match_count = visible entities sharing this title."""

    id: str
    title: str
    type: EntityType
    status: str
    match_count: int


@dataclass(frozen=True)
class RelatedItem:
    """Entity related to a source entity; relationships are strongest first."""

    entity: SearchableEntity
    relevance_score: float
    relationships: tuple[RelationshipType, ...]
