"""Query validation and normalization.

Pure functions: a raw request mapping goes in, a NormalizedQuery (or a
ValidationException) comes out. Filter keys are checked exhaustively against
the tagged filter structure; type-scoped keys are turned into predicates that
constrain only their own entity type.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from catalog_search.application.dtos.search import (
    AssetFilters,
    CommonFilters,
    CreatorFilters,
    LicenseFilters,
    NormalizedQuery,
    ProjectFilters,
    SearchFilters,
)
from catalog_search.core.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SUGGESTION_LIMIT,
    MAX_PAGE_SIZE,
    MAX_SUGGESTION_LIMIT,
    QUERY_MAX_LENGTH,
    QUERY_MIN_LENGTH,
    STOP_WORDS,
    SUGGESTION_MAX_LENGTH,
    SUGGESTION_MIN_LENGTH,
)
from catalog_search.domain.enums import EntityType, SortBy, SortOrder
from catalog_search.domain.exceptions import ValidationException
from catalog_search.domain.value_objects.predicates import (
    ActiveParticipant,
    DateBetween,
    FieldEquals,
    FieldIn,
    MatchAll,
    Predicate,
    TagsContainAll,
    all_of,
)
from catalog_search.shared.utils.datetime import parse_utc

_LIST_KEYS_COMMON = {"type": "kinds", "status": "statuses", "tags": "tags"}
_SCALAR_KEYS_COMMON = {"ownerId": "owner_id"}
_DATE_KEYS_COMMON = {"dateFrom": "date_from", "dateTo": "date_to"}

# key -> (entity types it scopes, attribute on that type's filter dataclass, is_list)
_SCOPED_KEYS: dict[str, tuple[tuple[EntityType, ...], str, bool]] = {
    "assetType": ((EntityType.ASSET,), "asset_types", True),
    "assetStatus": ((EntityType.ASSET,), "asset_statuses", True),
    "projectId": ((EntityType.ASSET,), "project_id", False),
    "creatorId": ((EntityType.ASSET,), "creator_id", False),
    "verificationStatus": ((EntityType.CREATOR,), "verification_statuses", True),
    "specialties": ((EntityType.CREATOR,), "specialties", True),
    "projectType": ((EntityType.PROJECT,), "project_types", True),
    "projectStatus": ((EntityType.PROJECT,), "project_statuses", True),
    "licenseType": ((EntityType.LICENSE,), "license_types", True),
    "licenseStatus": ((EntityType.LICENSE,), "license_statuses", True),
    "brandId": ((EntityType.PROJECT, EntityType.LICENSE), "brand_id", False),
}

ALLOWED_FILTER_KEYS = frozenset(
    [*_LIST_KEYS_COMMON, *_SCALAR_KEYS_COMMON, *_DATE_KEYS_COMMON, *_SCOPED_KEYS]
)

_FILTER_CLASSES = {
    EntityType.ASSET: AssetFilters,
    EntityType.CREATOR: CreatorFilters,
    EntityType.PROJECT: ProjectFilters,
    EntityType.LICENSE: LicenseFilters,
}


def tokenize(text: str) -> tuple[str, ...]:
    """Lowercase and split text into terms with stop words removed.

    Falls back to all terms when every term is a stop word.
    """
    words = [w for w in text.lower().split() if w]
    terms = [w for w in words if w not in STOP_WORDS]
    return tuple(terms or words)


def _parse_text(raw: Any, minimum: int, maximum: int, field: str) -> str:
    if not isinstance(raw, str):
        raise ValidationException(f"{field} must be a string", field=field)
    text = raw.strip()
    if not minimum <= len(text) <= maximum:
        raise ValidationException(
            f"{field} must be between {minimum} and {maximum} characters", field=field
        )
    return text


def _parse_int(raw: Any, default: int, field: str) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValidationException(f"{field} must be an integer", field=field)
    return raw


def parse_entity_types(raw: Any) -> tuple[EntityType, ...]:
    """Parse entity type names; empty or None means no explicit selection."""
    if raw is None:
        return ()
    if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
        raise ValidationException("entityTypes must be a list", field="entityTypes")
    parsed: list[EntityType] = []
    for value in raw:
        try:
            entity_type = EntityType(value)
        except ValueError:
            raise ValidationException(
                f"Unknown entity type: {value!r}. Allowed: {', '.join(EntityType.values())}",
                field="entityTypes",
            ) from None
        if entity_type not in parsed:
            parsed.append(entity_type)
    return tuple(parsed)


def _string_list(raw: Any, key: str) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)) or not all(
        isinstance(v, str) and v.strip() for v in raw
    ):
        raise ValidationException(
            f"Filter {key} must be a list of non-empty strings", field=f"filters.{key}"
        )
    return tuple(v.strip() for v in raw)


def _string(raw: Any, key: str) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationException(
            f"Filter {key} must be a non-empty string", field=f"filters.{key}"
        )
    return raw.strip()


def _date(raw: Any, key: str) -> datetime:
    if not isinstance(raw, (str, datetime)):
        raise ValidationException(
            f"Filter {key} must be an ISO-8601 date", field=f"filters.{key}"
        )
    try:
        return parse_utc(raw)
    except ValueError:
        raise ValidationException(
            f"Filter {key} must be an ISO-8601 date", field=f"filters.{key}"
        ) from None


def parse_filters(raw: Any) -> tuple[SearchFilters, tuple[EntityType, ...]]:
    """Validate raw filters into the tagged structure.

    Returns the filters and the entity types scoped by type-specific keys
    (used as the default entityTypes when none are given).
    """
    if raw is None:
        return SearchFilters(), ()
    if not isinstance(raw, Mapping):
        raise ValidationException("filters must be an object", field="filters")

    unknown = sorted(k for k in raw if k not in ALLOWED_FILTER_KEYS)
    if unknown:
        raise ValidationException(
            f"Unknown filter keys: {', '.join(unknown)}", field="filters"
        )

    common: dict[str, Any] = {}
    scoped: dict[EntityType, dict[str, Any]] = {t: {} for t in EntityType}
    scoped_types: list[EntityType] = []

    for key, value in raw.items():
        if value is None:
            continue
        if key in _LIST_KEYS_COMMON:
            common[_LIST_KEYS_COMMON[key]] = _string_list(value, key)
        elif key in _SCALAR_KEYS_COMMON:
            common[_SCALAR_KEYS_COMMON[key]] = _string(value, key)
        elif key in _DATE_KEYS_COMMON:
            common[_DATE_KEYS_COMMON[key]] = _date(value, key)
        else:
            types, attr, is_list = _SCOPED_KEYS[key]
            parsed = _string_list(value, key) if is_list else _string(value, key)
            for entity_type in types:
                scoped[entity_type][attr] = parsed
                if entity_type not in scoped_types:
                    scoped_types.append(entity_type)

    date_from = common.get("date_from")
    date_to = common.get("date_to")
    if date_from and date_to and date_from > date_to:
        raise ValidationException("dateFrom must not be after dateTo", field="filters.dateFrom")

    filters = SearchFilters(
        common=CommonFilters(**common),
        asset=AssetFilters(**scoped[EntityType.ASSET]),
        creator=CreatorFilters(**scoped[EntityType.CREATOR]),
        project=ProjectFilters(**scoped[EntityType.PROJECT]),
        license=LicenseFilters(**scoped[EntityType.LICENSE]),
    )
    ordered = tuple(t for t in EntityType if t in scoped_types)
    return filters, ordered


def validate_search_query(raw: Mapping[str, Any]) -> NormalizedQuery:
    """Validate and normalize a raw search request.

    Args:
        raw: Mapping with keys query, entityTypes, filters, page, limit,
            sortBy, sortOrder (camelCase, as received from the transport).

    Returns:
        NormalizedQuery with defaults applied.

    Raises:
        ValidationException: On any malformed input.
    """
    text = _parse_text(raw.get("query"), QUERY_MIN_LENGTH, QUERY_MAX_LENGTH, "query")

    page = _parse_int(raw.get("page"), 1, "page")
    if page < 1:
        raise ValidationException("page must be >= 1", field="page")
    limit = _parse_int(raw.get("limit"), DEFAULT_PAGE_SIZE, "limit")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationException(f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")

    try:
        sort_by = SortBy(raw.get("sortBy") or SortBy.RELEVANCE.value)
    except ValueError:
        raise ValidationException(
            f"Unknown sortBy. Allowed: {', '.join(SortBy.values())}", field="sortBy"
        ) from None
    try:
        sort_order = SortOrder(raw.get("sortOrder") or SortOrder.DESC.value)
    except ValueError:
        raise ValidationException(
            f"Unknown sortOrder. Allowed: {', '.join(SortOrder.values())}", field="sortOrder"
        ) from None

    raw_filters = raw.get("filters")
    filters, scoped_types = parse_filters(raw_filters)
    entity_types = parse_entity_types(raw.get("entityTypes"))
    if not entity_types:
        entity_types = scoped_types or tuple(EntityType)

    return NormalizedQuery(
        text=text,
        normalized_text=text.lower(),
        terms=tokenize(text),
        entity_types=entity_types,
        filters=filters,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        raw_filters=dict(raw_filters or {}),
    )


def validate_suggestion_query(
    query: Any, limit: Any = None, entity_types: Any = None
) -> tuple[str, int, tuple[EntityType, ...]]:
    """Validate autocomplete input; returns (prefix, limit, entity types)."""
    prefix = _parse_text(query, SUGGESTION_MIN_LENGTH, SUGGESTION_MAX_LENGTH, "query")
    parsed_limit = _parse_int(limit, DEFAULT_SUGGESTION_LIMIT, "limit")
    if not 1 <= parsed_limit <= MAX_SUGGESTION_LIMIT:
        raise ValidationException(
            f"limit must be between 1 and {MAX_SUGGESTION_LIMIT}", field="limit"
        )
    types = parse_entity_types(entity_types) or tuple(EntityType)
    return prefix, parsed_limit, types


def common_filter_predicate(filters: SearchFilters) -> Predicate:
    """Predicate for the filters that apply to every entity type."""
    common = filters.common
    parts: list[Predicate] = []
    if common.kinds:
        parts.append(FieldIn("kind", frozenset(common.kinds)))
    if common.statuses:
        parts.append(FieldIn("status", frozenset(common.statuses)))
    if common.owner_id:
        parts.append(FieldEquals("owner_id", common.owner_id))
    if common.date_from or common.date_to:
        parts.append(DateBetween("created_at", common.date_from, common.date_to))
    if common.tags:
        parts.append(TagsContainAll(frozenset(common.tags)))
    return all_of(*parts)


def scoped_filter_predicate(
    filters: SearchFilters, entity_type: EntityType, now: datetime
) -> Predicate:
    """Predicate for type-scoped filters; MatchAll when none target entity_type."""
    scoped = filters.scoped(entity_type)
    if scoped == _FILTER_CLASSES[entity_type]():
        return MatchAll()
    parts: list[Predicate] = []
    if isinstance(scoped, AssetFilters):
        if scoped.asset_types:
            parts.append(FieldIn("kind", frozenset(scoped.asset_types)))
        if scoped.asset_statuses:
            parts.append(FieldIn("status", frozenset(scoped.asset_statuses)))
        if scoped.project_id:
            parts.append(FieldEquals("project_id", scoped.project_id))
        if scoped.creator_id:
            parts.append(ActiveParticipant(scoped.creator_id, now))
    elif isinstance(scoped, CreatorFilters):
        if scoped.verification_statuses:
            parts.append(FieldIn("status", frozenset(scoped.verification_statuses)))
        if scoped.specialties:
            parts.append(TagsContainAll(frozenset(scoped.specialties)))
    elif isinstance(scoped, ProjectFilters):
        if scoped.project_types:
            parts.append(FieldIn("kind", frozenset(scoped.project_types)))
        if scoped.project_statuses:
            parts.append(FieldIn("status", frozenset(scoped.project_statuses)))
        if scoped.brand_id:
            parts.append(FieldEquals("brand_id", scoped.brand_id))
    else:
        if scoped.license_types:
            parts.append(FieldIn("kind", frozenset(scoped.license_types)))
        if scoped.license_statuses:
            parts.append(FieldIn("status", frozenset(scoped.license_statuses)))
        if scoped.brand_id:
            parts.append(FieldEquals("brand_id", scoped.brand_id))
    return all_of(*parts)
