"""Facet aggregation over the permission-filtered, text-matched candidate set.

Counts are taken from the index with the same predicate used for retrieval,
before pagination. Date ranges are disjoint buckets on created_at so every
single-valued facet sums to the total.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from catalog_search.application.dtos.search import SearchFacets
from catalog_search.application.interfaces.repositories import IEntityIndex
from catalog_search.domain.enums import EntityType
from catalog_search.domain.value_objects.predicates import (
    DateBetween,
    FieldEquals,
    Predicate,
    all_of,
)

_ONE_TICK = timedelta(microseconds=1)

# facet name -> (index field, entity type restriction)
_FIELD_FACETS: dict[str, tuple[str, EntityType | None]] = {
    "entityTypes": ("entity_type", None),
    "statuses": ("status", None),
    "assetTypes": ("kind", EntityType.ASSET),
    "projectTypes": ("kind", EntityType.PROJECT),
    "licenseTypes": ("kind", EntityType.LICENSE),
    "tags": ("tags", None),
}

DATE_BUCKETS = ("last7Days", "last30Days", "last90Days", "older")


def date_bucket_predicates(now: datetime) -> dict[str, Predicate]:
    """Disjoint created_at buckets relative to now."""
    d7, d30, d90 = (now - timedelta(days=n) for n in (7, 30, 90))
    return {
        "last7Days": DateBetween("created_at", d7, None),
        "last30Days": DateBetween("created_at", d30, d7 - _ONE_TICK),
        "last90Days": DateBetween("created_at", d90, d30 - _ONE_TICK),
        "older": DateBetween("created_at", None, d90 - _ONE_TICK),
    }


class FacetAggregator:
    """Computes facet counts concurrently from the index."""

    def __init__(self, index: IEntityIndex) -> None:
        self.index = index

    async def _field(
        self, predicate: Predicate, field: str, restrict: EntityType | None
    ) -> dict[str, int]:
        if restrict is not None:
            predicate = all_of(predicate, FieldEquals("entity_type", restrict.value))
        return await self.index.count_by_field(predicate, field)

    async def _date_ranges(self, predicate: Predicate, now: datetime) -> dict[str, int]:
        buckets = date_bucket_predicates(now)
        counts = await asyncio.gather(
            *(self.index.count(all_of(predicate, bucket)) for bucket in buckets.values())
        )
        return dict(zip(buckets.keys(), counts, strict=True))

    async def aggregate(self, predicate: Predicate, now: datetime) -> SearchFacets:
        names = list(_FIELD_FACETS)
        field_counts, date_ranges = await asyncio.gather(
            asyncio.gather(*(self._field(predicate, *_FIELD_FACETS[name]) for name in names)),
            self._date_ranges(predicate, now),
        )
        fields = dict(zip(names, field_counts, strict=True))
        fields["dateRanges"] = date_ranges
        return SearchFacets(fields=fields)
