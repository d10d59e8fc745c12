"""Shared utilities: datetime and id generators."""

from catalog_search.shared.utils.datetime import (
    age_in_days,
    ensure_utc,
    from_timestamp_utc,
    parse_utc,
    utc_now,
)
from catalog_search.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "parse_utc",
    "age_in_days",
    "from_timestamp_utc",
]
