"""Domain entities (pure business objects, no ORM)."""

from catalog_search.domain.entities.analytics import ClickEvent, SearchEvent
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.entities.saved_search import SavedSearchEntity
from catalog_search.domain.entities.searchable import (
    LicenseGrant,
    Participation,
    SearchableEntity,
)

__all__ = [
    "ClickEvent",
    "LicenseGrant",
    "Participation",
    "Principal",
    "SavedSearchEntity",
    "SearchEvent",
    "SearchableEntity",
]
