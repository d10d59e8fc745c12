"""ORM models. Importing this package registers every table on Base.metadata."""

from catalog_search.infrastructure.persistence.models.analytics import (
    ClickEventModel,
    SearchEventModel,
)
from catalog_search.infrastructure.persistence.models.principal import PrincipalModel
from catalog_search.infrastructure.persistence.models.saved_search import SavedSearchModel
from catalog_search.infrastructure.persistence.models.searchable import (
    EntityLicenseGrantModel,
    EntityParticipantModel,
    SearchableEntityModel,
)

__all__ = [
    "ClickEventModel",
    "EntityLicenseGrantModel",
    "EntityParticipantModel",
    "PrincipalModel",
    "SavedSearchModel",
    "SearchEventModel",
    "SearchableEntityModel",
]
