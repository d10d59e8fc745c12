"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from catalog_search.domain.entities import (
    ClickEvent,
    Principal,
    SavedSearchEntity,
    SearchableEntity,
    SearchEvent,
)
from catalog_search.domain.enums import EntityType, Role, SortBy, SortOrder
from catalog_search.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    InternalException,
    RateLimitException,
    ResourceNotFoundException,
    SearchCoreException,
    ValidationException,
)

__all__ = [
    # Entities
    "ClickEvent",
    "Principal",
    "SavedSearchEntity",
    "SearchableEntity",
    "SearchEvent",
    # Enums
    "EntityType",
    "Role",
    "SortBy",
    "SortOrder",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "InternalException",
    "RateLimitException",
    "ResourceNotFoundException",
    "SearchCoreException",
    "ValidationException",
]
