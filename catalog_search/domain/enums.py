"""Domain enumerations for catalog search.

Enums represent fixed sets of domain values (entity types, roles, sort keys).
"""

from enum import Enum


class EntityType(str, Enum):
    """Kind of searchable entity projected into the index."""

    ASSET = "asset"
    CREATOR = "creator"
    PROJECT = "project"
    LICENSE = "license"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid entity type values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [entity_type.value for entity_type in cls]


class Role(str, Enum):
    """Caller role used by the permission filter."""

    ADMIN = "admin"
    VIEWER = "viewer"
    CREATOR = "creator"
    BRAND = "brand"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]


class SortBy(str, Enum):
    """Result ordering keys accepted by search."""

    RELEVANCE = "relevance"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"

    @classmethod
    def values(cls) -> list[str]:
        return [key.value for key in cls]


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def values(cls) -> list[str]:
        return [order.value for order in cls]


class LicenseStatus(str, Enum):
    """License grant status values relevant to visibility."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class RelationshipType(str, Enum):
    """Why an entity is offered as related content."""

    SAME_PROJECT = "same_project"
    SAME_BRAND = "same_brand"
    SHARED_TAGS = "shared_tags"
    SAME_CREATOR = "same_creator"

    @classmethod
    def values(cls) -> list[str]:
        return [relationship.value for relationship in cls]
