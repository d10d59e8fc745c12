"""Principal: the resolved caller identity used for visibility decisions."""

from dataclasses import dataclass

from catalog_search.domain.enums import Role


@dataclass(frozen=True)
class Principal:
    """Caller identity with role and the profiles that role needs.

    Resolved from the identity directory on every request so that role or
    profile changes apply immediately.
    """

    user_id: str
    role: Role
    creator_id: str | None = None
    brand_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
