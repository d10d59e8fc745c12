"""Security: JWT verification and identity resolution."""

from catalog_search.infrastructure.security.identity import IdentityResolver
from catalog_search.infrastructure.security.jwt import verify_token

__all__ = ["IdentityResolver", "verify_token"]
