"""Identity resolution: bearer token -> Principal.

The token proves who the caller is; role and profiles always come from the
principal directory at request time so changes apply immediately.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalog_search.core.config import Settings
from catalog_search.domain.entities.principal import Principal
from catalog_search.domain.exceptions import AuthenticationException
from catalog_search.infrastructure.security.jwt import verify_token

if TYPE_CHECKING:
    from catalog_search.application.interfaces.repositories import IPrincipalDirectory

logger = logging.getLogger(__name__)


class IdentityResolver:
    def __init__(self, directory: IPrincipalDirectory, settings: Settings | None = None) -> None:
        self.directory = directory
        self.settings = settings

    async def resolve(self, token: str | None) -> Principal:
        """Return the principal for token.

        Raises:
            AuthenticationException: Missing or invalid token, or unknown subject.
        """
        if not token:
            raise AuthenticationException("Missing bearer token")
        try:
            payload = verify_token(token, self.settings)
        except ValueError as e:
            logger.debug("Token rejected: %s", e)
            raise AuthenticationException("Invalid or expired token") from e
        principal = await self.directory.get(str(payload["sub"]))
        if principal is None:
            raise AuthenticationException("Unknown identity")
        return principal
