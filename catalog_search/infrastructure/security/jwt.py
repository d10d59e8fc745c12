"""JWT verification for caller authentication.

Tokens are issued by the identity service; this module only verifies them
with the shared secret and algorithm from settings.
"""

from typing import Any

from jose import JWTError, jwt

from catalog_search.core.config import Settings, get_settings


def verify_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
