"""Domain exceptions for catalog search.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from datetime import datetime
from typing import Any


class SearchCoreException(Exception):
    """Base exception for all catalog search errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(SearchCoreException):
    """Raised when a query, filter, pagination or date range is malformed.

    Callers must fix the input; retrying the same request will fail again.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(SearchCoreException):
    """Raised when the caller identity cannot be resolved (missing or invalid token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(SearchCoreException):
    """Raised when the caller's role lacks access to an explicitly requested scope."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource (e.g. 'search_analytics').
            action: Optional action that was attempted (e.g. 'read').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(SearchCoreException):
    """Raised when a requested resource is absent or not owned by the caller."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RateLimitException(SearchCoreException):
    """Raised when an identity exceeds its sliding-window budget for a category.

    Callers must not retry before reset_at.
    """

    def __init__(self, category: str, limit: str, reset_at: datetime) -> None:
        """Initialize with the exhausted category, its limit string and reset time.

        Args:
            category: Budget category (e.g. 'search', 'suggestions').
            limit: Limit string in effect (e.g. '60/minute').
            reset_at: UTC time after which a retry may succeed.
        """
        self.reset_at = reset_at
        super().__init__(
            f"Rate limit exceeded for {category} ({limit}); retry after {reset_at.isoformat()}",
            "RATE_LIMIT_EXCEEDED",
            {"category": category, "limit": limit, "resetAt": reset_at.isoformat()},
        )


class InternalException(SearchCoreException):
    """Raised on index or store failure. Message never carries diagnostic detail."""

    def __init__(self, message: str = "Internal error; retry with backoff") -> None:
        super().__init__(message, "INTERNAL_ERROR")


class IndexUnavailableException(InternalException):
    """Raised by index adapters when the underlying store fails a lookup."""

    def __init__(self) -> None:
        super().__init__("Search index unavailable; retry with backoff")


class SqlNotConfiguredException(SearchCoreException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
