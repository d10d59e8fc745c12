"""Tests for domain exceptions (error_code, message, details)."""

from datetime import UTC, datetime

import pytest

from catalog_search.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    IndexUnavailableException,
    InternalException,
    RateLimitException,
    ResourceNotFoundException,
    SearchCoreException,
    SqlNotConfiguredException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base SearchCoreException uses class name as error_code when not provided."""
    exc = SearchCoreException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "SearchCoreException"
    assert exc.details == {}
    assert exc.to_dict() == {"error": "SearchCoreException", "message": "Something failed"}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Query too short", field="query")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "query"}
    assert ValidationException("Invalid").details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authorization_exception_with_resource_and_action() -> None:
    """AuthorizationException builds message from resource and action."""
    exc = AuthorizationException(resource="search_analytics", action="read")
    assert exc.message == "Permission denied: read on search_analytics"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "search_analytics", "action": "read"}
    assert AuthorizationException().message == "Permission denied"


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("SavedSearch", "s1")
    assert exc.message == "SavedSearch not found: s1"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "SavedSearch", "resource_id": "s1"}


def test_rate_limit_exception_carries_reset() -> None:
    """RateLimitException exposes reset_at and reports it in details."""
    reset_at = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
    exc = RateLimitException("search", "60/minute", reset_at)
    assert exc.reset_at == reset_at
    assert exc.error_code == "RATE_LIMIT_EXCEEDED"
    assert exc.details["resetAt"] == reset_at.isoformat()
    assert exc.details["category"] == "search"


@pytest.mark.parametrize("exc", [InternalException(), IndexUnavailableException()])
def test_internal_errors_have_no_detail(exc: InternalException) -> None:
    assert exc.error_code == "INTERNAL_ERROR"
    assert exc.details == {}
    assert "retry" in exc.message


def test_sql_not_configured() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
    assert isinstance(exc, SearchCoreException)
