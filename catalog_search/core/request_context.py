"""Request context: per-request identifiers for logging.

RequestIDMiddleware sets the request id in this context variable; the
logging filter installed by setup_logging reads it so every log line of a
request (including analytics worker lines enqueued by it) can be correlated.
"""

from contextvars import ContextVar

current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the current request id for this context."""
    current_request_id.set(request_id)


def get_request_id() -> str | None:
    """Return the current request id if set."""
    return current_request_id.get()
