"""ASGI middleware."""

from catalog_search.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
