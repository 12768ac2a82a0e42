"""HTTP middleware."""
from user_registry.presentation.middleware.logging import AccessLogMiddleware
from user_registry.presentation.middleware.request_context import REQUEST_ID_HEADER, RequestContextMiddleware

__all__ = ["AccessLogMiddleware", "REQUEST_ID_HEADER", "RequestContextMiddleware"]
