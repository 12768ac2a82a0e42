"""Request context middleware.

Every request gets a :class:`RequestContext`. Its ``request_id`` is taken
from an incoming ``X-Request-ID`` header or generated as a UUID-4, bound into
the structlog context for the lifetime of the request, stored on
``request.state.context`` for the dependency layer, and echoed back on the
response.
"""
from __future__ import annotations

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from user_registry.application.context import RequestContext
from user_registry.infrastructure.logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],  # type: ignore[override]
    ) -> Response:
        context = RequestContext(request_id=request.headers.get(REQUEST_ID_HEADER) or None)
        request.state.context = context
        bind_request_context(context)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = context.request_id
        return response
