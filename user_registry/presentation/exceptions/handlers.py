"""Global exception handlers -- map domain exceptions to HTTP responses."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

from user_registry.domain.exceptions import (
    ArgumentInvalidException,
    ArgumentNotProvidedException,
    DomainException,
    EntityAlreadyExistsException,
    EventPublishError,
    InvalidPasswordError,
)
from user_registry.presentation.middleware.request_context import REQUEST_ID_HEADER

logger = structlog.get_logger(__name__)


def _request_id(request: Request, exc: Exception | None = None) -> str | None:
    correlation_id = getattr(exc, "correlation_id", None)
    if correlation_id:
        return correlation_id
    context = getattr(request.state, "context", None)
    return context.request_id if context is not None else None


def _error_response(
    status: int,
    code: str,
    message: str,
    details: list | None = None,
    request_id: str | None = None,
) -> ORJSONResponse:
    body: dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "details": details or [],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }
    if request_id:
        body["error"]["request_id"] = request_id
    return ORJSONResponse(status_code=status, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
        details = []
        for error in exc.errors():
            loc = ".".join(str(part) for part in error.get("loc", []))
            details.append({"field": loc, "message": error.get("msg", "")})
        return _error_response(400, "VALIDATION_ERROR", "Invalid request parameters", details, _request_id(request))

    @app.exception_handler(EntityAlreadyExistsException)
    async def conflict_handler(request: Request, exc: EntityAlreadyExistsException) -> ORJSONResponse:
        return _error_response(409, exc.code, exc.message, request_id=_request_id(request, exc))

    @app.exception_handler(InvalidPasswordError)
    async def password_error_handler(request: Request, exc: InvalidPasswordError) -> ORJSONResponse:
        details = [{"field": "password", "message": v} for v in exc.violations]
        return _error_response(400, exc.code, exc.message, details, _request_id(request, exc))

    @app.exception_handler(ArgumentInvalidException)
    @app.exception_handler(ArgumentNotProvidedException)
    async def argument_error_handler(request: Request, exc: DomainException) -> ORJSONResponse:
        return _error_response(400, exc.code, exc.message, request_id=_request_id(request, exc))

    @app.exception_handler(EventPublishError)
    async def event_publish_handler(request: Request, exc: EventPublishError) -> ORJSONResponse:
        logger.error("event_publish_failed", **exc.to_dict())
        return _error_response(500, exc.code, "An unexpected error occurred", request_id=_request_id(request, exc))

    @app.exception_handler(DomainException)
    async def domain_error_handler(request: Request, exc: DomainException) -> ORJSONResponse:
        logger.warning("domain_exception", **exc.to_dict())
        return _error_response(400, exc.code, exc.message, request_id=_request_id(request, exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        # Runs in ServerErrorMiddleware, outside RequestContextMiddleware: set the header here.
        request_id = _request_id(request)
        logger.error("unhandled_exception", error=str(exc), type=type(exc).__name__, request_id=request_id)
        response = _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred", request_id=request_id)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
