"""Domain exception hierarchy -- business rule violations and translated storage conflicts.

Every exception captures the active request's correlation ID when it is
*constructed* and serialises uniformly through :meth:`DomainException.to_dict`.
"""
from __future__ import annotations

import traceback
from typing import Any

import structlog


def _current_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")


class DomainException(Exception):
    """Base domain exception."""

    def __init__(
        self,
        message: str,
        code: str = "DOMAIN_ERROR",
        *,
        cause: BaseException | None = None,
        metadata: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.cause = cause
        self.metadata: dict[str, Any] = metadata or {}
        self.correlation_id = correlation_id or _current_request_id()
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"code={self.code!r}, "
            f"correlation_id={self.correlation_id!r}, "
            f"message={self.message!r})"
        )

    def to_dict(self, include_stack: bool = False) -> dict[str, Any]:
        """Serialise the exception for logs and API error bodies.

        Stack traces are only included on request; never return them to
        clients in production.
        """
        data: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "correlation_id": self.correlation_id,
            "metadata": self.metadata,
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        if include_stack and self.__traceback__ is not None:
            data["stack"] = "".join(traceback.format_tb(self.__traceback__))
        return data


# --- Argument Exceptions ---

class ArgumentInvalidException(DomainException):
    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message=message, code="GENERIC.ARGUMENT_INVALID", **kwargs)


class ArgumentNotProvidedException(DomainException):
    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message=message, code="GENERIC.ARGUMENT_NOT_PROVIDED", **kwargs)


# --- Value Object Exceptions ---

class InvalidEmailError(ArgumentInvalidException):
    def __init__(self, email: str) -> None:
        super().__init__(message=f"Invalid email address: '{email}'", metadata={"email": email})
        self.code = "INVALID_EMAIL"


class InvalidPasswordError(ArgumentInvalidException):
    def __init__(self, violations: list[str]) -> None:
        super().__init__(message="Password does not meet requirements: " + "; ".join(violations))
        self.code = "INVALID_PASSWORD"
        self.violations = violations


# --- Persistence Exceptions ---

class ConflictError(DomainException):
    """A storage uniqueness constraint rejected the write."""

    def __init__(self, entity_type: str, cause: BaseException | None = None, **metadata: Any) -> None:
        super().__init__(
            message=f"{entity_type} violates a uniqueness constraint",
            code="GENERIC.CONFLICT",
            cause=cause,
            metadata={"entity_type": entity_type, **metadata},
        )
        self.entity_type = entity_type


class EntityAlreadyExistsException(DomainException):
    def __init__(self, entity_type: str, field: str, value: str, cause: BaseException | None = None) -> None:
        super().__init__(
            message=f"{entity_type} with {field}='{value}' already exists",
            code="ENTITY_ALREADY_EXISTS",
            cause=cause,
            metadata={"entity_type": entity_type, "field": field},
        )
        self.entity_type = entity_type
        self.field = field
        self.value = value


class UserAlreadyExistsError(EntityAlreadyExistsException):
    message_template = "User already exists"

    def __init__(self, email: str, cause: BaseException | None = None) -> None:
        super().__init__("User", "email", email, cause=cause)
        self.message = self.message_template
        self.args = (self.message,)
        self.code = "USER.ALREADY_EXISTS"


# --- Event Exceptions ---

class EventPublishError(DomainException):
    """One or more handlers failed while publishing an aggregate's events."""

    def __init__(self, aggregate_id: str, failures: list[BaseException], correlation_id: str | None = None) -> None:
        super().__init__(
            message=f"{len(failures)} event handler(s) failed for aggregate {aggregate_id}",
            code="EVENT_PUBLISH_FAILED",
            cause=failures[0] if failures else None,
            metadata={"aggregate_id": aggregate_id, "errors": [repr(f) for f in failures]},
            correlation_id=correlation_id,
        )
        self.failures = failures


__all__ = [
    "ArgumentInvalidException",
    "ArgumentNotProvidedException",
    "ConflictError",
    "DomainException",
    "EntityAlreadyExistsException",
    "EventPublishError",
    "InvalidEmailError",
    "InvalidPasswordError",
    "UserAlreadyExistsError",
]
