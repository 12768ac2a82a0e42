"""Domain events -- immutable records of things that happened in the domain."""
from __future__ import annotations

from typing import Literal

from user_registry.domain.entities.base import DomainEvent, DomainEventKind


class UserCreatedEvent(DomainEvent):
    """Raised when a new user is registered."""
    kind: Literal[DomainEventKind.USER_CREATED] = DomainEventKind.USER_CREATED

    name: str
    email: str
    group: str


__all__ = ["UserCreatedEvent"]
