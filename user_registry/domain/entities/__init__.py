"""Domain entities and aggregate roots."""
from user_registry.domain.entities.base import (
    AggregateRoot,
    DomainEvent,
    DomainEventKind,
    Entity,
    EventLog,
    HasIdentity,
    Identity,
    RecordsEvents,
    ValueObject,
)
from user_registry.domain.entities.user import User, UserProps

__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "DomainEventKind",
    "Entity",
    "EventLog",
    "HasIdentity",
    "Identity",
    "RecordsEvents",
    "User",
    "UserProps",
    "ValueObject",
]
