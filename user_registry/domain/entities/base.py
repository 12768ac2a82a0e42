"""Base building blocks for DDD aggregates.

Entities are composed rather than inherited: an :class:`Identity` record
(id + timestamps) plus a frozen props model, with an :class:`EventLog`
attached to aggregate types that emit domain events.
"""
from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, Mapping, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from user_registry.domain.exceptions import EventPublishError

if TYPE_CHECKING:
    from user_registry.application.context import RequestContext
    from user_registry.application.events import EventBus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _freeze(value: Any) -> Any:
    """Recursively convert containers into read-only equivalents."""
    if isinstance(value, ValueObject):
        return value.unpack()
    if isinstance(value, BaseModel):
        return _freeze(dict(value))
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


# --- Value objects ---

class ValueObject(BaseModel):
    """Immutable, self-validating value object.

    Subclasses declare their props as fields and override :meth:`validate_props`.
    A single field named ``value`` marks a domain primitive.
    """
    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)
        self.validate_props()

    def validate_props(self) -> None:
        """Raise a domain exception when the props break an invariant."""

    @property
    def is_domain_primitive(self) -> bool:
        return set(type(self).model_fields) == {"value"}

    def unpack(self) -> Any:
        if self.is_domain_primitive:
            return getattr(self, "value")
        return _freeze(self.model_dump())

    def equals(self, other: ValueObject | None) -> bool:
        if other is None or not isinstance(other, ValueObject):
            return False
        return type(self) is type(other) and self.model_dump(mode="json") == other.model_dump(mode="json")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ValueObject) and self.equals(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__, repr(sorted(self.model_dump(mode="json").items()))))


# --- Domain events ---

class DomainEventKind(str, Enum):
    """Closed set of event kinds the application can dispatch."""

    USER_CREATED = "user.created"


class DomainEvent(BaseModel):
    """Base domain event. Concrete events pin ``kind`` and add payload fields."""
    model_config = ConfigDict(frozen=True)

    kind: DomainEventKind
    aggregate_id: str
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = Field(default_factory=_utcnow)
    correlation_id: str | None = None

    def with_correlation(self, correlation_id: str) -> DomainEvent:
        return self.model_copy(update={"correlation_id": correlation_id})


# --- Identity ---

class Identity(BaseModel):
    """Identity and timestamps shared by every entity."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def new(cls, id: str | None = None, created_at: datetime | None = None, updated_at: datetime | None = None) -> Identity:
        now = _utcnow()
        return cls(
            id=id or str(uuid.uuid4()),
            created_at=created_at or now,
            updated_at=updated_at or now,
        )

    def touched(self) -> Identity:
        return self.model_copy(update={"updated_at": _utcnow()})


@runtime_checkable
class HasIdentity(Protocol):
    @property
    def id(self) -> str: ...


@runtime_checkable
class RecordsEvents(Protocol):
    @property
    def domain_events(self) -> list[DomainEvent]: ...

    def clear_events(self) -> None: ...

    async def publish_events(self, logger: Any, event_bus: EventBus, context: RequestContext) -> None: ...


@runtime_checkable
class AggregateRoot(HasIdentity, RecordsEvents, Protocol):
    """Anything a repository can persist: identity plus pending events."""


P = TypeVar("P", bound=BaseModel)


class Entity(Generic[P]):
    """Identity-bearing wrapper around a frozen props model."""

    def __init__(self, props: P, identity: Identity | None = None) -> None:
        self._identity = identity or Identity.new()
        self._props = props
        self.validate()

    @property
    def id(self) -> str:
        return self._identity.id

    @property
    def created_at(self) -> datetime:
        return self._identity.created_at

    @property
    def updated_at(self) -> datetime:
        return self._identity.updated_at

    @property
    def identity(self) -> Identity:
        return self._identity

    def validate(self) -> None:
        """Hook for aggregate invariants checked at construction."""

    def _update_props(self, **changes: Any) -> None:
        self._props = self._props.model_copy(update=changes)
        self._identity = self._identity.touched()

    def equals(self, other: object) -> bool:
        if other is None or not isinstance(other, Entity):
            return False
        if other is self:
            return True
        return bool(self.id) and self.id == other.id

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self.id)

    def get_props(self) -> Mapping[str, Any]:
        """Frozen snapshot with value objects kept as objects."""
        return MappingProxyType({
            "id": self.id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            **dict(self._props),
        })

    def to_object(self) -> Mapping[str, Any]:
        """Frozen snapshot reduced to primitives, for logging and debugging."""
        return MappingProxyType({
            "id": self.id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            **{k: _freeze(v) for k, v in dict(self._props).items()},
        })

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class EventLog:
    """Ordered, append-only buffer of pending domain events for one aggregate."""

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    @property
    def pending(self) -> list[DomainEvent]:
        return list(self._events)

    def record(self, event: DomainEvent) -> None:
        self._events.append(event)

    def clear(self) -> None:
        self._events = []

    async def publish(
        self,
        aggregate: HasIdentity,
        logger: Any,
        event_bus: EventBus,
        context: RequestContext,
    ) -> None:
        """Dispatch every pending event concurrently, then clear the buffer.

        All dispatches are awaited before the outcome is decided; if any
        handler failed the batch raises ``EventPublishError``.
        """
        async def _dispatch(event: DomainEvent) -> None:
            logger.debug(
                "domain_event_published",
                request_id=context.request_id,
                event_kind=event.kind.value,
                aggregate=type(aggregate).__name__,
                aggregate_id=aggregate.id,
            )
            await event_bus.emit(event.with_correlation(context.request_id))

        try:
            results = await asyncio.gather(
                *(_dispatch(e) for e in self._events),
                return_exceptions=True,
            )
        finally:
            self.clear()

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            raise EventPublishError(aggregate.id, failures, correlation_id=context.request_id)


__all__ = [
    "AggregateRoot",
    "DomainEvent",
    "DomainEventKind",
    "Entity",
    "EventLog",
    "HasIdentity",
    "Identity",
    "RecordsEvents",
    "ValueObject",
]
