"""User aggregate root."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from user_registry.domain.entities.base import DomainEvent, Entity, EventLog, Identity
from user_registry.domain.events import UserCreatedEvent
from user_registry.domain.value_objects.email import Email
from user_registry.domain.value_objects.password import HashedPassword

DEFAULT_GROUP = "basic"


class UserProps(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: Email
    name: str
    group: str = DEFAULT_GROUP
    active: bool = True


class User(Entity[UserProps]):
    """User aggregate root.

    The password hash travels with the aggregate for persistence but is
    kept out of ``get_props()`` / ``to_object()``.
    """

    def __init__(
        self,
        props: UserProps,
        password: HashedPassword,
        identity: Identity | None = None,
    ) -> None:
        self._password = password
        self._events = EventLog()
        super().__init__(props, identity)

    @classmethod
    def create(cls, name: str, email: str, password: HashedPassword) -> User:
        props = UserProps(email=Email(value=email), name=name)
        user = cls(props, password)
        user._add_event(UserCreatedEvent(
            aggregate_id=user.id,
            name=props.name,
            email=props.email.value,
            group=props.group,
        ))
        return user

    @property
    def email(self) -> Email:
        return self._props.email

    @property
    def name(self) -> str:
        return self._props.name

    @property
    def group(self) -> str:
        return self._props.group

    @property
    def is_active(self) -> bool:
        return self._props.active

    @property
    def hashed_password(self) -> HashedPassword:
        return self._password

    # --- events ---

    @property
    def domain_events(self) -> list[DomainEvent]:
        return self._events.pending

    def clear_events(self) -> None:
        self._events.clear()

    async def publish_events(self, logger: Any, event_bus: Any, context: Any) -> None:
        await self._events.publish(self, logger, event_bus, context)

    def _add_event(self, event: DomainEvent) -> None:
        self._events.record(event)
