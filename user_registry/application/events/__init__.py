"""Application event bus -- dispatches domain events to handlers registered per kind."""
from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Callable, Coroutine

import structlog

from user_registry.domain.entities.base import DomainEvent, DomainEventKind

logger = structlog.get_logger(__name__)

EventHandler = Callable[[DomainEvent], Coroutine[Any, Any, None]]


class EventBus:
    """In-process async event bus keyed by :class:`DomainEventKind`."""

    def __init__(self) -> None:
        self._handlers: dict[DomainEventKind, list[EventHandler]] = defaultdict(list)

    def subscribe(self, kind: DomainEventKind, handler: EventHandler) -> None:
        self._handlers[kind].append(handler)
        logger.debug("event_handler_registered", event_kind=kind.value, handler=handler.__name__)

    def unsubscribe(self, kind: DomainEventKind, handler: EventHandler) -> None:
        if kind in self._handlers:
            self._handlers[kind] = [h for h in self._handlers[kind] if h != handler]

    def handlers_for(self, kind: DomainEventKind) -> list[EventHandler]:
        return list(self._handlers.get(kind, []))

    async def emit(self, event: DomainEvent) -> None:
        """Run every handler for ``event.kind`` concurrently.

        All handlers run to completion; the first failure is then re-raised.
        """
        handlers = self.handlers_for(event.kind)
        logger.info(
            "event_published",
            event_kind=event.kind.value,
            event_id=event.event_id,
            correlation_id=event.correlation_id,
            handler_count=len(handlers),
        )
        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.warning(
                "event_handler_failed",
                event_kind=event.kind.value,
                event_id=event.event_id,
                failure_count=len(failures),
            )
            raise failures[0]


# --- Singleton ---
_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
        _register_default_handlers(_event_bus)
    return _event_bus


def _register_default_handlers(bus: EventBus) -> None:
    """Register built-in event handlers."""

    async def log_user_created(event: DomainEvent) -> None:
        logger.info(
            "user_created",
            user_id=event.aggregate_id,
            correlation_id=event.correlation_id,
            group=getattr(event, "group", None),
        )

    bus.subscribe(DomainEventKind.USER_CREATED, log_user_created)


__all__ = ["EventBus", "EventHandler", "get_event_bus"]
