"""Generic SQLAlchemy repository -- persistence, conflict translation, transactions.

Each repository:
* Is built per request around that request's :class:`RequestContext`.
* Writes through the context's transactional session when one is active,
  otherwise through a short-lived session of its own.
* Publishes an aggregate's domain events only once its write is committed.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, ClassVar, Generic, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_registry.application.context import RequestContext
from user_registry.application.events import EventBus
from user_registry.domain.entities.base import AggregateRoot
from user_registry.domain.exceptions import ConflictError
from user_registry.domain.repositories import Mapper, Repository
from user_registry.shared.result import Err, Ok, Result

A = TypeVar("A", bound=AggregateRoot)
M = TypeVar("M")
T = TypeVar("T")

_UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique-constraint failure.

    PostgreSQL drivers expose SQLSTATE 23505; SQLite only reports it in the
    message text (``UNIQUE constraint failed``).
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION_SQLSTATE
    text = str(orig).lower()
    return "unique constraint" in text or "duplicate key" in text


class SQLAlchemyRepositoryBase(Repository[A], Generic[A, M]):
    """Base for aggregate repositories backed by SQLAlchemy async sessions."""

    entity_type: ClassVar[str] = "Entity"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        mapper: Mapper[A, M],
        event_bus: EventBus,
        context: RequestContext,
        logger: Any | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._mapper = mapper
        self._event_bus = event_bus
        self._context = context
        self._logger = logger or structlog.get_logger(type(self).__name__)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Yield the request's transactional session, or a fresh one."""
        active = self._context.transaction
        if active is not None:
            yield active
            return
        async with self._session_factory() as session:
            yield session

    async def save(self, entity: A) -> Result[None, ConflictError]:
        record = self._mapper.to_persistence(entity)
        in_transaction = self._context.in_transaction

        self._logger.debug(
            "saving",
            request_id=self._context.request_id,
            entity_type=self.entity_type,
            entity_id=entity.id,
        )

        try:
            async with self._session() as session:
                session.add(record)
                if in_transaction:
                    await session.flush()
                else:
                    await session.commit()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            self._logger.debug(
                "save_conflict",
                request_id=self._context.request_id,
                entity_type=self.entity_type,
                entity_id=entity.id,
            )
            return Err(ConflictError(self.entity_type, cause=exc, entity_id=entity.id))

        if in_transaction:
            self._context.defer_publication(entity)
        else:
            await entity.publish_events(self._logger, self._event_bus, self._context)
        return Ok(None)

    async def transaction(self, unit_of_work: Callable[[], Awaitable[T]]) -> T:
        """Run ``unit_of_work`` in one storage transaction for this request.

        A nested call joins the active transaction. The owning call commits
        on success, rolls back on an exception or an ``Err`` result, always
        clears the handle from the context, and publishes deferred events
        only after the commit.
        """
        if self._context.in_transaction:
            return await unit_of_work()

        rid = self._context.request_id
        async with self._session_factory() as session:
            self._context.set_transaction(session)
            self._logger.debug("transaction_started", request_id=rid)
            try:
                result = await unit_of_work()
                if isinstance(result, Err):
                    await session.rollback()
                    self._logger.debug(
                        "transaction_aborted",
                        request_id=rid,
                        reason=getattr(result.error, "code", type(result.error).__name__),
                    )
                    return result
                await session.commit()
                self._logger.debug("transaction_committed", request_id=rid)
                committed = self._context.take_pending_publication()
            except BaseException:
                await session.rollback()
                self._logger.debug("transaction_aborted", request_id=rid)
                raise
            finally:
                self._context.clear_transaction()

        for aggregate in committed:
            await aggregate.publish_events(self._logger, self._event_bus, self._context)
        return result


__all__ = ["SQLAlchemyRepositoryBase", "is_unique_violation"]
