"""Per-request context -- correlation ID and the active transactional session.

A :class:`RequestContext` is created once per inbound request (by
``RequestContextMiddleware``) and handed explicitly to the repositories and
use cases that serve that request. It is discarded when the request ends.
"""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from user_registry.domain.entities.base import AggregateRoot


class TransactionAlreadyActiveError(RuntimeError):
    """Raised when a second transaction is opened while one is still active."""


class RequestContext:
    """Isolated state for a single request."""

    __slots__ = ("_request_id", "_transaction", "_pending_publication")

    def __init__(self, request_id: str | None = None) -> None:
        self._request_id = request_id or str(uuid.uuid4())
        self._transaction: AsyncSession | None = None
        self._pending_publication: list[AggregateRoot] = []

    def __repr__(self) -> str:
        return f"RequestContext(request_id={self._request_id!r}, in_transaction={self.in_transaction})"

    @property
    def request_id(self) -> str:
        return self._request_id

    # --- transaction handle ---

    @property
    def transaction(self) -> AsyncSession | None:
        return self._transaction

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    def set_transaction(self, session: AsyncSession) -> None:
        if self._transaction is not None:
            raise TransactionAlreadyActiveError(
                f"request {self._request_id} already has an active transaction"
            )
        self._transaction = session

    def clear_transaction(self) -> None:
        self._transaction = None
        self._pending_publication = []

    # --- aggregates awaiting commit before their events go out ---

    def defer_publication(self, aggregate: AggregateRoot) -> None:
        self._pending_publication.append(aggregate)

    def take_pending_publication(self) -> list[AggregateRoot]:
        pending, self._pending_publication = self._pending_publication, []
        return pending


__all__ = ["RequestContext", "TransactionAlreadyActiveError"]
