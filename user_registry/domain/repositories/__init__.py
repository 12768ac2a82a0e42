"""Domain repository interfaces (ports) -- abstract contracts for persistence."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Generic, TypeVar

from user_registry.domain.entities.base import AggregateRoot
from user_registry.domain.entities.user import User
from user_registry.domain.exceptions import ConflictError
from user_registry.shared.result import Result

A = TypeVar("A", bound=AggregateRoot)
M = TypeVar("M")
T = TypeVar("T")


class Mapper(ABC, Generic[A, M]):
    """Maps an aggregate to and from its storage record."""

    @abstractmethod
    def to_domain(self, record: M) -> A: ...

    @abstractmethod
    def to_persistence(self, entity: A) -> M: ...


class Repository(ABC, Generic[A]):
    """Base repository interface."""

    @abstractmethod
    async def save(self, entity: A) -> Result[None, ConflictError]: ...

    @abstractmethod
    async def transaction(self, unit_of_work: Callable[[], Awaitable[T]]) -> T: ...


class UserRepository(Repository[User]):
    """User aggregate repository port."""

    @abstractmethod
    async def find_one_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    async def find_one_by_id(self, entity_id: str) -> User | None: ...


__all__ = ["Mapper", "Repository", "UserRepository"]
