"""User management use cases -- orchestrate domain logic through repository ports."""
from __future__ import annotations

import asyncio

import structlog

from user_registry.application.commands import CreateUserCommand
from user_registry.domain.entities.user import User
from user_registry.domain.exceptions import ConflictError, UserAlreadyExistsError
from user_registry.domain.repositories import UserRepository
from user_registry.domain.value_objects.email import Email
from user_registry.domain.value_objects.password import DEFAULT_ROUNDS, HashedPassword
from user_registry.shared.result import Err, Ok, Result

logger = structlog.get_logger(__name__)


class CreateUserUseCase:
    """Register a new user.

    Build the aggregate (validation failures raise before any I/O, and the
    email is checked before any hashing work), persist it inside a
    transaction, then map a storage conflict onto
    :class:`UserAlreadyExistsError`. Any other failure propagates unchanged.
    """

    def __init__(self, repo: UserRepository, bcrypt_rounds: int = DEFAULT_ROUNDS) -> None:
        self._repo = repo
        self._bcrypt_rounds = bcrypt_rounds

    async def execute(self, command: CreateUserCommand) -> Result[str, UserAlreadyExistsError]:
        email = Email(value=command.email)
        # bcrypt is CPU-bound: hash in a worker thread.
        password = await asyncio.to_thread(HashedPassword.from_plain, command.password, self._bcrypt_rounds)
        user = User.create(name=command.name, email=email.value, password=password)

        async def persist() -> Result[None, ConflictError]:
            if await self._repo.find_one_by_email(user.email.value) is not None:
                return Err(ConflictError("User", email=user.email.value))
            return await self._repo.save(user)

        result = await self._repo.transaction(persist)

        if isinstance(result, Err):
            logger.info("user_already_exists", email_domain=user.email.domain)
            return Err(UserAlreadyExistsError(user.email.value, cause=result.error))

        logger.info("user_registered", user_id=user.id)
        return Ok(user.id)


__all__ = ["CreateUserUseCase"]
