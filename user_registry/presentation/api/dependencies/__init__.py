"""FastAPI dependency injection providers.

Wires the per-request :class:`RequestContext` into repositories and use
cases. Engine and session factory live on ``app.state`` (set up in the app
lifespan).
"""
from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_registry.application.context import RequestContext
from user_registry.application.events import EventBus, get_event_bus
from user_registry.application.use_cases.user_management import CreateUserUseCase
from user_registry.domain.repositories import UserRepository
from user_registry.infrastructure.config import Settings
from user_registry.infrastructure.persistence.repositories import SQLAlchemyUserRepository, UserMapper


def get_request_context(request: Request) -> RequestContext:
    context = getattr(request.state, "context", None)
    if context is None:
        context = RequestContext()
        request.state.context = context
    return context


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_bus() -> EventBus:
    return get_event_bus()


def get_user_repository(
    context: RequestContext = Depends(get_request_context),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    bus: EventBus = Depends(get_bus),
) -> UserRepository:
    return SQLAlchemyUserRepository(
        session_factory=session_factory,
        mapper=UserMapper(),
        event_bus=bus,
        context=context,
    )


def get_create_user_use_case(
    repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings_dep),
) -> CreateUserUseCase:
    return CreateUserUseCase(repo=repo, bcrypt_rounds=settings.security.bcrypt_rounds)


__all__ = [
    "get_bus",
    "get_create_user_use_case",
    "get_request_context",
    "get_session_factory",
    "get_settings_dep",
    "get_user_repository",
]
