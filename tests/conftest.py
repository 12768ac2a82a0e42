"""Root conftest -- shared fixtures for all test suites."""
from __future__ import annotations

import os
import uuid
from typing import Any

import pytest

# Force testing environment
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///test.db"
os.environ["SECURITY_BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "warning"

from user_registry.application.context import RequestContext  # noqa: E402
from user_registry.application.events import EventBus  # noqa: E402
from user_registry.domain.entities.base import DomainEvent, DomainEventKind  # noqa: E402


@pytest.fixture
def request_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def context(request_id: str) -> RequestContext:
    return RequestContext(request_id)


@pytest.fixture
def sample_user_data() -> dict[str, Any]:
    return {
        "name": "John Doe",
        "email": f"john_{uuid.uuid4().hex[:6]}@gmail.com",
        "password": "wUN3B%AM7oV9AO",
    }


@pytest.fixture
def received_events() -> list[DomainEvent]:
    return []


@pytest.fixture
def event_bus(received_events: list[DomainEvent]) -> EventBus:
    """Fresh bus that records every USER_CREATED event it dispatches."""
    bus = EventBus()

    async def record(event: DomainEvent) -> None:
        received_events.append(event)

    bus.subscribe(DomainEventKind.USER_CREATED, record)
    return bus
