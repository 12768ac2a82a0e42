"""Commands -- intent objects handed to use-case handlers."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class Command(BaseModel):
    """Base command carrying its own id and the originating request's correlation id."""
    model_config = ConfigDict(frozen=True)

    command_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    correlation_id: str | None = None


class CreateUserCommand(Command):
    name: str
    email: str
    password: str = Field(repr=False)


__all__ = ["Command", "CreateUserCommand"]
