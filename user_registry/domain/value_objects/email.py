"""Email value object with validation.

Syntax is checked by ``email-validator`` through :func:`pydantic.validate_email`,
the same rule the HTTP layer applies with ``EmailStr``.
"""
from __future__ import annotations

from pydantic import validate_email
from pydantic_core import PydanticCustomError

from user_registry.domain.entities.base import ValueObject
from user_registry.domain.exceptions import ArgumentNotProvidedException, InvalidEmailError

MIN_LENGTH = 5
MAX_LENGTH = 320


class Email(ValueObject):
    """Validated email address."""

    value: str

    def validate_props(self) -> None:
        if not self.value or not self.value.strip():
            raise ArgumentNotProvidedException("email is required")
        if not MIN_LENGTH <= len(self.value) <= MAX_LENGTH:
            raise InvalidEmailError(self.value)
        try:
            validate_email(self.value)
        except PydanticCustomError as exc:
            raise InvalidEmailError(self.value) from exc

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]

    @property
    def local_part(self) -> str:
        return self.value.rsplit("@", 1)[0]

    def __str__(self) -> str:
        return self.value
