"""Password value object -- stores only hashed representation."""
from __future__ import annotations

import bcrypt

from user_registry.domain.entities.base import ValueObject
from user_registry.domain.exceptions import ArgumentNotProvidedException, InvalidPasswordError

MIN_LENGTH = 4
# bcrypt only uses the first 72 bytes; longer input is truncated before hashing
MAX_BYTES = 72
DEFAULT_ROUNDS = 10


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:MAX_BYTES]


class HashedPassword(ValueObject):
    """Bcrypt-hashed password. Never stores plaintext."""

    value: str

    def validate_props(self) -> None:
        if not self.value:
            raise ArgumentNotProvidedException("password hash is required")

    @classmethod
    def from_plain(cls, plain: str, rounds: int = DEFAULT_ROUNDS) -> HashedPassword:
        cls._validate_plain(plain)
        hashed = bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=rounds))
        return cls(value=hashed.decode("utf-8"))

    @classmethod
    def from_hash(cls, hashed: str) -> HashedPassword:
        return cls(value=hashed)

    def verify(self, plain: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(plain), self.value.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    @staticmethod
    def _validate_plain(plain: str) -> None:
        errors: list[str] = []
        if len(plain) < MIN_LENGTH:
            errors.append(f"minimum {MIN_LENGTH} characters")
        if errors:
            raise InvalidPasswordError(errors)

    def __str__(self) -> str:
        return "***HASHED***"

    def __repr__(self) -> str:
        return "HashedPassword(***)"
