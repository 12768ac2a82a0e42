"""Domain value objects -- immutable, identity-less types."""
from user_registry.domain.value_objects.email import Email
from user_registry.domain.value_objects.password import HashedPassword

__all__ = ["Email", "HashedPassword"]
