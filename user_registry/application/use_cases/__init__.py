"""Application use cases."""
from user_registry.application.use_cases.user_management import CreateUserUseCase

__all__ = ["CreateUserUseCase"]
