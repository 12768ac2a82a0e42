"""SQLAlchemy repository implementations -- infrastructure adapters for domain ports."""
from user_registry.infrastructure.persistence.repositories.base import (
    SQLAlchemyRepositoryBase,
    is_unique_violation,
)
from user_registry.infrastructure.persistence.repositories.user import SQLAlchemyUserRepository, UserMapper

__all__ = ["SQLAlchemyRepositoryBase", "SQLAlchemyUserRepository", "UserMapper", "is_unique_violation"]
