"""Persistence adapters -- SQLAlchemy async engine, ORM models and repositories."""
from user_registry.infrastructure.persistence.database import Base, build_engine, build_session_factory, init_db

__all__ = ["Base", "build_engine", "build_session_factory", "init_db"]
