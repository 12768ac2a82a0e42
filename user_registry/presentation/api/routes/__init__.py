"""API routers."""
from user_registry.presentation.api.routes import health, users

__all__ = ["health", "users"]
