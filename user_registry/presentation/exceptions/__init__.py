"""Exception handlers -- map domain exceptions to HTTP responses."""
from user_registry.presentation.exceptions.handlers import register_exception_handlers

__all__ = ["register_exception_handlers"]
