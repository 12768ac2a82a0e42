"""Shared kernel -- cross-layer helpers with no domain knowledge."""
from user_registry.shared.result import Err, Ok, Result

__all__ = ["Err", "Ok", "Result"]
