"""Runtime function-usage tracking."""

from .runtime import is_enabled, t, used_functions

__all__ = ["t", "is_enabled", "used_functions"]
