"""Equipment inventory."""

from .manager import InventoryManager

__all__ = ["InventoryManager"]
