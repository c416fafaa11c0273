"""Inventory items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .serialization import drop_none, ensure_fields


@dataclass(frozen=True)
class Item:
    """A piece of equipment. ``quantity`` is total owned stock, never what is free."""

    id: str
    name: str
    quantity: int
    category: str = ""
    description: str = ""
    image_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"Item quantity cannot be negative (got {self.quantity})")

    def to_dict(self) -> Dict[str, Any]:
        return drop_none({
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
            "description": self.description,
            "imageUrl": self.image_url,
        })

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Item":
        ensure_fields(payload, ("id", "name"), "Item record")
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            quantity=int(payload.get("quantity", 0)),
            category=payload.get("category", ""),
            description=payload.get("description", ""),
            image_url=payload.get("imageUrl"),
        )
