"""
Inventory Management for SportTrack
Handles persistent storage and stock adjustments of equipment items
"""
from tracking import t

import logging
import uuid
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

from infrastructure.constants import ITEMS_KEY
from models import Item, OperationResult, Reservation
from storage import JsonStore


class InventoryManager:
    """
    Manages equipment items with persistent JSON storage

    ``Item.quantity`` is total owned stock. What is free for a given window is
    derived by the availability checker, never stored here.
    """

    def __init__(self, store: JsonStore) -> None:
        """
        Initialize the InventoryManager and load stored items

        Args:
            store: Key-value store holding the item collection
        """
        t('inventory.manager.InventoryManager.__init__')
        self.store = store
        self.logger = logging.getLogger('InventoryManager')
        self.items: Dict[str, Item] = self._load_items()

        self.logger.info(f"InventoryManager initialized with {len(self.items)} items")

    def get_item(self, item_id: str) -> Optional[Item]:
        t('inventory.manager.InventoryManager.get_item')
        return self.items.get(item_id)

    def list_items(self) -> List[Item]:
        t('inventory.manager.InventoryManager.list_items')
        return list(self.items.values())

    def as_mapping(self) -> Mapping[str, Item]:
        """Read-only view of items keyed by id, as the availability checker expects."""
        t('inventory.manager.InventoryManager.as_mapping')
        return dict(self.items)

    def add_item(
        self,
        name: str,
        quantity: int,
        category: str = "",
        description: str = "",
        image_url: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> Item:
        """
        Add a new item to the inventory

        Args:
            name: Display name
            quantity: Total stock owned (non-negative)
            category: Free-form grouping label
            description: Free text
            image_url: Optional image reference
            item_id: Explicit id; generated when omitted

        Returns:
            The stored Item

        Raises:
            ValueError: If the quantity is negative or the id already exists
        """
        t('inventory.manager.InventoryManager.add_item')
        new_id = item_id or uuid.uuid4().hex
        if new_id in self.items:
            raise ValueError(f"Item id {new_id} already exists")

        item = Item(
            id=new_id,
            name=name,
            quantity=quantity,
            category=category,
            description=description,
            image_url=image_url,
        )
        self.items[item.id] = item
        self._save_items()

        self.logger.info(f"Added item {item.id} '{item.name}' with quantity {item.quantity}")
        return item

    def update_item(self, item: Item) -> OperationResult:
        """Replace a stored item; unknown ids are reported, not created."""
        t('inventory.manager.InventoryManager.update_item')
        if item.id not in self.items:
            self.logger.warning(f"Item {item.id} not found for update")
            return OperationResult.fail(f"Item {item.id} not found.")

        self.items[item.id] = item
        self._save_items()
        self.logger.info(f"Updated item {item.id} '{item.name}'")
        return OperationResult.ok("Item updated successfully.")

    def delete_item(self, item_id: str, active_reservations: Iterable[Reservation]) -> OperationResult:
        """
        Delete an item unless an active reservation still books it

        Args:
            item_id: Item to remove
            active_reservations: Reservations currently holding stock

        Returns:
            OperationResult explaining why deletion was refused, if it was
        """
        t('inventory.manager.InventoryManager.delete_item')
        item = self.items.get(item_id)
        if item is None:
            return OperationResult.fail(f"Item {item_id} not found.")

        blocking = [
            reservation.id
            for reservation in active_reservations
            if reservation.is_active and reservation.quantity_for(item_id) > 0
        ]
        if blocking:
            self.logger.warning(
                f"Refused to delete item {item_id}: referenced by active reservations {blocking}"
            )
            return OperationResult.fail(
                f'Cannot delete "{item.name}" because it has active reservations.'
            )

        del self.items[item_id]
        self._save_items()
        self.logger.info(f"Deleted item {item_id} '{item.name}'")
        return OperationResult.ok("Item deleted.")

    def apply_damage(self, item_id: str, quantity_damaged: int) -> Optional[Item]:
        """
        Remove damaged units from total stock, never going below zero

        Returns:
            The updated Item, or None if the item no longer exists
        """
        t('inventory.manager.InventoryManager.apply_damage')
        item = self.items.get(item_id)
        if item is None:
            self.logger.warning(f"Damage reported for unknown item {item_id}; skipping stock update")
            return None

        new_quantity = max(0, item.quantity - max(0, quantity_damaged))
        updated = replace(item, quantity=new_quantity)
        self.items[item_id] = updated
        self._save_items()

        self.logger.info(
            f"Stock of '{item.name}' reduced by damage: {item.quantity} -> {new_quantity}"
        )
        return updated

    def low_stock_items(self, threshold: int) -> List[Item]:
        t('inventory.manager.InventoryManager.low_stock_items')
        return [item for item in self.items.values() if item.quantity <= threshold]

    def _save_items(self) -> None:
        t('inventory.manager.InventoryManager._save_items')
        self.store.save(ITEMS_KEY, [item.to_dict() for item in self.items.values()])

    def _load_items(self) -> Dict[str, Item]:
        """
        Load items from the store

        Invalid records are logged and skipped rather than aborting startup.
        """
        t('inventory.manager.InventoryManager._load_items')
        raw: Any = self.store.load(ITEMS_KEY, [])
        if not isinstance(raw, list):
            self.logger.warning(
                f"Invalid item collection format; expected list, received {type(raw).__name__}"
            )
            return {}

        items: Dict[str, Item] = {}
        for entry in raw:
            try:
                item = Item.from_dict(entry)
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Skipping invalid item record {entry!r}: {e}")
                continue
            items[item.id] = item
        return items
