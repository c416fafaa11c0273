"""Stock availability checks for reservation windows."""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import time
from typing import Any, Dict, Iterable, List, Mapping, Optional

from infrastructure.constants import MSG_ITEM_NOT_FOUND
from models import AvailabilityResult, Item, Reservation, ReservationItem
from models.reservation import parse_clock
from tracking import t

_default_logger = logging.getLogger('ReservationManager')


def windows_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open interval intersection: touching boundaries do not overlap."""

    t('reservations.availability.windows_overlap')
    return start_a < end_b and start_b < end_a


def overlapping_reservations(
    reservations: Iterable[Reservation],
    date: str,
    start_time: str,
    end_time: str,
    *,
    exclude_reservation_id: Optional[str] = None,
) -> List[Reservation]:
    """Active reservations on ``date`` whose window intersects ``[start_time, end_time)``."""

    t('reservations.availability.overlapping_reservations')
    start, end = parse_clock(start_time), parse_clock(end_time)
    overlapping = []
    for existing in reservations:
        if not existing.is_active:
            continue
        if existing.date != date:
            continue
        if exclude_reservation_id is not None and existing.id == exclude_reservation_id:
            continue
        existing_start, existing_end = existing.window
        if windows_overlap(existing_start, existing_end, start, end):
            overlapping.append(existing)
    return overlapping


def committed_quantity(reservations: Iterable[Reservation], item_id: str) -> int:
    """Sum of ``item_id`` already booked across ``reservations``."""

    t('reservations.availability.committed_quantity')
    return sum(reservation.quantity_for(item_id) for reservation in reservations)


def _merge_requested(requested_items: Iterable[ReservationItem]) -> "OrderedDict[str, int]":
    # The same item listed twice in one request competes with itself.
    merged: "OrderedDict[str, int]" = OrderedDict()
    for entry in requested_items:
        merged[entry.item_id] = merged.get(entry.item_id, 0) + entry.quantity
    return merged


def check_availability(
    requested_items: Iterable[ReservationItem],
    date: str,
    start_time: str,
    end_time: str,
    *,
    items: Mapping[str, Item],
    reservations: Iterable[Reservation],
    exclude_reservation_id: Optional[str] = None,
    logger: Any = None,
) -> AvailabilityResult:
    """Decide whether the requested quantities fit in the stock left for the window.

    Args:
        requested_items: Items and quantities being booked
        date: Day of the booking (``YYYY-MM-DD``)
        start_time: Window start (``HH:MM``, inclusive)
        end_time: Window end (``HH:MM``, exclusive)
        items: Inventory keyed by item id
        reservations: Existing reservations; only active ones count
        exclude_reservation_id: Reservation to ignore, used when updating it

    Returns:
        AvailabilityResult with an explanatory ``error`` when the request cannot
        be satisfied. Never raises for missing items or stock conflicts.
    """
    t('reservations.availability.check_availability')
    log = logger or _default_logger

    overlapping = overlapping_reservations(
        reservations,
        date,
        start_time,
        end_time,
        exclude_reservation_id=exclude_reservation_id,
    )

    for item_id, requested in _merge_requested(requested_items).items():
        inventory_item = items.get(item_id)
        if inventory_item is None:
            log.warning("Availability check for unknown item %s", item_id)
            return AvailabilityResult(available=False, error=MSG_ITEM_NOT_FOUND)

        reserved = committed_quantity(overlapping, item_id)
        available_stock = inventory_item.quantity - reserved

        if requested > available_stock:
            log.info(
                """STOCK CONFLICT
                Item: %s (%s)
                Window: %s %s-%s
                Requested: %s
                Total stock: %s
                Already booked: %s across %s reservation(s)
                """,
                inventory_item.name,
                item_id,
                date,
                start_time,
                end_time,
                requested,
                inventory_item.quantity,
                reserved,
                len(overlapping),
            )
            return AvailabilityResult(
                available=False,
                error=(
                    f'Insufficient stock for "{inventory_item.name}" in this time slot. '
                    f'Available: {available_stock}.'
                ),
            )

    return AvailabilityResult(available=True)


def available_stock_by_item(
    items: Mapping[str, Item],
    reservations: Iterable[Reservation],
    date: str,
    start_time: str,
    end_time: str,
) -> Dict[str, int]:
    """Free stock of every item for a window, as shown next to the booking form."""

    t('reservations.availability.available_stock_by_item')
    overlapping = overlapping_reservations(reservations, date, start_time, end_time)
    return {
        item_id: item.quantity - committed_quantity(overlapping, item_id)
        for item_id, item in items.items()
    }
