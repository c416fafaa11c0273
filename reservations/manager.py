"""
Reservation Lifecycle Management

This module provides the ReservationManager class, which books equipment for a
date/time window after checking stock, and moves reservations through their
lifecycle (update, cancel, return with damage reports) with JSON persistence.
"""
from tracking import t

import logging
import uuid
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import pytz

from infrastructure.constants import (
    DEFAULT_TIMEZONE,
    MSG_AVAILABILITY_ERROR,
    MSG_RESERVATION_CANCELLED,
    MSG_RESERVATION_CONFIRMED,
    MSG_RESERVATION_RETURNED,
    MSG_RESERVATION_UPDATED,
    RESERVATIONS_KEY,
)
from inventory import InventoryManager
from models import (
    AvailabilityResult,
    DamageReport,
    InvalidTransitionError,
    OperationResult,
    Reservation,
    ReservationItem,
    ReservationStatus,
)
from reservations import transitions
from reservations.availability import check_availability
from storage import JsonStore


class ReservationManager:
    """
    Manages the storage and lifecycle of equipment reservations.

    Every mutation is persisted immediately. Expected failures (stock conflicts,
    unknown ids, terminal reservations) come back as ``OperationResult`` values;
    nothing here raises for them.

    Attributes:
        reservations (Dict[str, Reservation]): Reservations keyed by id, in booking order
        inventory (InventoryManager): Source of item stock, adjusted on damaged returns
        logger (logging.Logger): Logger instance for this class
    """

    def __init__(
        self,
        store: JsonStore,
        inventory: InventoryManager,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the ReservationManager.

        Args:
            store: Key-value store holding the reservation collection
            inventory: Inventory whose stock bounds every booking
            timezone: Zone used to stamp ``returned_at``
            clock: Override for the current time, mainly for tests
        """
        t('reservations.manager.ReservationManager.__init__')
        self.logger = logging.getLogger('ReservationManager')
        self.store = store
        self.inventory = inventory
        self._tz = pytz.timezone(timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))
        self.reservations: Dict[str, Reservation] = self._load_reservations()
        self.logger.info(f"""RESERVATION MANAGER INITIALIZED
        Existing reservations: {len(self.reservations)}
        Status breakdown: {self._get_status_counts()}
        """)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_reservation(self, reservation_id: str) -> Optional[Reservation]:
        t('reservations.manager.ReservationManager.get_reservation')
        return self.reservations.get(reservation_id)

    def list_reservations(self) -> List[Reservation]:
        t('reservations.manager.ReservationManager.list_reservations')
        return list(self.reservations.values())

    def get_active_reservations(self) -> List[Reservation]:
        t('reservations.manager.ReservationManager.get_active_reservations')
        return [reservation for reservation in self.reservations.values() if reservation.is_active]

    def get_coach_reservations(self, coach_id: str) -> List[Reservation]:
        """
        Retrieve all reservations booked by a given coach (or admin).

        Args:
            coach_id: User id stored on the reservation

        Returns:
            List of reservations for that user, in booking order
        """
        t('reservations.manager.ReservationManager.get_coach_reservations')
        found = [r for r in self.reservations.values() if r.coach_id == coach_id]
        self.logger.debug(f"Found {len(found)} reservations for coach {coach_id}")
        return found

    def has_active_reservations_for_item(self, item_id: str) -> bool:
        t('reservations.manager.ReservationManager.has_active_reservations_for_item')
        return any(r.quantity_for(item_id) > 0 for r in self.get_active_reservations())

    def get_unresolved_damage_reports(self) -> List[Tuple[Reservation, DamageReport]]:
        """Damage reports an admin still has to handle, with their reservation."""
        t('reservations.manager.ReservationManager.get_unresolved_damage_reports')
        pending = []
        for reservation in self.reservations.values():
            for report in reservation.damage_reports or ():
                if not report.resolved:
                    pending.append((reservation, report))
        return pending

    def check_availability(
        self,
        requested_items: Iterable[ReservationItem],
        date: str,
        start_time: str,
        end_time: str,
        exclude_reservation_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """Run the stock check against current inventory and active reservations."""
        t('reservations.manager.ReservationManager.check_availability')
        return check_availability(
            requested_items,
            date,
            start_time,
            end_time,
            items=self.inventory.as_mapping(),
            reservations=self.get_active_reservations(),
            exclude_reservation_id=exclude_reservation_id,
            logger=self.logger,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(self, reservation: Reservation) -> OperationResult:
        """
        Book a reservation if every requested item has enough free stock.

        The stored record always starts ``active`` with no return data, whatever
        the caller passed. A missing id is generated.

        Args:
            reservation: Requested booking

        Returns:
            OperationResult with a confirmation or the availability error
        """
        t('reservations.manager.ReservationManager.create')
        reservation_id = reservation.id or uuid.uuid4().hex
        if reservation_id in self.reservations:
            self.logger.warning(f"Rejected reservation with duplicate id {reservation_id}")
            return OperationResult.fail(f"Reservation {reservation_id} already exists.")

        self.logger.info(f"""NEW RESERVATION REQUEST
        Coach: {reservation.coach_name} ({reservation.coach_id})
        Date: {reservation.date}
        Window: {reservation.start_time}-{reservation.end_time}
        Items: {[(i.item_name or i.item_id, i.quantity) for i in reservation.items]}
        """)

        check = self.check_availability(
            reservation.items,
            reservation.date,
            reservation.start_time,
            reservation.end_time,
        )
        if not check.available:
            return OperationResult.fail(check.error or MSG_AVAILABILITY_ERROR)

        stored = replace(
            reservation,
            id=reservation_id,
            status=ReservationStatus.ACTIVE,
            damage_reports=None,
            returned_at=None,
        )
        self.reservations[reservation_id] = stored
        self._save_reservations()

        self.logger.info(f"""RESERVATION ADDED SUCCESSFULLY
        Reservation ID: {reservation_id}
        Total reservations: {len(self.reservations)}
        """)
        return OperationResult.ok(MSG_RESERVATION_CONFIRMED)

    def update(self, reservation: Reservation) -> OperationResult:
        """
        Replace an active reservation after re-checking stock.

        The reservation's own current booking is excluded from the check so it
        never competes with itself.
        """
        t('reservations.manager.ReservationManager.update')
        existing = self.reservations.get(reservation.id)
        if existing is None:
            self.logger.warning(f"Reservation {reservation.id} not found for update")
            return OperationResult.fail(f"Reservation {reservation.id} not found.")
        if not existing.is_active:
            self.logger.warning(
                f"Refused update of reservation {reservation.id} in status {existing.status.value}"
            )
            return OperationResult.fail(
                f"Only active reservations can be changed (this one is {existing.status.value})."
            )

        check = self.check_availability(
            reservation.items,
            reservation.date,
            reservation.start_time,
            reservation.end_time,
            exclude_reservation_id=reservation.id,
        )
        if not check.available:
            return OperationResult.fail(check.error or MSG_AVAILABILITY_ERROR)

        # Ownership never changes through an update
        self.reservations[reservation.id] = replace(
            reservation,
            coach_id=existing.coach_id,
            coach_name=existing.coach_name,
            status=ReservationStatus.ACTIVE,
            damage_reports=None,
            returned_at=None,
        )
        self._save_reservations()
        self.logger.info(f"Updated reservation {reservation.id}")
        return OperationResult.ok(MSG_RESERVATION_UPDATED)

    def cancel(self, reservation_id: str) -> OperationResult:
        """Cancel an active reservation. Freeing stock needs no availability check."""
        t('reservations.manager.ReservationManager.cancel')
        return self._transition(
            reservation_id,
            transitions.cancel,
            MSG_RESERVATION_CANCELLED,
        )

    def return_reservation(
        self,
        reservation_id: str,
        damage_reports: Optional[Iterable[DamageReport]] = None,
    ) -> OperationResult:
        """
        Complete a reservation and write off damaged stock.

        Each damage report lowers its item's total quantity by
        ``quantity_damaged``, floored at zero. A reservation can only be
        returned once, so stock is never decremented twice for the same return.

        Args:
            reservation_id: Reservation being returned
            damage_reports: Damage noted on return; empty means no damage

        Returns:
            OperationResult describing the outcome
        """
        t('reservations.manager.ReservationManager.return_reservation')
        reports = tuple(damage_reports or ())
        returned_at = self._clock().isoformat()

        result = self._transition(
            reservation_id,
            lambda reservation: transitions.mark_returned(reservation, returned_at, reports),
            MSG_RESERVATION_RETURNED,
        )
        if not result.success:
            return result

        for report in reports:
            self.inventory.apply_damage(report.item_id, report.quantity_damaged)

        if reports:
            self.logger.info(f"""RESERVATION RETURNED WITH DAMAGE
            Reservation ID: {reservation_id}
            Damaged: {[(r.item_name or r.item_id, r.quantity_damaged) for r in reports]}
            """)
        return result

    def resolve_damage(self, reservation_id: str, item_id: str) -> OperationResult:
        """Mark the damage report for ``item_id`` in a reservation as handled."""
        t('reservations.manager.ReservationManager.resolve_damage')
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            return OperationResult.fail(f"Reservation {reservation_id} not found.")
        if not any(r.item_id == item_id for r in reservation.damage_reports or ()):
            return OperationResult.fail(f"No damage report for item {item_id} in this reservation.")

        self.reservations[reservation_id] = transitions.resolve_damage(reservation, item_id)
        self._save_reservations()
        self.logger.info(f"Resolved damage for item {item_id} in reservation {reservation_id}")
        return OperationResult.ok("Damage marked as resolved.")

    def remove_reservations_for_users(self, user_ids: Set[str]) -> int:
        """
        Delete every reservation whose ``coach_id`` is in ``user_ids``.

        Returns:
            Number of reservations removed
        """
        t('reservations.manager.ReservationManager.remove_reservations_for_users')
        doomed = [rid for rid, r in self.reservations.items() if r.coach_id in user_ids]
        for rid in doomed:
            del self.reservations[rid]
        if doomed:
            self._save_reservations()
        self.logger.info(f"Removed {len(doomed)} reservations belonging to users {sorted(user_ids)}")
        return len(doomed)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _transition(
        self,
        reservation_id: str,
        change: Callable[[Reservation], Reservation],
        success_message: str,
    ) -> OperationResult:
        t('reservations.manager.ReservationManager._transition')
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            self.logger.warning(f"Reservation {reservation_id} not found for status change")
            return OperationResult.fail(f"Reservation {reservation_id} not found.")

        try:
            updated = change(reservation)
        except InvalidTransitionError as exc:
            self.logger.warning(str(exc))
            return OperationResult.fail(
                f"Reservation is already {reservation.status.value}."
            )

        self.reservations[reservation_id] = updated
        self._save_reservations()
        self.logger.info(f"""RESERVATION STATUS UPDATED
        Reservation ID: {reservation_id}
        Coach: {reservation.coach_name} ({reservation.coach_id})
        Time Slot: {reservation.date} {reservation.start_time}-{reservation.end_time}
        Status Change: {reservation.status.value} -> {updated.status.value}
        """)
        return OperationResult.ok(success_message)

    def _save_reservations(self) -> None:
        t('reservations.manager.ReservationManager._save_reservations')
        self.store.save(RESERVATIONS_KEY, [r.to_dict() for r in self.reservations.values()])

    def _load_reservations(self) -> Dict[str, Reservation]:
        t('reservations.manager.ReservationManager._load_reservations')
        raw = self.store.load(RESERVATIONS_KEY, [])
        if not isinstance(raw, list):
            self.logger.warning(
                "Invalid reservation collection format; expected list, received %s",
                type(raw).__name__,
            )
            return {}

        loaded: Dict[str, Reservation] = {}
        for entry in raw:
            try:
                reservation = Reservation.from_dict(entry)
            except (TypeError, ValueError) as exc:
                self.logger.warning("Skipping invalid reservation record %r: %s", entry, exc)
                continue
            loaded[reservation.id] = reservation
        return loaded

    def _get_status_counts(self) -> Dict[str, int]:
        t('reservations.manager.ReservationManager._get_status_counts')
        return dict(Counter(r.status.value for r in self.reservations.values()))
