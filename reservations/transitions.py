"""State transition helpers for reservations.

``active`` is the only state with outgoing transitions; ``completed`` and
``cancelled`` are terminal.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from models import (
    TERMINAL_STATUSES,
    DamageReport,
    InvalidTransitionError,
    Reservation,
    ReservationStatus,
)
from tracking import t

ALLOWED_TRANSITIONS = {
    ReservationStatus.ACTIVE: TERMINAL_STATUSES,
    **{status: frozenset() for status in TERMINAL_STATUSES},
}


def ensure_transition(reservation: Reservation, new_status: ReservationStatus) -> None:
    """Raise ``InvalidTransitionError`` if ``reservation`` cannot move to ``new_status``."""

    t('reservations.transitions.ensure_transition')
    if new_status not in ALLOWED_TRANSITIONS[reservation.status]:
        raise InvalidTransitionError(reservation.id, reservation.status.value, new_status.value)


def apply_status_update(
    reservation: Reservation,
    new_status: ReservationStatus,
    **updates,
) -> Reservation:
    """Return a copy of ``reservation`` with a new status and additional fields."""

    t('reservations.transitions.apply_status_update')
    ensure_transition(reservation, new_status)
    return replace(reservation, status=new_status, **updates)


def cancel(reservation: Reservation) -> Reservation:
    t('reservations.transitions.cancel')
    return apply_status_update(reservation, ReservationStatus.CANCELLED)


def mark_returned(
    reservation: Reservation,
    returned_at: str,
    damage_reports: Optional[Iterable[DamageReport]] = None,
) -> Reservation:
    """Complete a reservation. No reports (or an empty list) is stored as None."""

    t('reservations.transitions.mark_returned')
    reports = tuple(damage_reports or ())
    return apply_status_update(
        reservation,
        ReservationStatus.COMPLETED,
        returned_at=returned_at,
        damage_reports=reports or None,
    )


def resolve_damage(reservation: Reservation, item_id: str) -> Reservation:
    """Flag the damage reports for ``item_id`` as resolved; status is unchanged."""

    t('reservations.transitions.resolve_damage')
    if not reservation.damage_reports:
        return reservation
    reports = tuple(
        replace(report, is_resolved=True) if report.item_id == item_id else report
        for report in reservation.damage_reports
    )
    return replace(reservation, damage_reports=reports)
