"""Reservation booking, availability and lifecycle."""

from .availability import check_availability, overlapping_reservations
from .manager import ReservationManager

__all__ = ["ReservationManager", "check_availability", "overlapping_reservations"]
