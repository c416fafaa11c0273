"""Domain model definitions for SportTrack."""

from .errors import InvalidTransitionError, SportTrackError
from .item import Item
from .reservation import (
    DamageReport,
    Reservation,
    ReservationItem,
    ReservationStatus,
    TERMINAL_STATUSES,
)
from .results import AvailabilityResult, LoginResult, OperationResult
from .user import User, normalize_email

__all__ = [
    "AvailabilityResult",
    "DamageReport",
    "InvalidTransitionError",
    "Item",
    "LoginResult",
    "OperationResult",
    "Reservation",
    "ReservationItem",
    "ReservationStatus",
    "SportTrackError",
    "TERMINAL_STATUSES",
    "User",
    "normalize_email",
]
