"""Domain exceptions raised inside the core and caught at manager boundaries."""


class SportTrackError(Exception):
    """Base class for core errors."""


class InvalidTransitionError(SportTrackError):
    """Raised when a reservation status change is not allowed."""

    def __init__(self, reservation_id: str, current: str, requested: str) -> None:
        self.reservation_id = reservation_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Reservation {reservation_id} cannot move from '{current}' to '{requested}'"
        )
