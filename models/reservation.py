"""Reservation records, their booked items and damage reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .serialization import drop_none, ensure_fields

REQUIRED_RESERVATION_FIELDS = ("id", "coachId", "date", "startTime", "endTime")


class ReservationStatus(Enum):
    """Reservation status states"""
    ACTIVE = "active"          # Holding stock for its date/time window
    COMPLETED = "completed"    # Equipment returned
    CANCELLED = "cancelled"    # Cancelled before use


TERMINAL_STATUSES = frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED})


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` time-of-day string."""

    return datetime.strptime(str(value), "%H:%M").time()


@dataclass(frozen=True)
class ReservationItem:
    item_id: str
    item_name: str
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError(f"Reserved quantity must be positive (got {self.quantity})")

    def to_dict(self) -> Dict[str, Any]:
        return {"itemId": self.item_id, "itemName": self.item_name, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ReservationItem":
        ensure_fields(payload, ("itemId",), "Reservation item")
        return cls(
            item_id=str(payload["itemId"]),
            item_name=str(payload.get("itemName", "")),
            quantity=int(payload.get("quantity", 0)),
        )


@dataclass(frozen=True)
class DamageReport:
    """Damage noted when equipment comes back. Only ``is_resolved`` changes later."""

    item_id: str
    item_name: str
    quantity_damaged: int
    description: str = ""
    reported_by: str = ""
    date: str = ""
    is_resolved: Optional[bool] = None

    @property
    def resolved(self) -> bool:
        return bool(self.is_resolved)

    def to_dict(self) -> Dict[str, Any]:
        return drop_none({
            "itemId": self.item_id,
            "itemName": self.item_name,
            "quantityDamaged": self.quantity_damaged,
            "description": self.description,
            "reportedBy": self.reported_by,
            "date": self.date,
            "isResolved": self.is_resolved,
        })

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DamageReport":
        ensure_fields(payload, ("itemId",), "Damage report")
        return cls(
            item_id=str(payload["itemId"]),
            item_name=str(payload.get("itemName", "")),
            quantity_damaged=int(payload.get("quantityDamaged", 0)),
            description=payload.get("description", ""),
            reported_by=payload.get("reportedBy", ""),
            date=payload.get("date", ""),
            is_resolved=payload.get("isResolved"),
        )


@dataclass(frozen=True)
class Reservation:
    """A time-boxed equipment booking.

    ``date`` is ``YYYY-MM-DD``; ``start_time``/``end_time`` are ``HH:MM`` and form
    the half-open window ``[start_time, end_time)``. ``damage_reports`` is None
    when the equipment came back undamaged, never an empty tuple.
    """

    id: str
    coach_id: str
    coach_name: str
    date: str
    start_time: str
    end_time: str
    items: Tuple[ReservationItem, ...] = field(default_factory=tuple)
    status: ReservationStatus = ReservationStatus.ACTIVE
    damage_reports: Optional[Tuple[DamageReport, ...]] = None
    returned_at: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    @property
    def window(self) -> Tuple[time, time]:
        return parse_clock(self.start_time), parse_clock(self.end_time)

    def quantity_for(self, item_id: str) -> int:
        """Total quantity of ``item_id`` booked by this reservation."""

        return sum(entry.quantity for entry in self.items if entry.item_id == item_id)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "items": [entry.to_dict() for entry in self.items],
            "coachId": self.coach_id,
            "coachName": self.coach_name,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "status": self.status.value,
        }
        if self.damage_reports is not None:
            payload["damageReports"] = [report.to_dict() for report in self.damage_reports]
        if self.returned_at is not None:
            payload["returnedAt"] = self.returned_at
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Reservation":
        ensure_fields(payload, REQUIRED_RESERVATION_FIELDS, "Reservation record")
        raw_reports = payload.get("damageReports")
        reports: Optional[Tuple[DamageReport, ...]] = None
        if raw_reports:
            reports = tuple(DamageReport.from_dict(entry) for entry in raw_reports)
        return cls(
            id=str(payload["id"]),
            coach_id=str(payload["coachId"]),
            coach_name=str(payload.get("coachName", "")),
            date=str(payload["date"]),
            start_time=str(payload["startTime"]),
            end_time=str(payload["endTime"]),
            items=build_items(payload.get("items", [])),
            status=ReservationStatus(payload.get("status", ReservationStatus.ACTIVE.value)),
            damage_reports=reports,
            returned_at=payload.get("returnedAt"),
        )


def build_items(entries: List[Mapping[str, Any]]) -> Tuple[ReservationItem, ...]:
    """Build reservation items from ``{itemId, itemName, quantity}`` mappings."""

    return tuple(ReservationItem.from_dict(entry) for entry in entries)
