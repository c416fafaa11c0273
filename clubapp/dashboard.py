"""Dashboard figures for club members."""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from inventory import InventoryManager
from models import DamageReport, Item, Reservation, User
from reservations import ReservationManager


@dataclass(frozen=True)
class DashboardSummary:
    total_items: int
    total_stock: int
    active_reservations: List[Reservation]
    unresolved_damage: List[Tuple[Reservation, DamageReport]]
    low_stock: List[Item]

    def as_dict(self) -> Dict[str, Any]:
        t('clubapp.dashboard.DashboardSummary.as_dict')
        return {
            'totalItems': self.total_items,
            'totalStock': self.total_stock,
            'activeReservations': [r.to_dict() for r in self.active_reservations],
            'unresolvedDamage': [
                {'reservationId': reservation.id, **report.to_dict()}
                for reservation, report in self.unresolved_damage
            ],
            'lowStock': [item.to_dict() for item in self.low_stock],
        }


def build_summary(
    inventory: InventoryManager,
    reservations: ReservationManager,
    low_stock_threshold: int,
    viewer: Optional[User] = None,
) -> DashboardSummary:
    """
    Collect the dashboard figures.

    Coaches only see their own active reservations; admins see every one.
    Damage reports and low stock are only listed for admins.
    """
    t('clubapp.dashboard.build_summary')
    items = inventory.list_items()
    active = reservations.get_active_reservations()
    if viewer is not None and viewer.is_coach:
        active = [r for r in active if r.coach_id == viewer.id]

    show_admin_panels = viewer is None or viewer.is_admin
    return DashboardSummary(
        total_items=len(items),
        total_stock=sum(item.quantity for item in items),
        active_reservations=active,
        unresolved_damage=reservations.get_unresolved_damage_reports() if show_admin_panels else [],
        low_stock=inventory.low_stock_items(low_stock_threshold) if show_admin_panels else [],
    )
