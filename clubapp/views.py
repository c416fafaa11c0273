"""Role-gated navigation."""

from __future__ import annotations
from tracking import t

from typing import Dict, Optional, Tuple

from infrastructure.constants import (
    ROLE_ADMIN,
    ROLE_COACH,
    ROLE_SUPER_ADMIN,
    VIEW_DASHBOARD,
    VIEW_INVENTORY,
    VIEW_RESERVATIONS,
    VIEW_SUPER_ADMIN,
    VIEW_TEAM,
)

ROLE_VIEWS: Dict[str, Tuple[str, ...]] = {
    ROLE_ADMIN: (VIEW_DASHBOARD, VIEW_RESERVATIONS, VIEW_INVENTORY, VIEW_TEAM),
    ROLE_COACH: (VIEW_DASHBOARD, VIEW_RESERVATIONS, VIEW_INVENTORY),
    ROLE_SUPER_ADMIN: (VIEW_SUPER_ADMIN,),
}


def menu_for(role: Optional[str]) -> Tuple[str, ...]:
    """Views a role may open, in menu order. Unknown roles get nothing."""

    t('clubapp.views.menu_for')
    return ROLE_VIEWS.get(role or '', ())


def landing_view(role: Optional[str]) -> str:
    t('clubapp.views.landing_view')
    return VIEW_SUPER_ADMIN if role == ROLE_SUPER_ADMIN else VIEW_DASHBOARD


def can_open(role: Optional[str], view: str) -> bool:
    t('clubapp.views.can_open')
    return view in menu_for(role)
