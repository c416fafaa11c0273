"""Wiring of stores and managers from application settings."""

from __future__ import annotations
from tracking import t

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from infrastructure.settings import AppSettings
from inventory import InventoryManager
from reservations import ReservationManager
from storage import JsonStore, PreferenceStore
from users import AccountService, UserManager


@dataclass(frozen=True)
class AppDependencies:
    """Concrete component snapshot behind one application instance."""

    settings: AppSettings
    store: JsonStore
    preferences: PreferenceStore
    inventory: InventoryManager
    reservations: ReservationManager
    users: UserManager
    accounts: AccountService


def build_dependencies(
    settings: AppSettings,
    *,
    store: Optional[JsonStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
    read_only: bool = False,
) -> AppDependencies:
    """Create every component over a single store rooted at the data directory.

    With ``read_only`` nothing is written while loading; legacy user records are
    repaired in memory only.
    """

    t('clubapp.container.build_dependencies')
    store = store or JsonStore(settings.data_path)
    inventory = InventoryManager(store)
    reservations = ReservationManager(
        store,
        inventory,
        timezone=settings.timezone,
        clock=clock,
    )
    users = UserManager(store, persist_repairs=not read_only)
    return AppDependencies(
        settings=settings,
        store=store,
        preferences=PreferenceStore(store),
        inventory=inventory,
        reservations=reservations,
        users=users,
        accounts=AccountService(users, reservations, settings),
    )


__all__ = ['AppDependencies', 'build_dependencies']
