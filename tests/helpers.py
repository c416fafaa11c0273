"""Shared fakes and builders for unit tests."""

from __future__ import annotations
from tracking import t

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytz

from infrastructure.settings import AppSettings, load_settings
from inventory import InventoryManager
from models import Reservation, ReservationItem
from reservations import ReservationManager
from storage import JsonStore

FIXED_NOW = pytz.timezone('Europe/Lisbon').localize(datetime(2025, 3, 1, 12, 30))


class DummyLogger:
    """Lightweight stand-in for ``logging.Logger`` that records calls."""

    def __init__(self) -> None:
        t('tests.helpers.DummyLogger.__init__')
        self.records: List[Tuple[str, Tuple[Any, ...], Dict[str, Any]]] = []

    def _record(self, level: str, *args: Any, **kwargs: Any) -> None:
        t('tests.helpers.DummyLogger._record')
        self.records.append((level, args, kwargs))

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self._record("debug", *args, **kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self._record("info", *args, **kwargs)

    def warning(self, *args: Any, **kwargs: Any) -> None:
        self._record("warning", *args, **kwargs)

    def error(self, *args: Any, **kwargs: Any) -> None:
        self._record("error", *args, **kwargs)

    @property
    def messages(self) -> List[Tuple[str, Any]]:
        """Return formatted messages for quick assertions."""
        t('tests.helpers.DummyLogger.messages')
        formatted: List[Tuple[str, Any]] = []
        for level, args, _ in self.records:
            message: Any = None
            if args:
                template = args[0]
                if isinstance(template, str) and len(args) > 1:
                    try:
                        message = template % args[1:]
                    except (TypeError, ValueError):
                        message = template
                else:
                    message = template
            formatted.append((level, message))
        return formatted

    def last(self, level: Optional[str] = None) -> Optional[Tuple[str, Tuple[Any, ...], Dict[str, Any]]]:
        """Return the most recent record, optionally filtered by level."""
        t('tests.helpers.DummyLogger.last')
        for entry in reversed(self.records):
            if level is None or entry[0] == level:
                return entry
        return None


def make_settings(tmp_path, **env: str) -> AppSettings:
    """Settings rooted in ``tmp_path``; keyword arguments are environment overrides."""
    t('tests.helpers.make_settings')
    values = {'SPORTTRACK_DATA_DIR': str(tmp_path / 'data')}
    values.update(env)
    return load_settings(values)


def build_managers(tmp_path) -> Tuple[JsonStore, InventoryManager, ReservationManager]:
    t('tests.helpers.build_managers')
    store = JsonStore(tmp_path / 'data')
    inventory = InventoryManager(store)
    reservations = ReservationManager(store, inventory, clock=lambda: FIXED_NOW)
    return store, inventory, reservations


def make_reservation(
    reservation_id: str,
    items: List[Tuple[str, int]],
    *,
    date: str = '2025-03-10',
    start_time: str = '10:00',
    end_time: str = '11:00',
    coach_id: str = 'coach-1',
    coach_name: str = 'Coach One',
) -> Reservation:
    t('tests.helpers.make_reservation')
    return Reservation(
        id=reservation_id,
        coach_id=coach_id,
        coach_name=coach_name,
        date=date,
        start_time=start_time,
        end_time=end_time,
        items=tuple(ReservationItem(item_id, '', quantity) for item_id, quantity in items),
    )
