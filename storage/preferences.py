"""Scalar preferences: theme colour, dark mode and the persisted session user."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from infrastructure.constants import (
    DARK_MODE_KEY,
    DEFAULT_THEME_COLOR,
    SESSION_USER_KEY,
    THEME_KEY,
)
from tracking import t

from .json_store import JsonStore

_HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')


class PreferenceStore:
    """Each preference lives under its own key and is read lazily."""

    def __init__(self, store: JsonStore) -> None:
        t('storage.preferences.PreferenceStore.__init__')
        self.store = store
        self.logger = logging.getLogger('PreferenceStore')

    def get_theme(self) -> str:
        t('storage.preferences.PreferenceStore.get_theme')
        value = self.store.load(THEME_KEY, DEFAULT_THEME_COLOR)
        if not isinstance(value, str) or not _HEX_COLOR.match(value):
            return DEFAULT_THEME_COLOR
        return value

    def set_theme(self, color: str) -> bool:
        t('storage.preferences.PreferenceStore.set_theme')
        if not _HEX_COLOR.match(color or ''):
            self.logger.warning("Rejected invalid theme colour %r", color)
            return False
        self.store.save(THEME_KEY, color)
        self.logger.info("Theme colour set to %s", color)
        return True

    def is_dark_mode(self) -> bool:
        t('storage.preferences.PreferenceStore.is_dark_mode')
        value = self.store.load(DARK_MODE_KEY, False)
        # Older files stored the flag as the string "true"/"false"
        if isinstance(value, str):
            return value.strip().lower() == 'true'
        return bool(value)

    def set_dark_mode(self, enabled: bool) -> None:
        t('storage.preferences.PreferenceStore.set_dark_mode')
        self.store.save(DARK_MODE_KEY, bool(enabled))

    def get_session_user(self) -> Optional[Dict[str, Any]]:
        t('storage.preferences.PreferenceStore.get_session_user')
        value = self.store.load(SESSION_USER_KEY, None)
        return value if isinstance(value, dict) else None

    def set_session_user(self, payload: Dict[str, Any]) -> None:
        t('storage.preferences.PreferenceStore.set_session_user')
        self.store.save(SESSION_USER_KEY, payload)

    def clear_session_user(self) -> None:
        t('storage.preferences.PreferenceStore.clear_session_user')
        self.store.delete(SESSION_USER_KEY)
