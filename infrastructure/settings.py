"""Centralized application settings.

All runtime configuration is read here once and handed to the components as an
immutable :class:`AppSettings` snapshot, so no other module calls ``os.getenv``
directly (the tracking switch is the one exception).
"""

from __future__ import annotations
from tracking import t

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from . import constants


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Normalize environment strings such as "true"/"1" into booleans."""
    t('infrastructure.settings._to_bool')

    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str], default: int) -> int:
    t('infrastructure.settings._to_int')

    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class AppSettings:
    """Immutable snapshot of high-level configuration values."""

    production_mode: bool
    data_directory: str
    timezone: str
    super_admin_username: str
    super_admin_password: Optional[str]
    min_password_length: int
    low_stock_threshold: int

    @property
    def data_path(self) -> Path:
        return Path(self.data_directory)

    @property
    def super_admin_enabled(self) -> bool:
        return bool(self.super_admin_password)


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Load configuration from the environment and fall back to defaults."""
    t('infrastructure.settings.load_settings')

    if env is None:
        load_dotenv(override=False)
        env = os.environ

    production_mode = _to_bool(env.get("PRODUCTION_MODE", "false"))
    data_directory = env.get("SPORTTRACK_DATA_DIR", constants.DEFAULT_DATA_DIRECTORY)
    timezone = env.get("SPORTTRACK_TIMEZONE", constants.DEFAULT_TIMEZONE)

    super_admin_username = env.get("SUPER_ADMIN_USERNAME", constants.DEFAULT_SUPER_ADMIN_USERNAME)
    # No default password: the bootstrap account stays disabled until configured.
    super_admin_password = env.get("SUPER_ADMIN_PASSWORD") or None

    min_password_length = _to_int(
        env.get("MIN_PASSWORD_LENGTH"), constants.DEFAULT_MIN_PASSWORD_LENGTH
    )
    low_stock_threshold = _to_int(
        env.get("LOW_STOCK_THRESHOLD"), constants.DEFAULT_LOW_STOCK_THRESHOLD
    )

    return AppSettings(
        production_mode=production_mode,
        data_directory=data_directory,
        timezone=timezone,
        super_admin_username=super_admin_username.strip().lower(),
        super_admin_password=super_admin_password,
        min_password_length=min_password_length,
        low_stock_threshold=low_stock_threshold,
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached :class:`AppSettings` instance."""
    t('infrastructure.settings.get_settings')

    return load_settings()
