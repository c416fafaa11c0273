"""Key-value persistence backed by one JSON file per key."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

from tracking import t

_KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')


class JsonStore:
    """Read/write JSON values under ``<data_directory>/<key>.json``.

    ``load`` never raises: a missing, empty or corrupt file yields the default.
    ``save`` logs and re-raises write failures so callers know data was lost.
    """

    def __init__(self, data_directory: Union[str, Path], *, logger: Optional[Any] = None) -> None:
        t('storage.json_store.JsonStore.__init__')
        self._root = Path(data_directory)
        self._logger = logger or logging.getLogger('JsonStore')

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        t('storage.json_store.JsonStore.path_for')
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def load(self, key: str, default: Any = None) -> Any:
        """Load the value stored under ``key``, returning ``default`` on failure."""

        t('storage.json_store.JsonStore.load')
        path = self.path_for(key)
        try:
            if not path.exists():
                self._logger.debug("Storage file %s does not exist; using default", path)
                return default
            if path.stat().st_size == 0:
                self._logger.info("Storage file %s is empty; using default", path)
                return default
            with path.open('r', encoding='utf-8') as handle:
                value = json.load(handle)
            self._logger.debug("Loaded %s from %s", key, path)
            return value
        except json.JSONDecodeError as exc:
            self._logger.error("Invalid JSON in %s: %s", path, exc)
        except OSError as exc:
            self._logger.error("Failed to read %s: %s", path, exc, exc_info=True)
        return default

    def save(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``, ensuring the data directory exists."""

        t('storage.json_store.JsonStore.save')
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open('w', encoding='utf-8') as handle:
                json.dump(value, handle, indent=2, ensure_ascii=False)
            self._logger.debug("Saved %s to %s", key, path)
        except (OSError, TypeError) as exc:
            self._logger.error("Error saving %s to %s: %s", key, path, exc, exc_info=True)
            raise

    def delete(self, key: str) -> None:
        t('storage.json_store.JsonStore.delete')
        path = self.path_for(key)
        try:
            path.unlink()
            self._logger.debug("Removed %s", path)
        except FileNotFoundError:
            pass
