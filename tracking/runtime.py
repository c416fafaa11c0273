"""Record which functions actually run, one line per function name.

Tracking is off unless ``TRACK_FUNCTION_USAGE`` is truthy so unit tests and
production runs do not write to disk by default.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Optional, Set

_LOCK = threading.RLock()
_TRACKING_FILE = Path(__file__).resolve().parents[1] / "logs" / "functions_in_use.txt"
# Names already written this run (or by a previous run).
_SEEN: Set[str] = set()
_ENABLED: Optional[bool] = None


def is_enabled() -> bool:
    """Return True when runtime tracking should write to disk."""
    global _ENABLED
    if _ENABLED is None:
        raw = os.getenv("TRACK_FUNCTION_USAGE", "false")
        _ENABLED = raw.strip().lower() in {"1", "true", "yes", "on"}
        if _ENABLED:
            _initialize_seen_cache()
    return _ENABLED


def _initialize_seen_cache() -> None:
    if not _TRACKING_FILE.exists():
        return
    try:
        with _TRACKING_FILE.open("r", encoding="utf-8") as handle:
            _SEEN.update(line.strip() for line in handle if line.strip())
    except OSError:
        pass


def t(func_name: str) -> None:
    """Record the provided function name the first time it runs in this process."""
    if not func_name or not is_enabled():
        return

    with _LOCK:
        if func_name in _SEEN:
            return

        _TRACKING_FILE.parent.mkdir(parents=True, exist_ok=True)
        try:
            with _TRACKING_FILE.open("a", encoding="utf-8") as handle:
                handle.write(f"{func_name}\n")
        except OSError:
            return

        _SEEN.add(func_name)


def used_functions(path: Optional[Path] = None) -> Set[str]:
    """Return the function names recorded so far."""
    target = path or _TRACKING_FILE
    if not target.exists():
        return set()
    with target.open("r", encoding="utf-8") as handle:
        return {line.strip() for line in handle if line.strip()}
