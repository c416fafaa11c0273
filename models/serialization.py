"""Helpers shared by the ``from_dict`` constructors."""

from __future__ import annotations

from typing import Any, Iterable, Mapping


def ensure_fields(payload: Mapping[str, Any], required: Iterable[str], label: str) -> None:
    """Raise ``ValueError`` listing any required keys missing from ``payload``."""

    missing = sorted(field for field in required if payload.get(field) in (None, ""))
    if missing:
        raise ValueError(f"{label} missing required fields: {', '.join(missing)}")


def drop_none(payload: dict) -> dict:
    """Remove keys whose value is None so optional fields stay absent on disk."""

    return {key: value for key, value in payload.items() if value is not None}
