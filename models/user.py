"""User accounts: club admins, coaches and the bootstrap super-admin."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from infrastructure.constants import ROLE_ADMIN, ROLE_COACH, ROLE_SUPER_ADMIN, ROLES

from .serialization import drop_none, ensure_fields

REQUIRED_USER_FIELDS = ("id", "name", "email", "role")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@dataclass(frozen=True)
class User:
    """A persisted account.

    ``club_name`` is the display tag shared by an admin and its coaches;
    ``club_id`` is the key used to find club members.
    """

    id: str
    name: str
    email: str
    role: str
    club_name: Optional[str] = None
    club_id: Optional[str] = None
    password_hash: Optional[str] = None
    recovery_code_hash: Optional[str] = None
    must_change_password: bool = False

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown role '{self.role}'")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_coach(self) -> bool:
        return self.role == ROLE_COACH

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "clubName": self.club_name,
            "clubId": self.club_id,
            "passwordHash": self.password_hash,
            "recoveryCodeHash": self.recovery_code_hash,
            "mustChangePassword": self.must_change_password or None,
        }
        return drop_none(payload)

    def public_dict(self) -> Dict[str, Any]:
        """Serialized form without credential hashes, safe for the session store."""

        payload = self.to_dict()
        payload.pop("passwordHash", None)
        payload.pop("recoveryCodeHash", None)
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "User":
        ensure_fields(payload, REQUIRED_USER_FIELDS, "User record")
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            email=str(payload["email"]),
            role=str(payload["role"]),
            club_name=payload.get("clubName"),
            club_id=payload.get("clubId"),
            password_hash=payload.get("passwordHash"),
            recovery_code_hash=payload.get("recoveryCodeHash"),
            must_change_password=bool(payload.get("mustChangePassword", False)),
        )
