"""Result records returned to the presentation layer instead of exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .user import User


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a mutating operation: ``{success, message}``."""

    success: bool
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "OperationResult":
        return cls(success=True, message=message)

    @classmethod
    def fail(cls, message: str) -> "OperationResult":
        return cls(success=False, message=message)

    def as_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of an availability check: ``{available, error?}``."""

    available: bool
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"available": self.available}
        if self.error is not None:
            payload["error"] = self.error
        return payload

    def __bool__(self) -> bool:
        return self.available


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt.

    ``must_change_password`` means the credentials were right but the caller has
    to run the forced password-change flow before the session starts.
    """

    success: bool
    message: str = ""
    user: Optional[User] = None
    must_change_password: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "user": self.user.public_dict() if self.user else None,
            "mustChangePassword": self.must_change_password,
        }
