"""User accounts and club membership."""

from .accounts import SUPER_ADMIN_USER, AccountService, ClubSummary
from .manager import UserManager

__all__ = ["AccountService", "ClubSummary", "SUPER_ADMIN_USER", "UserManager"]
