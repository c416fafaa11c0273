"""In-memory state of the single logged-in session."""

from __future__ import annotations
from tracking import t

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from infrastructure.constants import VIEW_DASHBOARD
from models import User


@dataclass
class Session:
    """Current user, visible view and the item an admin was sent to fix."""

    current_user: Optional[User] = None
    view: str = VIEW_DASHBOARD
    target_item_id: Optional[str] = None
    pending_password_user_id: Optional[str] = None
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger('SportTrackApp'),
        repr=False,
        compare=False,
    )

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def start(self, user: User, view: str) -> None:
        t('clubapp.session.Session.start')
        self.current_user = user
        self.view = view
        self.target_item_id = None
        self.pending_password_user_id = None
        self.logger.debug(f"Session started for {user.id} on view {view}")

    def clear(self) -> None:
        t('clubapp.session.Session.clear')
        self.current_user = None
        self.view = VIEW_DASHBOARD
        self.target_item_id = None
        self.pending_password_user_id = None

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the session for debugging and status output."""
        t('clubapp.session.Session.snapshot')
        return {
            'user': self.current_user.public_dict() if self.current_user else None,
            'view': self.view,
            'targetItemId': self.target_item_id,
        }
