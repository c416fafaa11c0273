"""Application facade that a presentation layer drives."""

from .app import SportTrackApp, create_app
from .session import Session
from .views import menu_for

__all__ = ["Session", "SportTrackApp", "create_app", "menu_for"]
