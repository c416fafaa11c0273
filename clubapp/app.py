"""
SportTrack application facade.

One ``SportTrackApp`` instance backs one logged-in session. It owns the session
state, applies role guards and delegates to the managers, handing back the
same result records they produce.
"""
from tracking import t

import logging
import uuid
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from infrastructure.constants import (
    MSG_NOT_AUTHORIZED,
    MSG_RECOVERY_FAILED,
    SUPER_ADMIN_ID,
    VIEW_INVENTORY,
)
from infrastructure.settings import AppSettings, get_settings
from models import (
    AvailabilityResult,
    DamageReport,
    Item,
    LoginResult,
    OperationResult,
    Reservation,
    ReservationItem,
    User,
)
from models.reservation import parse_clock
from users import SUPER_ADMIN_USER, ClubSummary

from .container import AppDependencies, build_dependencies
from .dashboard import DashboardSummary, build_summary
from .session import Session
from .views import can_open, landing_view, menu_for

RequestedItem = Union[ReservationItem, Mapping[str, object]]


class SportTrackApp:
    """Entry point for every user-facing operation."""

    def __init__(self, deps: AppDependencies, *, restore: bool = True) -> None:
        t('clubapp.app.SportTrackApp.__init__')
        self.deps = deps
        self.settings: AppSettings = deps.settings
        self.session = Session()
        self.logger = logging.getLogger('SportTrackApp')
        if restore:
            self.restore_session()

    @property
    def current_user(self) -> Optional[User]:
        return self.session.current_user

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def login(self, email: str, password: str) -> LoginResult:
        """
        Log in and start the session.

        When the account must change its password, no session is started; the
        user id is remembered for ``complete_password_change``.
        """
        t('clubapp.app.SportTrackApp.login')
        result = self.deps.accounts.login(email, password)
        if result.must_change_password and result.user is not None:
            self.session.clear()
            self.session.pending_password_user_id = result.user.id
            return result
        if result.success and result.user is not None:
            self._start_session(result.user)
        return result

    def complete_password_change(self, new_password: str) -> LoginResult:
        t('clubapp.app.SportTrackApp.complete_password_change')
        user_id = self.session.pending_password_user_id
        if user_id is None:
            return LoginResult(success=False, message="No password change is pending.")

        result = self.deps.accounts.change_password(user_id, new_password)
        if result.success and result.user is not None:
            self._start_session(result.user)
        return result

    def logout(self) -> None:
        t('clubapp.app.SportTrackApp.logout')
        if self.session.current_user is not None:
            self.logger.info(f"User {self.session.current_user.id} logged out")
        self.session.clear()
        self.deps.preferences.clear_session_user()

    def register_club(
        self,
        name: str,
        email: str,
        password: str,
        club_name: str,
        recovery_code: str,
    ) -> LoginResult:
        """Register a club and log its new admin in."""
        t('clubapp.app.SportTrackApp.register_club')
        result = self.deps.accounts.register_club(name, email, password, club_name, recovery_code)
        if result.success and result.user is not None:
            self._start_session(result.user)
        return result

    def recover_password(self, email: str, recovery_code: str, new_password: str) -> OperationResult:
        t('clubapp.app.SportTrackApp.recover_password')
        if self.deps.accounts.recover_password(email, recovery_code, new_password):
            return OperationResult.ok("Password reset. You can now log in.")
        return OperationResult.fail(MSG_RECOVERY_FAILED)

    def restore_session(self) -> Optional[User]:
        """
        Resume the persisted session user, if it still exists.

        The stored record is only a pointer: the user is reloaded from the
        user collection so deleted accounts and changed roles take effect.
        """
        t('clubapp.app.SportTrackApp.restore_session')
        stored = self.deps.preferences.get_session_user()
        if not stored:
            return None

        user_id = stored.get('id')
        if user_id == SUPER_ADMIN_ID and self.settings.super_admin_enabled:
            user: Optional[User] = SUPER_ADMIN_USER
        else:
            user = self.deps.users.get_user(str(user_id)) if user_id else None

        if user is None or user.must_change_password:
            self.logger.info(f"Discarding stale session for {user_id}")
            self.deps.preferences.clear_session_user()
            return None

        self.session.start(user, landing_view(user.role))
        self.logger.info(f"Restored session for {user.id} on view {self.session.view}")
        return user

    # ------------------------------------------------------------------
    # Navigation and preferences
    # ------------------------------------------------------------------
    def menu(self) -> Sequence[str]:
        t('clubapp.app.SportTrackApp.menu')
        user = self.session.current_user
        return menu_for(user.role if user else None)

    def set_view(self, view: str) -> OperationResult:
        t('clubapp.app.SportTrackApp.set_view')
        user = self.session.current_user
        if user is None or not can_open(user.role, view):
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        self.session.view = view
        if view != VIEW_INVENTORY:
            self.session.target_item_id = None
        return OperationResult.ok()

    def set_theme(self, color: str) -> bool:
        t('clubapp.app.SportTrackApp.set_theme')
        return self.deps.preferences.set_theme(color)

    def theme(self) -> str:
        t('clubapp.app.SportTrackApp.theme')
        return self.deps.preferences.get_theme()

    def toggle_dark_mode(self) -> bool:
        """Flip dark mode and return the new value."""
        t('clubapp.app.SportTrackApp.toggle_dark_mode')
        enabled = not self.deps.preferences.is_dark_mode()
        self.deps.preferences.set_dark_mode(enabled)
        return enabled

    # ------------------------------------------------------------------
    # Reservations
    # ------------------------------------------------------------------
    def check_availability(
        self,
        requested_items: Iterable[RequestedItem],
        date: str,
        start_time: str,
        end_time: str,
        exclude_reservation_id: Optional[str] = None,
    ) -> AvailabilityResult:
        t('clubapp.app.SportTrackApp.check_availability')
        try:
            items = self._coerce_items(requested_items)
        except ValueError as e:
            return AvailabilityResult(available=False, error=str(e))
        return self.deps.reservations.check_availability(
            items,
            date,
            start_time,
            end_time,
            exclude_reservation_id=exclude_reservation_id,
        )

    def create_reservation(
        self,
        requested_items: Iterable[RequestedItem],
        date: str,
        start_time: str,
        end_time: str,
    ) -> OperationResult:
        """Book equipment for the logged-in admin or coach."""
        t('clubapp.app.SportTrackApp.create_reservation')
        user = self.session.current_user
        if user is None or not (user.is_admin or user.is_coach):
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        invalid = self._check_window(start_time, end_time)
        if invalid:
            return invalid
        try:
            items = self._coerce_items(requested_items)
        except ValueError as e:
            return OperationResult.fail(str(e))

        reservation = Reservation(
            id=uuid.uuid4().hex,
            coach_id=user.id,
            coach_name=user.name,
            date=date,
            start_time=start_time,
            end_time=end_time,
            items=items,
        )
        return self.deps.reservations.create(reservation)

    def update_reservation(self, reservation: Reservation) -> OperationResult:
        t('clubapp.app.SportTrackApp.update_reservation')
        denied = self._check_owner(reservation.id)
        denied = denied or self._check_window(reservation.start_time, reservation.end_time)
        if denied:
            return denied
        return self.deps.reservations.update(reservation)

    def cancel_reservation(self, reservation_id: str) -> OperationResult:
        t('clubapp.app.SportTrackApp.cancel_reservation')
        return self._check_owner(reservation_id) or self.deps.reservations.cancel(reservation_id)

    def return_reservation(
        self,
        reservation_id: str,
        damage_reports: Optional[Iterable[DamageReport]] = None,
    ) -> OperationResult:
        t('clubapp.app.SportTrackApp.return_reservation')
        denied = self._check_owner(reservation_id)
        if denied:
            return denied
        return self.deps.reservations.return_reservation(reservation_id, damage_reports)

    def my_reservations(self) -> List[Reservation]:
        """Admins see every reservation, coaches only their own."""
        t('clubapp.app.SportTrackApp.my_reservations')
        user = self.session.current_user
        if user is None:
            return []
        if user.is_admin:
            return self.deps.reservations.list_reservations()
        return self.deps.reservations.get_coach_reservations(user.id)

    # ------------------------------------------------------------------
    # Inventory (admin only for changes)
    # ------------------------------------------------------------------
    def list_items(self) -> List[Item]:
        t('clubapp.app.SportTrackApp.list_items')
        return self.deps.inventory.list_items()

    def add_item(
        self,
        name: str,
        quantity: int,
        category: str = "",
        description: str = "",
        image_url: Optional[str] = None,
    ) -> OperationResult:
        t('clubapp.app.SportTrackApp.add_item')
        denied = self._require_admin()
        if denied:
            return denied
        try:
            item = self.deps.inventory.add_item(name, quantity, category, description, image_url)
        except ValueError as e:
            return OperationResult.fail(str(e))
        return OperationResult.ok(f'Item "{item.name}" added.')

    def update_item(self, item: Item) -> OperationResult:
        t('clubapp.app.SportTrackApp.update_item')
        return self._require_admin() or self.deps.inventory.update_item(item)

    def delete_item(self, item_id: str) -> OperationResult:
        t('clubapp.app.SportTrackApp.delete_item')
        denied = self._require_admin()
        if denied:
            return denied
        return self.deps.inventory.delete_item(
            item_id, self.deps.reservations.get_active_reservations()
        )

    def fix_damage(self, reservation_id: str, item_id: str) -> OperationResult:
        """Resolve a damage report and jump to the inventory view focused on its item."""
        t('clubapp.app.SportTrackApp.fix_damage')
        denied = self._require_admin()
        if denied:
            return denied
        resolved = self.deps.reservations.resolve_damage(reservation_id, item_id)
        if not resolved.success:
            return resolved
        self.session.target_item_id = item_id
        self.session.view = VIEW_INVENTORY
        return resolved

    def resolve_damage(self, reservation_id: str, item_id: str) -> OperationResult:
        t('clubapp.app.SportTrackApp.resolve_damage')
        return self._require_admin() or self.deps.reservations.resolve_damage(reservation_id, item_id)

    # ------------------------------------------------------------------
    # Team and clubs
    # ------------------------------------------------------------------
    def add_coach(
        self,
        name: str,
        email: str,
        password: str,
        *,
        must_change_password: bool = False,
    ) -> OperationResult:
        t('clubapp.app.SportTrackApp.add_coach')
        denied = self._require_admin()
        if denied:
            return denied
        result, _ = self.deps.accounts.add_coach(
            self.session.current_user,
            name,
            email,
            password,
            must_change_password=must_change_password,
        )
        return result

    def delete_coach(self, user_id: str) -> OperationResult:
        t('clubapp.app.SportTrackApp.delete_coach')
        denied = self._require_admin()
        if denied:
            return denied
        admin = self.session.current_user
        if user_id not in {coach.id for coach in self.deps.accounts.list_club_coaches(admin)}:
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        return self.deps.accounts.delete_coach(user_id)

    def list_coaches(self) -> List[User]:
        t('clubapp.app.SportTrackApp.list_coaches')
        if self._require_admin():
            return []
        return self.deps.accounts.list_club_coaches(self.session.current_user)

    def delete_account(self) -> OperationResult:
        """Delete the logged-in admin's club with all members and bookings, then log out."""
        t('clubapp.app.SportTrackApp.delete_account')
        denied = self._require_admin()
        if denied:
            return denied
        result = self.deps.accounts.delete_club(self.session.current_user)
        if result.success:
            self.logout()
        return result

    def list_clubs(self) -> List[ClubSummary]:
        t('clubapp.app.SportTrackApp.list_clubs')
        user = self.session.current_user
        if user is None or not user.is_super_admin:
            return []
        return self.deps.accounts.list_clubs()

    def dashboard_summary(self) -> Optional[DashboardSummary]:
        t('clubapp.app.SportTrackApp.dashboard_summary')
        user = self.session.current_user
        if user is None or user.is_super_admin:
            return None
        return build_summary(
            self.deps.inventory,
            self.deps.reservations,
            self.settings.low_stock_threshold,
            viewer=user,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _start_session(self, user: User) -> None:
        t('clubapp.app.SportTrackApp._start_session')
        self.session.start(user, landing_view(user.role))
        self.deps.preferences.set_session_user(user.public_dict())

    def _require_admin(self) -> Optional[OperationResult]:
        t('clubapp.app.SportTrackApp._require_admin')
        user = self.session.current_user
        if user is None or not user.is_admin:
            self.logger.warning(
                f"Admin action refused for {user.id if user else 'anonymous'}"
            )
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        return None

    def _check_owner(self, reservation_id: str) -> Optional[OperationResult]:
        """Admins may act on any reservation; coaches only on their own."""
        t('clubapp.app.SportTrackApp._check_owner')
        user = self.session.current_user
        if user is None or not (user.is_admin or user.is_coach):
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        reservation = self.deps.reservations.get_reservation(reservation_id)
        if reservation is None:
            return OperationResult.fail(f"Reservation {reservation_id} not found.")
        if user.is_coach and reservation.coach_id != user.id:
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        return None

    def _check_window(self, start_time: str, end_time: str) -> Optional[OperationResult]:
        t('clubapp.app.SportTrackApp._check_window')
        try:
            start, end = parse_clock(start_time), parse_clock(end_time)
        except ValueError:
            return OperationResult.fail("Times must use the HH:MM format.")
        if start >= end:
            return OperationResult.fail("The end time must be after the start time.")
        return None

    def _coerce_items(self, requested_items: Iterable[RequestedItem]) -> tuple:
        t('clubapp.app.SportTrackApp._coerce_items')
        coerced = []
        for entry in requested_items:
            if not isinstance(entry, ReservationItem):
                entry = ReservationItem.from_dict(entry)
            if not entry.item_name:
                item = self.deps.inventory.get_item(entry.item_id)
                if item is not None:
                    entry = ReservationItem(entry.item_id, item.name, entry.quantity)
            coerced.append(entry)
        return tuple(coerced)


def create_app(settings: Optional[AppSettings] = None, **overrides) -> SportTrackApp:
    """
    Build a ready-to-use application.

    Args:
        settings: Configuration snapshot; the cached environment settings when omitted
        **overrides: Passed to ``build_dependencies`` (``store``, ``clock``)
    """
    t('clubapp.app.create_app')
    settings = settings or get_settings()
    return SportTrackApp(build_dependencies(settings, **overrides))
