"""Club accounts: registration, login, password flows and club deletion."""

from __future__ import annotations
from tracking import t

import logging
import uuid
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from infrastructure.constants import (
    LEGACY_DEFAULT_PASSWORD,
    MSG_EMAIL_TAKEN,
    MSG_NOT_AUTHORIZED,
    MSG_USER_NOT_FOUND,
    MSG_WRONG_PASSWORD,
    ROLE_ADMIN,
    ROLE_COACH,
    ROLE_SUPER_ADMIN,
    SUPER_ADMIN_CLUB_NAME,
    SUPER_ADMIN_EMAIL,
    SUPER_ADMIN_ID,
    SUPER_ADMIN_NAME,
)
from infrastructure.settings import AppSettings
from models import LoginResult, OperationResult, User, normalize_email
from reservations import ReservationManager

from .manager import UserManager
from .security import constant_time_equals, hash_secret, verify_secret

SUPER_ADMIN_USER = User(
    id=SUPER_ADMIN_ID,
    name=SUPER_ADMIN_NAME,
    email=SUPER_ADMIN_EMAIL,
    role=ROLE_SUPER_ADMIN,
    club_name=SUPER_ADMIN_CLUB_NAME,
)


@dataclass(frozen=True)
class ClubSummary:
    """One row of the super-admin's global view."""

    club_id: Optional[str]
    club_name: str
    admin_name: str
    admin_email: str
    coach_count: int


class AccountService:
    """Account and club operations on top of the user and reservation stores."""

    def __init__(
        self,
        users: UserManager,
        reservations: ReservationManager,
        settings: AppSettings,
    ) -> None:
        t('users.accounts.AccountService.__init__')
        self.users = users
        self.reservations = reservations
        self.settings = settings
        self.logger = logging.getLogger('AccountService')

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------
    def register_club(
        self,
        name: str,
        email: str,
        password: str,
        club_name: str,
        recovery_code: str,
    ) -> LoginResult:
        """
        Create a club administrator account.

        Args:
            name: Administrator's display name
            email: Login email, unique across all users
            password: Initial password
            club_name: Club display name shared with future coaches
            recovery_code: Secret that allows a password reset later

        Returns:
            LoginResult carrying the new admin, ready to be logged in
        """
        t('users.accounts.AccountService.register_club')
        if self.users.email_exists(email):
            self.logger.info(f"Registration refused for existing email {normalize_email(email)}")
            return LoginResult(success=False, message=MSG_EMAIL_TAKEN)

        problem = self._password_problem(password)
        if problem:
            return LoginResult(success=False, message=problem)

        admin = User(
            id=f"admin-{uuid.uuid4().hex}",
            name=name.strip(),
            email=normalize_email(email),
            role=ROLE_ADMIN,
            club_name=club_name.strip(),
            club_id=uuid.uuid4().hex,
            password_hash=hash_secret(password),
            recovery_code_hash=hash_secret(recovery_code),
        )
        self.users.save_user(admin)

        self.logger.info(f"""CLUB REGISTERED
        Club: {admin.club_name} ({admin.club_id})
        Admin: {admin.name} <{admin.email}>
        """)
        return LoginResult(success=True, message="Club registered successfully.", user=admin)

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate a user by email and password.

        The configured bootstrap super-admin credential is checked first and
        never touches the user collection. A user flagged with
        ``must_change_password`` gets ``must_change_password=True`` back and is
        not logged in yet.
        """
        t('users.accounts.AccountService.login')
        if self._is_super_admin_credential(email, password):
            self.logger.info("Super-admin logged in")
            return LoginResult(success=True, user=SUPER_ADMIN_USER)

        user = self.users.get_by_email(email)
        if user is None:
            return LoginResult(success=False, message=MSG_USER_NOT_FOUND)

        if not verify_secret(password, user.password_hash):
            self.logger.info(f"Wrong password for user {user.id}")
            return LoginResult(success=False, message=MSG_WRONG_PASSWORD)

        if user.must_change_password:
            self.logger.info(f"User {user.id} must change password before logging in")
            return LoginResult(
                success=False,
                message="You must set a new password before continuing.",
                user=user,
                must_change_password=True,
            )

        self.logger.info(f"User {user.id} ({user.role}) logged in")
        return LoginResult(success=True, user=user)

    def change_password(self, user_id: str, new_password: str) -> LoginResult:
        """Set a new password, clear the forced-change flag and return the user."""
        t('users.accounts.AccountService.change_password')
        user = self.users.get_user(user_id)
        if user is None:
            return LoginResult(success=False, message=MSG_USER_NOT_FOUND)

        problem = self._password_problem(new_password)
        if problem:
            return LoginResult(success=False, message=problem, user=user, must_change_password=True)
        if new_password == LEGACY_DEFAULT_PASSWORD or verify_secret(new_password, user.password_hash):
            return LoginResult(
                success=False,
                message="The new password cannot be the same as the previous one.",
                user=user,
                must_change_password=True,
            )

        updated = replace(user, password_hash=hash_secret(new_password), must_change_password=False)
        self.users.save_user(updated)
        self.logger.info(f"Password changed for user {user_id}")
        return LoginResult(success=True, message="Password changed successfully.", user=updated)

    def recover_password(self, email: str, recovery_code: str, new_password: str) -> bool:
        """
        Reset a password with the recovery code chosen at registration.

        Returns False on any mismatch without saying whether the email or the
        code was wrong; the caller shows one generic message.
        """
        t('users.accounts.AccountService.recover_password')
        user = self.users.get_by_email(email)
        if user is None or not verify_secret(recovery_code, user.recovery_code_hash):
            self.logger.info("Password recovery attempt rejected")
            return False
        if self._password_problem(new_password):
            return False

        self.users.save_user(replace(user, password_hash=hash_secret(new_password)))
        self.logger.info(f"Password recovered for user {user.id}")
        return True

    # ------------------------------------------------------------------
    # Team management
    # ------------------------------------------------------------------
    def add_coach(
        self,
        admin: User,
        name: str,
        email: str,
        password: str,
        *,
        club_name: Optional[str] = None,
        must_change_password: bool = False,
    ) -> Tuple[OperationResult, Optional[User]]:
        """
        Add a coach to the admin's club.

        The coach always joins the inviting admin's club: any ``club_name``
        passed in is ignored, since club deletion relies on this link.

        Returns:
            (result, created coach or None)
        """
        t('users.accounts.AccountService.add_coach')
        if not admin.is_admin:
            return OperationResult.fail(MSG_NOT_AUTHORIZED), None
        if self.users.email_exists(email):
            return OperationResult.fail(MSG_EMAIL_TAKEN), None
        problem = self._password_problem(password)
        if problem:
            return OperationResult.fail(problem), None

        if club_name is not None and club_name != admin.club_name:
            self.logger.warning(
                f"Ignoring club name {club_name!r} for new coach; using {admin.club_name!r}"
            )

        coach = User(
            id=f"coach-{uuid.uuid4().hex}",
            name=name.strip(),
            email=normalize_email(email),
            role=ROLE_COACH,
            club_name=admin.club_name,
            club_id=admin.club_id,
            password_hash=hash_secret(password),
            must_change_password=must_change_password,
        )
        self.users.save_user(coach)
        self.logger.info(f"Coach {coach.id} added to club {admin.club_name}")
        return OperationResult.ok("Coach added successfully."), coach

    def delete_coach(self, user_id: str) -> OperationResult:
        t('users.accounts.AccountService.delete_coach')
        if not self.users.remove_users([user_id]):
            return OperationResult.fail(f"User {user_id} not found.")
        return OperationResult.ok("Coach removed.")

    def delete_club(self, admin: User) -> OperationResult:
        """
        Delete an admin, every member of its club and all their reservations.

        Reservations are matched on ``coach_id`` only, which covers bookings made
        by the admin as well since the admin's id is in the removed set.
        """
        t('users.accounts.AccountService.delete_club')
        if not admin.is_admin:
            return OperationResult.fail(MSG_NOT_AUTHORIZED)
        if not admin.club_id and not admin.club_name:
            return OperationResult.fail("This account is not linked to a club.")

        doomed = self.users.club_member_ids(admin.club_id, admin.club_name)
        doomed.add(admin.id)

        removed_users = self.users.remove_users(doomed)
        removed_reservations = self.reservations.remove_reservations_for_users(doomed)

        self.logger.warning(f"""CLUB DELETED
        Club: {admin.club_name} ({admin.club_id})
        Users removed: {removed_users}
        Reservations removed: {removed_reservations}
        """)
        return OperationResult.ok(
            "Account and club deleted. All associated data has been removed."
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_club_coaches(self, admin: User) -> List[User]:
        t('users.accounts.AccountService.list_club_coaches')
        members = self.users.club_member_ids(admin.club_id, admin.club_name)
        return [
            user for user in self.users.get_all_users()
            if user.id in members and user.is_coach
        ]

    def list_clubs(self) -> List[ClubSummary]:
        """Every registered club with its admin and coach count."""
        t('users.accounts.AccountService.list_clubs')
        clubs = []
        for admin in self.users.get_all_users():
            if not admin.is_admin:
                continue
            clubs.append(ClubSummary(
                club_id=admin.club_id,
                club_name=admin.club_name or "",
                admin_name=admin.name,
                admin_email=admin.email,
                coach_count=len(self.list_club_coaches(admin)),
            ))
        return clubs

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _is_super_admin_credential(self, email: str, password: str) -> bool:
        t('users.accounts.AccountService._is_super_admin_credential')
        if not self.settings.super_admin_enabled:
            return False
        if (email or "").strip().lower() != self.settings.super_admin_username:
            return False
        return constant_time_equals(password, self.settings.super_admin_password)

    def _password_problem(self, password: str) -> Optional[str]:
        t('users.accounts.AccountService._password_problem')
        minimum = self.settings.min_password_length
        if not password or len(password) < minimum:
            return f"The password must be at least {minimum} characters long."
        return None
