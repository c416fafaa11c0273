"""
User Management System for SportTrack
Handles persistent storage and retrieval of user accounts
"""
from tracking import t

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional, Set

from infrastructure.constants import USERS_KEY
from models import User, normalize_email
from storage import JsonStore

from .security import hash_secret


class UserManager:
    """
    Manages user accounts with persistent JSON storage

    Email addresses are unique across all users. Club membership is looked up
    through ``club_id``; ``club_name`` is kept as the display tag.
    """

    def __init__(self, store: JsonStore, *, persist_repairs: bool = True) -> None:
        """
        Initialize the UserManager with persistent storage

        Args:
            store: Key-value store holding the user collection
            persist_repairs: Write repaired legacy records back to the store;
                read-only callers pass False and keep the repair in memory

        Loads existing users and repairs legacy records (plaintext secrets,
        missing club ids), saving the repaired collection.
        """
        t('users.manager.UserManager.__init__')
        self.store = store
        self.logger = logging.getLogger('UserManager')
        self.users: Dict[str, User] = {}

        raw_users = self._load_raw_users()
        repaired = self._normalise_loaded_entries(raw_users)
        for entry in raw_users:
            if not isinstance(entry, dict):
                self.logger.warning(f"Skipping non-object user record: {entry!r}")
                continue
            try:
                user = User.from_dict(entry)
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Skipping invalid user record: {e}")
                continue
            self.users[user.id] = user
        if repaired and persist_repairs:
            self.logger.warning(f"Normalised {repaired} stored users with legacy credentials or club data")
            self._save_users()

        self.logger.info(f"UserManager initialized with {len(self.users)} users")

    def get_user(self, user_id: str) -> Optional[User]:
        """
        Retrieve a single user by id

        Args:
            user_id: Account identifier

        Returns:
            The User if found, None otherwise
        """
        t('users.manager.UserManager.get_user')
        user = self.users.get(user_id)
        if user is None:
            self.logger.debug(f"No user found for user_id: {user_id}")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        t('users.manager.UserManager.get_by_email')
        wanted = normalize_email(email)
        for user in self.users.values():
            if normalize_email(user.email) == wanted:
                return user
        return None

    def email_exists(self, email: str) -> bool:
        t('users.manager.UserManager.email_exists')
        return self.get_by_email(email) is not None

    def get_all_users(self) -> List[User]:
        t('users.manager.UserManager.get_all_users')
        return list(self.users.values())

    def save_user(self, user: User) -> None:
        """
        Save or update a user

        Raises:
            ValueError: If another account already uses the same email
        """
        t('users.manager.UserManager.save_user')
        holder = self.get_by_email(user.email)
        if holder is not None and holder.id != user.id:
            raise ValueError(f"Email {user.email} is already registered")

        self.users[user.id] = user
        self._save_users()
        self.logger.info(f"Saved user {user.id} ({user.role})")

    def remove_users(self, user_ids: Iterable[str]) -> int:
        """Remove the given accounts; unknown ids are ignored. Returns how many went."""
        t('users.manager.UserManager.remove_users')
        removed = 0
        for user_id in set(user_ids):
            if self.users.pop(user_id, None) is not None:
                removed += 1
        if removed:
            self._save_users()
        self.logger.info(f"Removed {removed} users")
        return removed

    def club_member_ids(self, club_id: Optional[str], club_name: Optional[str] = None) -> Set[str]:
        """
        Ids of every user in a club

        Matches on ``club_id``; records without one fall back to ``club_name``.
        """
        t('users.manager.UserManager.club_member_ids')
        members: Set[str] = set()
        for user in self.users.values():
            if club_id and user.club_id == club_id:
                members.add(user.id)
            elif club_name and not user.club_id and user.club_name == club_name:
                members.add(user.id)
        return members

    def _normalise_loaded_entries(self, entries: List[Dict[str, Any]]) -> int:
        """Hash plaintext secrets and give every club member a shared club id."""
        t('users.manager.UserManager._normalise_loaded_entries')
        repaired = 0
        club_ids: Dict[str, str] = {
            entry['clubName']: entry['clubId']
            for entry in entries
            if isinstance(entry, dict) and entry.get('clubName') and entry.get('clubId')
        }

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            modified = False

            # Plaintext secrets are never kept, even when a hash already exists
            for plain_key, hash_key in (('password', 'passwordHash'), ('recoveryCode', 'recoveryCodeHash')):
                if plain_key not in entry:
                    continue
                plain_value = entry.pop(plain_key)
                if plain_value and not entry.get(hash_key):
                    entry[hash_key] = hash_secret(str(plain_value))
                modified = True

            club_name = entry.get('clubName')
            if club_name and not entry.get('clubId') and entry.get('role') != 'super-admin':
                entry['clubId'] = club_ids.setdefault(club_name, uuid.uuid4().hex)
                modified = True

            if modified:
                repaired += 1
        return repaired

    def _save_users(self) -> None:
        t('users.manager.UserManager._save_users')
        self.store.save(USERS_KEY, [user.to_dict() for user in self.users.values()])
        self.logger.debug(f"Successfully saved {len(self.users)} users")

    def _load_raw_users(self) -> List[Dict[str, Any]]:
        t('users.manager.UserManager._load_raw_users')
        data = self.store.load(USERS_KEY, [])
        if not isinstance(data, list):
            self.logger.error(
                f"Invalid user collection format; expected list, received {type(data).__name__}"
            )
            return []
        return data
