"""Credential hashing for passwords and recovery codes."""

from __future__ import annotations

import hmac
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from tracking import t


def hash_secret(secret: str) -> str:
    """Return a salted hash for a password or recovery code."""
    t('users.security.hash_secret')
    return generate_password_hash(secret)


def verify_secret(secret: Optional[str], secret_hash: Optional[str]) -> bool:
    """Check ``secret`` against a stored hash; a missing hash never matches."""
    t('users.security.verify_secret')
    if not secret or not secret_hash:
        return False
    return check_password_hash(secret_hash, secret)


def constant_time_equals(left: Optional[str], right: Optional[str]) -> bool:
    """Compare two plain strings without leaking where they differ."""
    t('users.security.constant_time_equals')
    if left is None or right is None:
        return False
    return hmac.compare_digest(left.encode('utf-8'), right.encode('utf-8'))
