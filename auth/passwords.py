"""
auth/passwords.py -- Password hashing and comparison.

bcrypt directly, no passlib wrapper. passlib's internal wrap-bug detection
hashes a password longer than 72 bytes, which bcrypt 5.x rejects with an
explicit error.

bcrypt is cost-bound: checkpw re-derives the hash with the work factor stored
in the hash itself and compares in constant time, so the comparison latency
does not depend on how much of the password matched. The cost for new hashes
comes from Settings.bcrypt_rounds.
"""

from __future__ import annotations

import bcrypt

from auth.models import User
from core.config import get_settings


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt only reads the first 72 bytes of a password. bcrypt 4.x truncates
    longer input silently; bcrypt 5.x raises ValueError instead, which the
    create-user CLI reports to the operator.
    """
    if not plain:
        raise ValueError("Password must not be empty.")
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long input. Never a match.
        return False


def compare_passwords(plain: str, user: User) -> bool:
    """Compare a submitted password against a user's stored hash."""
    if not plain or not user.hashed_password:
        return False
    return verify_password(plain, user.hashed_password)
