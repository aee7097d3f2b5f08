"""Password hashing utilities built on bcrypt."""
from __future__ import annotations

import bcrypt

from chat_palace.core.settings import settings


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Returns:
        True if the password matches; False for a mismatch or a malformed hash.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
