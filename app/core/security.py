"""
app/core/security.py

Purpose: Password hashing

- bcrypt hashing with a configurable cost factor
- Constant-time verification that tolerates missing hashes
"""

import bcrypt
from typing import Optional

from app.core.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hashes a plaintext password with bcrypt.

    Args:
        password: Plaintext password (at most 72 bytes)
        rounds: Cost factor, defaults to settings.BCRYPT_ROUNDS

    Returns:
        The encoded hash, salt included
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """
    Checks a plaintext password against a stored bcrypt hash.
    Users created without a password never verify.
    """
    if not password or not hashed:
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash, or the password is over 72 bytes
        return False
