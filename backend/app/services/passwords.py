"""
Salted one-way password hashing with bcrypt.

The cost factor is fixed when the hash is created and travels inside the
hash string, so verification works regardless of the current setting.
"""
import secrets
from functools import lru_cache
from typing import Optional

import bcrypt

from app.config import get_settings

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    rounds = rounds or get_settings().bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


@lru_cache(maxsize=1)
def dummy_hash() -> str:
    """A throwaway hash so failed sign-ins cost one bcrypt check either way."""
    return hash_password(secrets.token_urlsafe(16))
