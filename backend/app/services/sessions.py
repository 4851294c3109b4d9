"""
Signed session tokens (JWT, HS256 by default).

A session normally lives for ``session_max_age_hours``; when the user ticks
"remember me" at sign-in it lives for ``remember_me_days`` instead.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.config import get_settings
from app.errors import AuthenticationError

logger = logging.getLogger(__name__)


def session_lifetime(remember: bool) -> timedelta:
    settings = get_settings()
    if remember:
        return timedelta(days=settings.remember_me_days)
    return timedelta(hours=settings.session_max_age_hours)


def issue_token(
    account_id: int,
    remember: bool = False,
    now: Optional[datetime] = None,
) -> tuple[str, datetime]:
    """Return (token, expires_at) for an authenticated account."""
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + session_lifetime(remember)

    payload = {
        "sub": str(account_id),
        "iat": issued_at,
        "exp": expires_at,
        "remember": remember,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, expires_at


def decode_token(token: str) -> int:
    """Validate a token and return the account id it was issued for."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected session token: {e}")
        raise AuthenticationError("Invalid session token")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid session token")
