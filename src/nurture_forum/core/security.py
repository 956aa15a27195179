"""Access token helpers.

Tokens are issued by the account service; the forum only needs to read the
subject back out of them. ``create_access_token`` exists for tooling and tests.
"""

from __future__ import annotations

from datetime import timedelta

from jose import JWTError, jwt

from nurture_forum.core.settings import settings
from nurture_forum.db.time import utcnow


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """Return a signed JWT whose subject is ``user_id``."""
    minutes = (
        expires_minutes
        if expires_minutes is not None
        else settings.access_token_expire_minutes
    )
    payload = {
        "sub": str(user_id),
        "exp": utcnow() + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_subject(token: str) -> int | None:
    """Return the numeric subject of a valid token, or None if it cannot be read."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
