"""Signed client-side session cookie.

One mechanism carries both the identity claim and display fields (username,
flash messages). The cookie is signed with ``settings.session_secret`` and
expires ``settings.session_max_age_seconds`` after it was last issued.
"""

from __future__ import annotations

import logging

from fastapi import Request
from itsdangerous import BadData, URLSafeTimedSerializer
from pydantic import ValidationError

from diylifestyle.config import settings
from diylifestyle.exceptions import InvalidSession
from diylifestyle.models.session import Flash, SessionClaims

logger = logging.getLogger(__name__)

SESSION_SALT = "diylifestyle-session-v1"


def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=secret, salt=SESSION_SALT)


def encode_session(claims: SessionClaims, secret: str | None = None) -> str:
    """Sign the claims into a cookie value."""
    s = _serializer(secret or settings.session_secret)
    return s.dumps(claims.model_dump(mode="json"))


def decode_session(
    value: str | None,
    secret: str | None = None,
    max_age: int | None = None,
) -> SessionClaims:
    """Verify a cookie value and return its claims.

    Raises InvalidSession if the value is missing, tampered with, malformed
    or older than ``max_age`` seconds.
    """
    if not value:
        raise InvalidSession("No session cookie")
    s = _serializer(secret or settings.session_secret)
    if max_age is None:
        max_age = settings.session_max_age_seconds
    try:
        data = s.loads(value, max_age=max_age)
    except BadData as e:
        # includes SignatureExpired
        raise InvalidSession(str(e)) from e
    if not isinstance(data, dict):
        raise InvalidSession("Session payload is not an object")
    try:
        return SessionClaims.model_validate(data)
    except ValidationError as e:
        raise InvalidSession("Session payload has invalid claims") from e


def load_session(value: str | None) -> SessionClaims:
    """Decode a cookie value, treating any invalid session as anonymous."""
    try:
        return decode_session(value)
    except InvalidSession as e:
        if value:
            logger.debug("Discarding invalid session cookie: %s", e)
        return SessionClaims()


def session_cookie_kwargs(value: str) -> dict:
    return {
        "key": settings.session_cookie_name,
        "value": value,
        "max_age": settings.session_max_age_seconds,
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------

def get_session(request: Request) -> SessionClaims:
    session = getattr(request.state, "session", None)
    if session is None:
        session = SessionClaims()
        request.state.session = session
    return session


def login_session(request: Request, user: dict) -> None:
    """Mark the request's session as authenticated for ``user``."""
    session = get_session(request)
    session.user_id = user["id"]
    session.username = user.get("username") or user.get("display_name")
    request.state.user = user


def logout_session(request: Request) -> None:
    session = get_session(request)
    session.user_id = None
    session.username = None
    request.state.user = None


def flash(request: Request, category: str, message: str) -> None:
    """Queue a message for the next rendered page."""
    get_session(request).flashes.append(Flash(category=category, message=message))


def pop_flashes(request: Request) -> list[Flash]:
    """Return queued messages and discard them."""
    session = get_session(request)
    messages = list(session.flashes)
    session.flashes.clear()
    return messages
