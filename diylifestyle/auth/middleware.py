"""Session and identity middleware for FastAPI."""

from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from diylifestyle.auth.sessions import encode_session, load_session, session_cookie_kwargs
from diylifestyle.config import settings
from diylifestyle.db.database import get_db
from diylifestyle.db.queries import users as user_queries
from diylifestyle.exceptions import StoreError
from diylifestyle.models.session import SessionClaims

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = {"PUT", "DELETE"}


async def attach_identity(session: SessionClaims) -> dict | None:
    """Resolve the session's user id to a stored user.

    A claim pointing at a user that no longer exists is cleared, so the
    session falls back to anonymous.
    """
    if not session.user_id:
        return None
    try:
        db = await get_db()
    except RuntimeError:
        return None
    try:
        user = await user_queries.get_user(db, session.user_id)
    except StoreError:
        logger.warning("Could not resolve session user %s; treating as anonymous", session.user_id)
        return None
    if user is None:
        logger.info("Session references unknown user %s; clearing", session.user_id)
        session.user_id = None
        session.username = None
    return user


class SessionMiddleware(BaseHTTPMiddleware):
    """Decode the session cookie, attach the identity, write the cookie back.

    The cookie is reissued on every response while the session holds
    anything, which keeps the expiry window rolling.
    """

    async def dispatch(self, request: Request, call_next):
        raw = request.cookies.get(settings.session_cookie_name)
        session = load_session(raw)
        request.state.session = session
        request.state.user = await attach_identity(session)

        response = await call_next(request)

        session = request.state.session
        if session.is_empty:
            if raw:
                response.delete_cookie(settings.session_cookie_name, path="/")
        else:
            response.set_cookie(**session_cookie_kwargs(encode_session(session)))
        return response


class MethodOverrideMiddleware(BaseHTTPMiddleware):
    """Let HTML forms issue PUT/DELETE via ``POST ...?_method=DELETE``."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "POST":
            override = request.query_params.get("_method", "").upper()
            if override in OVERRIDABLE_METHODS:
                request.scope["method"] = override
        return await call_next(request)
