"""Guard for routes that need a logged-in user."""

from __future__ import annotations

import logging

from fastapi import Request

from diylifestyle.exceptions import LoginRequired

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_BODY = "You must login!"


def require_user(request: Request) -> dict:
    """FastAPI dependency: return the attached user or short-circuit.

    Anonymous requests end with LoginRequired, rendered as a plain-text body
    with status 200 (no redirect to the login page).
    """
    user = getattr(request.state, "user", None)
    if not user:
        raise LoginRequired(request.url.path)
    logger.debug("Authenticated request to %s by user %s", request.url.path, user["id"])
    return user
