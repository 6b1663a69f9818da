"""Google OAuth flow for web app authentication."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import aiosqlite
import httpx
from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from diylifestyle.auth.sessions import flash, login_session, logout_session
from diylifestyle.auth.state_store import state_store
from diylifestyle.config import settings
from diylifestyle.db.database import get_db
from diylifestyle.db.queries import users as user_queries
from diylifestyle.exceptions import AuthFailure, StoreError
from diylifestyle.models.user import GoogleProfile, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

LOGIN_SCOPES = ["profile", "email"]


def build_authorize_url(state: str, scopes: list[str] | None = None) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.google_callback_url,
        "response_type": "code",
        "scope": " ".join(scopes or LOGIN_SCOPES),
        "state": state,
    }
    return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"


async def fetch_google_profile(code: str) -> GoogleProfile:
    """Exchange the authorization code and fetch the user's profile.

    Raises AuthFailure if Google rejects the code or returns no usable profile.
    """
    async with httpx.AsyncClient() as client:
        token_resp = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": settings.google_callback_url,
            },
            headers={"Accept": "application/json"},
        )
        if token_resp.status_code >= 400:
            raise AuthFailure(f"Token exchange failed (status={token_resp.status_code})")
        token_data = token_resp.json()
        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            raise AuthFailure("Token exchange returned no access token")

        user_resp = await client.get(
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
        )
        if user_resp.status_code >= 400:
            raise AuthFailure(f"Profile fetch failed (status={user_resp.status_code})")
        data = user_resp.json()

    # The legacy v2 userinfo endpoint reports the subject as "id"
    if isinstance(data, dict) and "sub" not in data and "id" in data:
        data = {**data, "sub": str(data["id"])}
    try:
        return GoogleProfile.model_validate(data)
    except ValidationError as e:
        raise AuthFailure("Profile has no subject id") from e


async def handle_callback(db: aiosqlite.Connection, profile: GoogleProfile) -> dict:
    """Resolve a verified Google profile to a local user, creating it if absent."""
    return await user_queries.find_or_create_google_user(
        db,
        google_id=profile.sub,
        display_name=profile.name,
        email=profile.email,
    )


def _failure_redirect(request: Request, reason: str) -> RedirectResponse:
    logger.warning("Google login failed: %s", reason)
    flash(request, "error", "Google sign-in failed, please try again.")
    return RedirectResponse(settings.login_failure_path, status_code=302)


@router.get("/google")
async def google_login():
    """Redirect to Google's consent screen."""
    state = await state_store.issue()
    return RedirectResponse(build_authorize_url(state), status_code=302)


@router.get("/google/callback")
async def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    """Handle Google's redirect back after consent."""
    try:
        if error:
            raise AuthFailure(f"provider returned {error}")
        if not code or not state:
            raise AuthFailure("missing code or state")
        if not await state_store.consume(state):
            raise AuthFailure("invalid state")
        profile = await fetch_google_profile(code)
    except AuthFailure as e:
        return _failure_redirect(request, str(e))
    except (httpx.HTTPError, ValueError) as e:
        return _failure_redirect(request, f"provider error: {e}")

    try:
        db = await get_db()
        user = await handle_callback(db, profile)
    except StoreError as e:
        logger.error("Could not resolve Google user %s: %s", profile.sub, e)
        flash(request, "error", "We could not sign you in right now, please try again later.")
        return RedirectResponse(settings.login_failure_path, status_code=302)

    login_session(request, user)
    flash(request, "success", f"Welcome, {user.get('display_name') or 'friend'}!")
    logger.info("User %s signed in with Google", user["id"])
    return RedirectResponse(settings.login_success_path, status_code=302)


@router.get("/me")
async def get_current_user(request: Request):
    """Get the currently authenticated user."""
    user = getattr(request.state, "user", None)
    if not user:
        return {"user": None}
    return {"user": User.model_validate(user).model_dump()}


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(request: Request):
    """Clear the session and return to the homepage."""
    user = getattr(request.state, "user", None)
    logout_session(request)
    if user:
        logger.info("User %s signed out", user["id"])
        flash(request, "success", "You have been logged out.")
    return RedirectResponse("/", status_code=303)
