"""Local accounts: sign up, password login, profiles."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from diylifestyle.auth.gate import require_user
from diylifestyle.auth.passwords import hash_password, verify_password
from diylifestyle.auth.sessions import flash, login_session, logout_session
from diylifestyle.db.database import get_db
from diylifestyle.db.queries import users as user_queries
from diylifestyle.exceptions import DuplicateUser
from diylifestyle.web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

MIN_PASSWORD_LENGTH = 8


@router.get("/new")
async def signup_page(request: Request):
    return render(request, "users/new.html")


@router.post("")
async def create_user(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    display_name: str | None = Form(None),
):
    username = username.strip()
    if not username or len(password) < MIN_PASSWORD_LENGTH:
        flash(request, "error", f"Pick a username and a password of at least {MIN_PASSWORD_LENGTH} characters.")
        return render(request, "users/new.html", {"form_username": username}, status_code=400)

    db = await get_db()
    try:
        user_id = await user_queries.create_local_user(
            db, username, hash_password(password), display_name=display_name or None,
        )
    except DuplicateUser:
        flash(request, "error", f"The username {username} is taken.")
        return render(request, "users/new.html", {"form_username": username}, status_code=409)

    user = await user_queries.get_user(db, user_id)
    login_session(request, user)
    flash(request, "success", f"Welcome, {user['display_name']}!")
    return RedirectResponse("/diylifestyle/index", status_code=303)


@router.post("/login")
async def login(request: Request, username: str = Form(...), password: str = Form(...)):
    db = await get_db()
    record = await user_queries.get_user_by_username(db, username.strip())
    if not record or not verify_password(password, record.get("password_hash")):
        logger.info("Failed password login for %s", username)
        flash(request, "error", "Wrong username or password.")
        return RedirectResponse("/diylifestyle/login", status_code=303)

    user = await user_queries.get_user(db, record["id"])
    login_session(request, user)
    logger.info("User %s signed in with a password", user["id"])
    flash(request, "success", f"Welcome back, {user['display_name'] or user['username']}!")
    return RedirectResponse("/diylifestyle/index", status_code=303)


@router.get("")
async def list_users(request: Request, user: dict = Depends(require_user)):
    db = await get_db()
    users = await user_queries.list_users(db)
    return render(request, "users/index.html", {"users": users})


@router.get("/{user_id}")
async def show_user(user_id: str, request: Request, user: dict = Depends(require_user)):
    db = await get_db()
    profile = await user_queries.get_user(db, user_id)
    if not profile:
        raise HTTPException(status_code=404)
    return render(request, "users/show.html", {"profile": profile})


@router.delete("/{user_id}")
async def delete_user(user_id: str, request: Request, user: dict = Depends(require_user)):
    if user_id != user["id"]:
        raise HTTPException(status_code=403, detail="You can only delete your own account")
    db = await get_db()
    await user_queries.delete_user(db, user_id)
    logout_session(request)
    logger.info("User %s deleted their account", user_id)
    flash(request, "success", "Your account has been deleted.")
    return RedirectResponse("/", status_code=303)
