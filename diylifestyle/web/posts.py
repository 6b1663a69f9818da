"""Post pages: browse, create, edit and delete DIY posts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from diylifestyle.auth.gate import require_user
from diylifestyle.auth.sessions import flash
from diylifestyle.db.database import get_db
from diylifestyle.db.queries import posts as post_queries
from diylifestyle.web.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diylifestyle", tags=["posts"])


async def _get_post_or_404(post_id: str) -> dict:
    db = await get_db()
    post = await post_queries.get_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404)
    return post


@router.get("/index")
async def index(request: Request):
    db = await get_db()
    posts = await post_queries.list_posts(db)
    return render(request, "posts/index.html", {"posts": posts})


@router.get("/login")
async def login_page(request: Request):
    return render(request, "posts/login.html")


@router.get("/new")
async def new_post(request: Request, user: dict = Depends(require_user)):
    return render(request, "posts/new.html")


@router.post("")
async def create_post(
    request: Request,
    title: str = Form(...),
    body: str = Form(""),
    img: str | None = Form(None),
    user: dict = Depends(require_user),
):
    db = await get_db()
    post_id = await post_queries.create_post(db, title=title, body=body, img=img or None, author_id=user["id"])
    logger.info("User %s created post %s", user["id"], post_id)
    flash(request, "success", "Post created.")
    return RedirectResponse("/diylifestyle/index", status_code=303)


@router.get("/{post_id}")
async def show_post(post_id: str, request: Request):
    post = await _get_post_or_404(post_id)
    return render(request, "posts/show.html", {"post": post})


@router.get("/{post_id}/edit")
async def edit_post(post_id: str, request: Request, user: dict = Depends(require_user)):
    post = await _get_post_or_404(post_id)
    return render(request, "posts/edit.html", {"post": post})


@router.put("/{post_id}")
async def update_post(post_id: str, request: Request, user: dict = Depends(require_user)):
    # Only submitted fields change; an empty body or img clears it
    form = await request.form()
    fields = {name: form[name] for name in ("title", "body", "img") if name in form}
    if not (fields.get("title") or "").strip():
        fields.pop("title", None)
    db = await get_db()
    if not await post_queries.update_post(db, post_id, **fields):
        raise HTTPException(status_code=404)
    logger.info("User %s updated post %s", user["id"], post_id)
    flash(request, "success", "Post updated.")
    return RedirectResponse(f"/diylifestyle/{post_id}", status_code=303)


@router.delete("/{post_id}")
async def delete_post(post_id: str, request: Request, user: dict = Depends(require_user)):
    db = await get_db()
    if not await post_queries.delete_post(db, post_id):
        raise HTTPException(status_code=404)
    logger.info("User %s deleted post %s", user["id"], post_id)
    flash(request, "success", "Post deleted.")
    return RedirectResponse("/diylifestyle/index", status_code=303)
