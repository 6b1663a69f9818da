"""Jinja2 page rendering shared by the HTML routes."""

from __future__ import annotations

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from diylifestyle.auth.sessions import get_session, pop_flashes

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    """Render a page with the layout's common values.

    Every page gets the current user, the session's display username and
    the queued flash messages (which are consumed here).
    """
    ctx = {
        "user": getattr(request.state, "user", None),
        "username": get_session(request).username,
        "flashes": pop_flashes(request),
    }
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
