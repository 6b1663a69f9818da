from __future__ import annotations

from pydantic import BaseModel


class User(BaseModel):
    id: str
    google_id: str | None = None
    username: str | None = None
    display_name: str | None = None
    email: str | None = None
    created_at: str | None = None


class GoogleProfile(BaseModel):
    """Subset of Google's userinfo response used to identify a person."""

    sub: str
    name: str | None = None
    email: str | None = None
    picture: str | None = None
