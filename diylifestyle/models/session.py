from __future__ import annotations

from pydantic import BaseModel, Field


class Flash(BaseModel):
    category: str
    message: str


class SessionClaims(BaseModel):
    """Everything the signed session cookie carries.

    Only the user id is stored as the identity claim; the user row is
    resolved from the store on every request.
    """

    user_id: str | None = None
    username: str | None = None
    flashes: list[Flash] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.user_id is None and self.username is None and not self.flashes
