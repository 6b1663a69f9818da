"""Pending Google logins, keyed by the OAuth ``state`` parameter.

A state is issued when the consent redirect goes out and consumed by the
callback; each state is accepted at most once and only within
``settings.oauth_state_ttl_seconds``.
"""

from __future__ import annotations

import secrets
import time
from typing import Protocol, runtime_checkable

from diylifestyle.config import settings


@runtime_checkable
class StateStore(Protocol):
    async def issue(self, ttl_seconds: int | None = None) -> str: ...

    async def consume(self, state: str) -> bool: ...


class MemoryStateStore:
    """Pending logins held in process memory (single worker)."""

    def __init__(self) -> None:
        self._pending: dict[str, float] = {}

    async def issue(self, ttl_seconds: int | None = None) -> str:
        if ttl_seconds is None:
            ttl_seconds = settings.oauth_state_ttl_seconds
        now = time.monotonic()
        self._drop_expired(now)
        state = secrets.token_urlsafe(32)
        self._pending[state] = now + ttl_seconds
        return state

    async def consume(self, state: str) -> bool:
        deadline = self._pending.pop(state, None)
        return deadline is not None and time.monotonic() < deadline

    def __len__(self) -> int:
        return len(self._pending)

    def _drop_expired(self, now: float) -> None:
        self._pending = {s: d for s, d in self._pending.items() if d > now}


state_store: StateStore = MemoryStateStore()
