"""Pending Google logins: issue on redirect, consume once on callback."""

from __future__ import annotations

import time

import pytest

from diylifestyle.auth.state_store import MemoryStateStore, StateStore
from diylifestyle.config import settings


def test_memory_store_satisfies_protocol():
    assert isinstance(MemoryStateStore(), StateStore)


@pytest.mark.asyncio
async def test_issued_states_are_unique_and_unguessable():
    store = MemoryStateStore()
    first, second = await store.issue(), await store.issue()
    assert first != second
    assert len(first) >= 32
    assert len(store) == 2


@pytest.mark.asyncio
async def test_state_is_accepted_once():
    store = MemoryStateStore()
    state = await store.issue()
    assert await store.consume(state) is True
    assert await store.consume(state) is False


@pytest.mark.asyncio
async def test_unknown_state_is_rejected():
    assert await MemoryStateStore().consume("forged") is False


@pytest.mark.asyncio
async def test_state_expires():
    store = MemoryStateStore()
    state = await store.issue(ttl_seconds=0)
    time.sleep(0.01)
    assert await store.consume(state) is False


@pytest.mark.asyncio
async def test_default_lifetime_comes_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "oauth_state_ttl_seconds", 0)
    store = MemoryStateStore()
    state = await store.issue()
    time.sleep(0.01)
    assert await store.consume(state) is False

    monkeypatch.setattr(settings, "oauth_state_ttl_seconds", 600)
    assert await store.consume(await store.issue()) is True


@pytest.mark.asyncio
async def test_issuing_drops_abandoned_logins():
    store = MemoryStateStore()
    await store.issue(ttl_seconds=0)
    time.sleep(0.01)
    fresh = await store.issue()
    assert len(store) == 1
    assert await store.consume(fresh) is True
