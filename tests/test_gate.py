"""Tests for the auth gate on protected routes."""

from __future__ import annotations

import pytest

from tests.conftest import POST_ID

GATED = [
    ("GET", "/users"),
    ("GET", "/diylifestyle/new"),
    ("GET", f"/diylifestyle/{POST_ID}/edit"),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", GATED)
async def test_anonymous_gets_fixed_rejection(client, method, path):
    resp = await client.request(method, path)
    assert resp.status_code == 200
    assert resp.text == "You must login!"
    assert resp.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_anonymous_write_is_rejected_before_validation(client):
    resp = await client.post("/diylifestyle", data={})
    assert resp.status_code == 200
    assert resp.text == "You must login!"


@pytest.mark.asyncio
@pytest.mark.parametrize("method,path", GATED)
async def test_authenticated_reaches_handler(auth_client, method, path):
    resp = await auth_client.request(method, path)
    assert resp.status_code == 200
    assert resp.text != "You must login!"
    assert "text/html" in resp.headers["content-type"]


@pytest.mark.asyncio
async def test_identity_attached_to_page(auth_client):
    resp = await auth_client.get("/users")
    assert "Hi, Test User" in resp.text
    assert "Local Maker" in resp.text


@pytest.mark.asyncio
async def test_public_pages_need_no_login(client):
    for path in ("/", "/diylifestyle/index", "/diylifestyle/login", f"/diylifestyle/{POST_ID}"):
        resp = await client.get(path)
        assert resp.status_code == 200, path
        assert resp.text != "You must login!"
