"""Shared test fixtures for DIY Lifestyle."""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from diylifestyle.auth.sessions import encode_session
from diylifestyle.config import settings
from diylifestyle.models.session import SessionClaims


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

_migrations_dir = Path(__file__).resolve().parent.parent / "diylifestyle" / "db" / "migrations"
MIGRATION_SQL = "\n".join(
    f.read_text() for f in sorted(_migrations_dir.glob("*.sql"))
)

# Stable IDs for seed data
USER_ID = "user-test-001"
GOOGLE_ID = "g-seed-001"
LOCAL_USER_ID = "user-test-002"
LOCAL_USERNAME = "maker"
LOCAL_PASSWORD = "correct horse battery"
LOCAL_PASSWORD_HASH = bcrypt.hashpw(LOCAL_PASSWORD.encode(), bcrypt.gensalt()).decode()
POST_ID = "post-test-001"


@pytest_asyncio.fixture
async def db():
    """In-memory SQLite database with schema + seed data."""
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA foreign_keys=ON")
    await conn.executescript(MIGRATION_SQL)
    await conn.commit()

    # Seed data
    await conn.execute(
        "INSERT INTO users (id, google_id, display_name, email) VALUES (?, ?, ?, ?)",
        (USER_ID, GOOGLE_ID, "Test User", "test@example.com"),
    )
    await conn.execute(
        "INSERT INTO users (id, username, password_hash, display_name) VALUES (?, ?, ?, ?)",
        (LOCAL_USER_ID, LOCAL_USERNAME, LOCAL_PASSWORD_HASH, "Local Maker"),
    )
    await conn.execute(
        "INSERT INTO posts (id, title, img, body, author_id) VALUES (?, ?, ?, ?, ?)",
        (POST_ID, "Birdhouse from scrap wood", "https://example.com/bird.jpg",
         "Cut, nail, paint.", USER_ID),
    )
    await conn.commit()
    yield conn
    await conn.close()


# ---------------------------------------------------------------------------
# App / client fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app(db):
    """FastAPI app with test DB injected."""
    # Patch database module to return our test DB
    from diylifestyle.db import database as db_module
    original_db = db_module._db
    db_module._db = db

    from diylifestyle.main import app as fastapi_app

    yield fastapi_app

    db_module._db = original_db


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client for testing (anonymous)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def session_cookie(user_id: str | None = USER_ID, username: str | None = "Test User") -> dict:
    """Cookie dict carrying a freshly signed session for ``user_id``."""
    value = encode_session(SessionClaims(user_id=user_id, username=username))
    return {settings.session_cookie_name: value}


@pytest_asyncio.fixture
async def auth_client(app):
    """Async HTTP client with a valid session cookie for the seeded Google user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies=session_cookie(),
    ) as ac:
        yield ac


@pytest.fixture
def google_profile():
    from diylifestyle.models.user import GoogleProfile

    return GoogleProfile(sub="g-123", name="Gina Glue", email="gina@example.com")
