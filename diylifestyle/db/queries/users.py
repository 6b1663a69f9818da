from __future__ import annotations

import logging
import uuid

import aiosqlite

from diylifestyle.exceptions import DuplicateUser, StoreError

logger = logging.getLogger(__name__)

_PUBLIC_COLUMNS = "id, google_id, username, display_name, email, created_at"


async def get_user(db: aiosqlite.Connection, user_id: str) -> dict | None:
    try:
        async with db.execute(
            f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE id = ?", (user_id,)
        ) as cursor:
            row = await cursor.fetchone()
            return dict(row) if row else None
    except aiosqlite.Error as e:
        logger.error("User lookup failed: %s", e)
        raise StoreError(f"User lookup failed: {e}") from e


async def get_user_by_google_id(db: aiosqlite.Connection, google_id: str) -> dict | None:
    try:
        async with db.execute(
            f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE google_id = ?", (google_id,)
        ) as cursor:
            row = await cursor.fetchone()
            return dict(row) if row else None
    except aiosqlite.Error as e:
        logger.error("User lookup by google_id failed: %s", e)
        raise StoreError(f"User lookup failed: {e}") from e


async def get_user_by_username(db: aiosqlite.Connection, username: str) -> dict | None:
    """Return the full row, password hash included, for credential checks."""
    try:
        async with db.execute(
            "SELECT * FROM users WHERE username = ?", (username,)
        ) as cursor:
            row = await cursor.fetchone()
            return dict(row) if row else None
    except aiosqlite.Error as e:
        logger.error("User lookup by username failed: %s", e)
        raise StoreError(f"User lookup failed: {e}") from e


async def list_users(db: aiosqlite.Connection) -> list[dict]:
    try:
        async with db.execute(
            f"SELECT {_PUBLIC_COLUMNS} FROM users ORDER BY created_at, id"
        ) as cursor:
            rows = await cursor.fetchall()
            return [dict(r) for r in rows]
    except aiosqlite.Error as e:
        logger.error("User listing failed: %s", e)
        raise StoreError(f"User listing failed: {e}") from e


async def find_or_create_google_user(
    db: aiosqlite.Connection,
    google_id: str,
    display_name: str | None = None,
    email: str | None = None,
) -> dict:
    """Return the user for ``google_id``, creating it on first sight.

    A single conditional insert keyed by the unique google_id column; the
    existing row wins on conflict and is never updated.
    """
    try:
        cursor = await db.execute(
            """INSERT INTO users (id, google_id, display_name, email)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(google_id) DO NOTHING""",
            (str(uuid.uuid4()), google_id, display_name, email),
        )
        created = cursor.rowcount > 0
        await db.commit()
    except aiosqlite.Error as e:
        logger.error("Creating user for google_id %s failed: %s", google_id, e)
        raise StoreError(f"User create failed: {e}") from e

    user = await get_user_by_google_id(db, google_id)
    if user is None:
        raise StoreError(f"User for google_id {google_id} vanished after insert")
    if created:
        logger.info("Created user %s for google_id %s", user["id"], google_id)
    return user


async def create_local_user(
    db: aiosqlite.Connection,
    username: str,
    password_hash: str,
    display_name: str | None = None,
) -> str:
    user_id = str(uuid.uuid4())
    try:
        await db.execute(
            """INSERT INTO users (id, username, password_hash, display_name)
               VALUES (?, ?, ?, ?)""",
            (user_id, username, password_hash, display_name or username),
        )
        await db.commit()
    except aiosqlite.IntegrityError as e:
        await db.rollback()
        raise DuplicateUser(username) from e
    except aiosqlite.Error as e:
        logger.error("Creating local user %s failed: %s", username, e)
        raise StoreError(f"User create failed: {e}") from e
    logger.info("Created local user %s (%s)", user_id, username)
    return user_id


async def delete_user(db: aiosqlite.Connection, user_id: str) -> bool:
    try:
        result = await db.execute("DELETE FROM users WHERE id = ?", (user_id,))
        await db.commit()
    except aiosqlite.Error as e:
        logger.error("Deleting user %s failed: %s", user_id, e)
        raise StoreError(f"User delete failed: {e}") from e
    return result.rowcount > 0
