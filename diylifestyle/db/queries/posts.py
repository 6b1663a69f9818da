from __future__ import annotations

import logging
import uuid

import aiosqlite

from diylifestyle.exceptions import StoreError

logger = logging.getLogger(__name__)


async def list_posts(db: aiosqlite.Connection) -> list[dict]:
    try:
        async with db.execute(
            """SELECT p.*, u.display_name AS author_name FROM posts p
               LEFT JOIN users u ON u.id = p.author_id
               ORDER BY p.created_at DESC, p.id"""
        ) as cursor:
            rows = await cursor.fetchall()
            return [dict(r) for r in rows]
    except aiosqlite.Error as e:
        logger.error("Post listing failed: %s", e)
        raise StoreError(f"Post listing failed: {e}") from e


async def get_post(db: aiosqlite.Connection, post_id: str) -> dict | None:
    try:
        async with db.execute(
            """SELECT p.*, u.display_name AS author_name FROM posts p
               LEFT JOIN users u ON u.id = p.author_id
               WHERE p.id = ?""",
            (post_id,),
        ) as cursor:
            row = await cursor.fetchone()
            return dict(row) if row else None
    except aiosqlite.Error as e:
        logger.error("Post lookup failed: %s", e)
        raise StoreError(f"Post lookup failed: {e}") from e


async def create_post(
    db: aiosqlite.Connection,
    title: str,
    body: str = "",
    img: str | None = None,
    author_id: str | None = None,
) -> str:
    post_id = str(uuid.uuid4())
    try:
        await db.execute(
            "INSERT INTO posts (id, title, img, body, author_id) VALUES (?, ?, ?, ?, ?)",
            (post_id, title, img, body, author_id),
        )
        await db.commit()
    except aiosqlite.Error as e:
        logger.error("Post create failed: %s", e)
        raise StoreError(f"Post create failed: {e}") from e
    return post_id


async def update_post(
    db: aiosqlite.Connection,
    post_id: str,
    title: str | None = None,
    body: str | None = None,
    img: str | None = None,
) -> bool:
    updates = []
    params = []
    if title is not None:
        updates.append("title = ?")
        params.append(title)
    if body is not None:
        updates.append("body = ?")
        params.append(body)
    if img is not None:
        updates.append("img = ?")
        params.append(img or None)
    if not updates:
        return await get_post(db, post_id) is not None

    updates.append("updated_at = datetime('now')")
    params.append(post_id)
    try:
        result = await db.execute(
            f"UPDATE posts SET {', '.join(updates)} WHERE id = ?", params
        )
        await db.commit()
    except aiosqlite.Error as e:
        logger.error("Post update failed: %s", e)
        raise StoreError(f"Post update failed: {e}") from e
    return result.rowcount > 0


async def delete_post(db: aiosqlite.Connection, post_id: str) -> bool:
    try:
        result = await db.execute("DELETE FROM posts WHERE id = ?", (post_id,))
        await db.commit()
    except aiosqlite.Error as e:
        logger.error("Post delete failed: %s", e)
        raise StoreError(f"Post delete failed: {e}") from e
    return result.rowcount > 0


async def replace_all_posts(db: aiosqlite.Connection, posts: list[dict]) -> int:
    """Delete every post and insert ``posts`` in one transaction. Returns count inserted."""
    try:
        await db.execute("DELETE FROM posts")
        await db.executemany(
            "INSERT INTO posts (id, title, img, body) VALUES (?, ?, ?, ?)",
            [(str(uuid.uuid4()), p["title"], p.get("img"), p.get("body", "")) for p in posts],
        )
        await db.commit()
    except aiosqlite.Error as e:
        await db.rollback()
        logger.error("Seeding posts failed: %s", e)
        raise StoreError(f"Seeding posts failed: {e}") from e
    return len(posts)
