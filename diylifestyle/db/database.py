"""The blog's single SQLite connection and its schema migrations."""

import logging
from pathlib import Path

import aiosqlite

from diylifestyle.config import settings

logger = logging.getLogger(__name__)

_db: aiosqlite.Connection | None = None

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


async def get_db() -> aiosqlite.Connection:
    if _db is None:
        raise RuntimeError("Blog store is not open; the app lifespan calls init_db() on startup")
    return _db


async def init_db() -> None:
    """Open the blog store at ``settings.database_path`` and bring its schema up to date."""
    global _db
    store_path = Path(settings.database_path)
    store_path.parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(store_path))
    conn.row_factory = aiosqlite.Row
    try:
        await conn.execute("PRAGMA journal_mode=WAL")
        # posts.author_id relies on ON DELETE SET NULL
        await conn.execute("PRAGMA foreign_keys=ON")
        await run_migrations(conn)
    except aiosqlite.Error:
        await conn.close()
        raise

    _db = conn
    logger.info("Blog store open at %s", store_path)


async def close_db() -> None:
    global _db
    if _db is None:
        return
    conn, _db = _db, None
    await conn.close()
    logger.info("Blog store closed")


def _migration_files() -> list[tuple[int, Path]]:
    """Numbered ``NNN_name.sql`` scripts, oldest first."""
    return sorted((int(path.stem.split("_", 1)[0]), path) for path in MIGRATIONS_DIR.glob("*.sql"))


async def _schema_version(db: aiosqlite.Connection) -> int:
    try:
        async with db.execute("SELECT MAX(version) FROM schema_version") as cursor:
            row = await cursor.fetchone()
    except aiosqlite.OperationalError:
        # Fresh file: schema_version is created by the first script
        return 0
    return row[0] or 0


async def run_migrations(db: aiosqlite.Connection) -> int:
    """Apply every script newer than the stored schema version. Returns the resulting version."""
    version = await _schema_version(db)
    for number, script in _migration_files():
        if number <= version:
            continue
        logger.info("Applying migration %s", script.name)
        await db.executescript(script.read_text())
        await db.commit()
        version = number
    logger.info("Blog schema at version %d", version)
    return version
