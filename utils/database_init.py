import os
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS USERS (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        hashed_password TEXT NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 1,
        created_at INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ALBUM (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        owner_id INTEGER NOT NULL REFERENCES USERS(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT,
        color TEXT,
        created_at INTEGER NOT NULL,
        updated_at INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS COLLECTION (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        color TEXT,
        created_at INTEGER NOT NULL,
        updated_at INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS IMAGE (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        owner_id INTEGER NOT NULL REFERENCES USERS(id) ON DELETE CASCADE,
        album_id INTEGER REFERENCES ALBUM(id) ON DELETE SET NULL,
        filename TEXT NOT NULL,
        title TEXT,
        description TEXT,
        mime_type TEXT NOT NULL,
        stored_filename TEXT,
        blob_name TEXT,
        blob_url TEXT,
        shot_date INTEGER NOT NULL,
        created_at INTEGER NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS IDX_IMAGE_OWNER ON IMAGE(owner_id)",
    "CREATE INDEX IF NOT EXISTS IDX_IMAGE_ALBUM ON IMAGE(album_id)",
)

_DATABASE_FILENAME = "images.db"


def _truthy(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes")


def _resolve_database_dir() -> Path:
    """Return DATABASE_DIR as a directory, creating it when absent."""
    raw = (os.getenv("DATABASE_DIR") or "").strip()
    if not raw:
        raise RuntimeError("DATABASE_DIR is not set; point it at a writable directory for the image database")

    path = Path(raw).expanduser()
    if path.is_file():
        raise RuntimeError(f"DATABASE_DIR must be a directory, got file {path}")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Cannot create database directory {path}") from exc
    return path


class AsyncDatabaseInitializer:
    """
    Own the SQLite file that stores users, albums, collections and images.

    The file lives at `<DATABASE_DIR>/images.db`. The schema is applied once
    per instance, lazily, on the first `connection()` or `ensure_database()`.
    Data survives restarts unless `reset` is true, or DATABASE_RESET_ON_STARTUP
    is set when `reset` is left as None, in which case the file is removed
    before the schema is applied.
    """

    def __init__(self, reset: Optional[bool] = None) -> None:
        self.db_dir = _resolve_database_dir()
        self.db_path = self.db_dir / _DATABASE_FILENAME
        self.reset = _truthy(os.getenv("DATABASE_RESET_ON_STARTUP")) if reset is None else reset
        self._initialized = False

    async def ensure_database(self) -> None:
        """Apply the schema, dropping the old file first when resetting."""
        if self._initialized:
            return

        if self.reset:
            try:
                self.db_path.unlink(missing_ok=True)
            except OSError as exc:
                raise RuntimeError(f"Cannot remove database file {self.db_path}") from exc

        attempts = 3
        for attempt in range(1, attempts + 1):
            try:
                async with aiosqlite.connect(self.db_path) as conn:
                    for statement in _SCHEMA:
                        await conn.execute(statement)
                    await conn.commit()
                break
            except FileNotFoundError:
                # The directory can briefly vanish on networked volumes.
                if attempt == attempts:
                    raise
                await asyncio.sleep(0.1 * attempt)

        self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection with foreign keys on and `aiosqlite.Row` rows."""
        await self.ensure_database()
        conn = await aiosqlite.connect(self.db_path)
        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute("PRAGMA foreign_keys=ON;")
            yield conn
        finally:
            await conn.close()
