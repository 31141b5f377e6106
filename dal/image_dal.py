"""Persistence for image metadata and storage pointers (IMAGE table)."""

from __future__ import annotations

import time
from typing import List, Optional

import aiosqlite

from models.image_record import ImageRecord
from utils.database_init import AsyncDatabaseInitializer


class ImageDAL:
    """Reads and writes IMAGE rows through a shared `AsyncDatabaseInitializer`."""

    _COLUMNS = (
        "id",
        "owner_id",
        "album_id",
        "filename",
        "title",
        "description",
        "mime_type",
        "stored_filename",
        "blob_name",
        "blob_url",
        "shot_date",
        "created_at",
    )
    _COLUMN_LIST, _INSERT_COLUMNS = ", ".join(_COLUMNS), ", ".join(_COLUMNS[1:])
    _PLACEHOLDERS = ", ".join("?" for _ in _COLUMNS[1:])

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create_image(self, record: ImageRecord) -> int:
        """Insert `record` (its `id` is ignored) and return the assigned id.

        `created_at` and `shot_date` default to now when unset.
        """
        now = int(time.time())
        created_at = record.created_at or now
        shot_date = record.shot_date or now

        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"INSERT INTO IMAGE ({self._INSERT_COLUMNS}) VALUES ({self._PLACEHOLDERS})",
                (
                    record.owner_id,
                    record.album_id,
                    record.filename,
                    record.title,
                    record.description,
                    record.mime_type,
                    record.stored_filename,
                    record.blob_name,
                    record.blob_url,
                    shot_date,
                    created_at,
                ),
            )
            await conn.commit()
            return cur.lastrowid

    async def get_image_by_id(self, image_id: int) -> Optional[ImageRecord]:
        """Fetch one image, or None."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM IMAGE WHERE id = ?",
                (image_id,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def list_images_by_owner(self, owner_id: int, limit: int = 100, offset: int = 0) -> List[ImageRecord]:
        """List the images owned by `owner_id`, newest first.

        Args:
            owner_id: Owning user id.
            limit: Maximum number of rows to return.
            offset: Rows to skip.
        """
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM IMAGE WHERE owner_id = ? "
                "ORDER BY id DESC LIMIT ? OFFSET ?",
                (owner_id, limit, offset),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def list_images_by_album(self, album_id: int) -> List[ImageRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM IMAGE WHERE album_id = ? ORDER BY id",
                (album_id,),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def count_images_by_album(self, album_id: int) -> int:
        async with self._db.connection() as conn:
            cur = await conn.execute("SELECT COUNT(*) FROM IMAGE WHERE album_id = ?", (album_id,))
            row = await cur.fetchone()
            return int(row[0]) if row else 0

    async def save_upload(self, record: ImageRecord) -> bool:
        """Persist the upload fields of `record`. Returns True if a row was changed.

        Every pointer column is written, so a local pointer clears the blob
        columns and a remote pointer clears `stored_filename`.
        """
        async with self._db.connection() as conn:
            await conn.execute(
                "UPDATE IMAGE SET filename = ?, mime_type = ?, stored_filename = ?, "
                "blob_name = ?, blob_url = ?, shot_date = ? WHERE id = ?",
                (
                    record.filename,
                    record.mime_type,
                    record.stored_filename,
                    record.blob_name,
                    record.blob_url,
                    record.shot_date,
                    record.id,
                ),
            )
            await conn.commit()
            return await self._changes(conn)

    async def delete_image(self, image_id: int) -> bool:
        """Remove the row. Returns False when it was already gone."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM IMAGE WHERE id = ?", (image_id,))
            await conn.commit()
            return await self._changes(conn)

    @staticmethod
    async def _changes(conn: aiosqlite.Connection) -> bool:
        cur = await conn.execute("SELECT changes()")
        changed = await cur.fetchone()
        return bool(changed and changed[0] > 0)

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> ImageRecord:
        return ImageRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            album_id=row["album_id"],
            filename=row["filename"],
            title=row["title"],
            description=row["description"],
            mime_type=row["mime_type"],
            stored_filename=row["stored_filename"],
            blob_name=row["blob_name"],
            blob_url=row["blob_url"],
            shot_date=row["shot_date"],
            created_at=row["created_at"],
        )
