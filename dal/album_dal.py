"""Async data access for the ALBUM table.

Every query is scoped by owner, so another user's album behaves exactly
like a missing one.
"""

from __future__ import annotations

import time
from typing import List, Optional

import aiosqlite

from models.group_records import AlbumRecord
from utils.database_init import AsyncDatabaseInitializer


class AlbumDAL:
    _COLUMN_LIST = "id, owner_id, name, description, color, created_at, updated_at"

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create_album(self, record: AlbumRecord) -> int:
        now = int(time.time())
        async with self._db.connection() as conn:
            cur = await conn.execute(
                "INSERT INTO ALBUM (owner_id, name, description, color, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (record.owner_id, record.name, record.description, record.color, now, now),
            )
            await conn.commit()
            return cur.lastrowid

    async def get_album(self, album_id: int, owner_id: int) -> Optional[AlbumRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM ALBUM WHERE id = ? AND owner_id = ?",
                (album_id, owner_id),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def list_albums(self, owner_id: int) -> List[AlbumRecord]:
        """Albums owned by `owner_id`, most recently created first."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM ALBUM WHERE owner_id = ? ORDER BY created_at DESC, id DESC",
                (owner_id,),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def update_album(
        self,
        album_id: int,
        owner_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Optional[AlbumRecord]:
        """Update the given fields and return the new row, or None if not found."""
        updates = {"name": name, "description": description, "color": color}
        fields = [f"{col} = ?" for col, val in updates.items() if val is not None]
        params = [val for val in updates.values() if val is not None]

        fields.append("updated_at = ?")
        params.append(int(time.time()))
        params.extend([album_id, owner_id])

        async with self._db.connection() as conn:
            await conn.execute(
                f"UPDATE ALBUM SET {', '.join(fields)} WHERE id = ? AND owner_id = ?",
                tuple(params),
            )
            await conn.commit()
        return await self.get_album(album_id, owner_id)

    async def delete_album(self, album_id: int, owner_id: int) -> bool:
        """Delete an album. Its images are detached, not deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM ALBUM WHERE id = ? AND owner_id = ?", (album_id, owner_id))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> AlbumRecord:
        return AlbumRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            description=row["description"],
            color=row["color"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
