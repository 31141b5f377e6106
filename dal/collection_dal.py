"""Async data access for the COLLECTION table."""

from __future__ import annotations

import time
from typing import List, Optional

import aiosqlite

from models.group_records import CollectionRecord
from utils.database_init import AsyncDatabaseInitializer


class CollectionDAL:
    _COLUMN_LIST = "id, name, description, color, created_at, updated_at"

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create_collection(self, record: CollectionRecord) -> int:
        now = int(time.time())
        async with self._db.connection() as conn:
            cur = await conn.execute(
                "INSERT INTO COLLECTION (name, description, color, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (record.name, record.description, record.color, now, now),
            )
            await conn.commit()
            return cur.lastrowid

    async def get_collection(self, collection_id: int) -> Optional[CollectionRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM COLLECTION WHERE id = ?",
                (collection_id,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def list_collections(self) -> List[CollectionRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM COLLECTION ORDER BY created_at DESC, id DESC"
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def update_collection(
        self,
        collection_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Optional[CollectionRecord]:
        updates = {"name": name, "description": description, "color": color}
        fields = [f"{col} = ?" for col, val in updates.items() if val is not None]
        params = [val for val in updates.values() if val is not None]

        fields.append("updated_at = ?")
        params.extend([int(time.time()), collection_id])

        async with self._db.connection() as conn:
            await conn.execute(f"UPDATE COLLECTION SET {', '.join(fields)} WHERE id = ?", tuple(params))
            await conn.commit()
        return await self.get_collection(collection_id)

    async def delete_collection(self, collection_id: int) -> bool:
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM COLLECTION WHERE id = ?", (collection_id,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> CollectionRecord:
        return CollectionRecord(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            color=row["color"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
