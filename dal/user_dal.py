"""Async data access for the USERS table."""

from __future__ import annotations

import sqlite3
import time
from typing import Optional

import aiosqlite

from models.user_record import UserRecord
from utils.database_init import AsyncDatabaseInitializer


class DuplicateEmailError(ValueError):
    """Raised when a user with the same email already exists."""


class UserDAL:
    _COLUMN_LIST = "id, username, email, hashed_password, is_active, created_at"

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def create_user(self, record: UserRecord) -> int:
        """Insert a user and return its id.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        created_at = record.created_at or int(time.time())
        async with self._db.connection() as conn:
            try:
                cur = await conn.execute(
                    "INSERT INTO USERS (username, email, hashed_password, is_active, created_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (record.username, record.email, record.hashed_password, int(record.is_active), created_at),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError(f"User with email {record.email!r} already exists") from exc
            await conn.commit()
            return cur.lastrowid

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(f"SELECT {self._COLUMN_LIST} FROM USERS WHERE id = ?", (user_id,))
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(f"SELECT {self._COLUMN_LIST} FROM USERS WHERE email = ?", (email,))
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> UserRecord:
        return UserRecord(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            hashed_password=row["hashed_password"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
        )
