from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from adapters.base import NotFound, StoreError, User, UserStore, parse_int_id
from utils.config import load_environments

logger = logging.getLogger(__name__)

T = TypeVar("T")

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    phone TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    # CURRENT_TIMESTAMP is UTC, formatted "YYYY-MM-DD HH:MM:SS"
    if raw is None:
        return None
    if isinstance(raw, datetime):
        value = raw
    else:
        value = datetime.fromisoformat(str(raw))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


class SQLiteUserStore(UserStore):
    """Embedded single-file store.

    sqlite3 calls block, so each one runs on the default worker thread pool
    while a lock keeps the shared connection to one statement at a time.
    """

    engine = "sqlite"
    label = "SQLite"

    def __init__(self, source_config: Optional[Dict[str, Any]] = None):
        super().__init__(source_config)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def _db_path(self) -> str:
        load_environments()
        raw = self.source_config.get("db_path") or os.getenv("SQLITE_DB_PATH") or "database.sqlite"
        raw = str(raw)
        if raw != ":memory:":
            Path(raw).parent.mkdir(parents=True, exist_ok=True)
        return raw

    def _open(self) -> sqlite3.Connection:
        db_path = self._db_path()
        conn = sqlite3.connect(db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            if db_path != ":memory:":
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute(CREATE_USERS_TABLE)
            conn.commit()
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    async def init(self) -> bool:
        if self._ready:
            return True
        try:
            self._conn = await asyncio.to_thread(self._open)
        except (sqlite3.Error, OSError) as exc:
            logger.error("SQLite connection failed: %s", exc)
            self._conn = None
            self._ready = False
            return False
        self._ready = True
        logger.info("SQLite connected and users table ready (%s)", self._db_path())
        return True

    async def close(self) -> None:
        conn, self._conn = self._conn, None
        self._ready = False
        if conn is not None:
            with self._lock:
                conn.close()
            logger.info("SQLite connection closed")

    def _locked(self, func: Callable[[sqlite3.Connection], T]) -> T:
        with self._lock:
            return func(self._conn)

    async def _call(self, func: Callable[[sqlite3.Connection], T]) -> T:
        self._require_ready()
        try:
            return await asyncio.to_thread(self._locked, func)
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    async def create(self, fields: Dict[str, str]) -> User:
        def run(conn: sqlite3.Connection) -> sqlite3.Row:
            cur = conn.execute(
                "INSERT INTO users (name, email, phone) VALUES (?, ?, ?)",
                (fields["name"], fields["email"], fields["phone"]),
            )
            conn.commit()
            return conn.execute("SELECT * FROM users WHERE id = ?", (cur.lastrowid,)).fetchone()

        return _row_to_user(await self._call(run))

    async def list_all(self) -> List[User]:
        def run(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            return conn.execute("SELECT * FROM users ORDER BY created_at DESC, id DESC").fetchall()

        return [_row_to_user(row) for row in await self._call(run)]

    async def get_by_id(self, user_id: str) -> User:
        self._require_ready()
        row_id = parse_int_id(user_id)

        def run(conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
            return conn.execute("SELECT * FROM users WHERE id = ?", (row_id,)).fetchone()

        row = await self._call(run)
        if row is None:
            raise NotFound("User not found")
        return _row_to_user(row)

    async def update(self, user_id: str, fields: Dict[str, str]) -> User:
        self._require_ready()
        row_id = parse_int_id(user_id)

        def run(conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
            cur = conn.execute(
                "UPDATE users SET name = ?, email = ?, phone = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (fields["name"], fields["email"], fields["phone"], row_id),
            )
            conn.commit()
            if cur.rowcount == 0:
                return None
            return conn.execute("SELECT * FROM users WHERE id = ?", (row_id,)).fetchone()

        row = await self._call(run)
        if row is None:
            raise NotFound("User not found")
        return _row_to_user(row)

    async def delete_by_id(self, user_id: str) -> None:
        self._require_ready()
        row_id = parse_int_id(user_id)

        def run(conn: sqlite3.Connection) -> int:
            cur = conn.execute("DELETE FROM users WHERE id = ?", (row_id,))
            conn.commit()
            return cur.rowcount

        if await self._call(run) == 0:
            raise NotFound("User not found")
