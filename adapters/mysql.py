from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Callable, Dict, List, Optional, TypeVar

import mysql.connector
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

from adapters.base import NotFound, StoreError, User, UserStore, parse_int_id
from utils.config import load_environments

logger = logging.getLogger(__name__)

T = TypeVar("T")

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id INT AUTO_INCREMENT PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    email VARCHAR(255) NOT NULL,
    phone VARCHAR(20) NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
)
"""


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserStore(UserStore):
    engine = "mysql"
    label = "MySQL"

    def __init__(self, source_config: Optional[Dict[str, Any]] = None):
        super().__init__(source_config)
        self._pool = None
        self._slots: Optional[asyncio.Semaphore] = None

    def _db_params(self) -> Dict[str, Any]:
        load_environments()
        host = self.source_config.get("host") or os.getenv("MYSQL_HOST") or "localhost"
        dbname = self.source_config.get("dbname") or os.getenv("MYSQL_DATABASE") or "multi_db_crud"
        user = self.source_config.get("user") or os.getenv("MYSQL_USER") or "root"
        password = self.source_config.get("password")
        if password is None:
            password = os.getenv("MYSQL_PASSWORD", "")
        port_raw = self.source_config.get("port") or os.getenv("MYSQL_PORT", "3306")
        return {
            "host": host,
            "port": int(port_raw),
            "database": dbname,
            "user": user,
            "password": password,
        }

    def _pool_size(self) -> int:
        load_environments()
        size = int(self.source_config.get("pool_size") or os.getenv("MYSQL_POOL_SIZE", "10"))
        if size <= 0:
            raise ValueError("MYSQL_POOL_SIZE must be positive")
        return size

    def _create_pool(self):
        pool = pooling.MySQLConnectionPool(
            pool_name="users_pool",
            pool_size=self._pool_size(),
            # rowcount reports matched rows, so re-sending identical values is not a miss
            client_flags=[ClientFlag.FOUND_ROWS],
            **self._db_params(),
        )
        conn = pool.get_connection()
        try:
            cur = conn.cursor()
            cur.execute(CREATE_USERS_TABLE)
            conn.commit()
            cur.close()
        finally:
            conn.close()
        return pool

    async def init(self) -> bool:
        if self._ready:
            return True
        try:
            self._pool = await asyncio.to_thread(self._create_pool)
        except (mysql.connector.Error, ValueError) as exc:
            logger.error("MySQL connection failed: %s", exc)
            self._pool = None
            self._ready = False
            return False
        self._slots = asyncio.Semaphore(self._pool_size())
        self._ready = True
        logger.info("MySQL connected and users table ready (pool of %d)", self._pool_size())
        return True

    async def close(self) -> None:
        pool, self._pool = self._pool, None
        self._ready = False
        if pool is None:
            return
        try:
            released = await asyncio.to_thread(pool._remove_connections)
        except mysql.connector.Error as exc:
            logger.error("Error closing MySQL pool: %s", exc)
            return
        logger.info("MySQL pool released (%d idle connections closed)", released)

    def _with_connection(self, func: Callable[[Any, Any], T]) -> T:
        conn = self._pool.get_connection()
        try:
            cur = conn.cursor(dictionary=True)
            try:
                return func(conn, cur)
            finally:
                cur.close()
        finally:
            conn.close()

    async def _call(self, func: Callable[[Any, Any], T]) -> T:
        self._require_ready()
        try:
            async with self._slots:
                return await asyncio.to_thread(self._with_connection, func)
        except mysql.connector.Error as exc:
            raise StoreError(str(exc)) from exc

    async def create(self, fields: Dict[str, str]) -> User:
        def run(conn, cur) -> Dict[str, Any]:
            cur.execute(
                "INSERT INTO users (name, email, phone) VALUES (%s, %s, %s)",
                (fields["name"], fields["email"], fields["phone"]),
            )
            new_id = cur.lastrowid
            conn.commit()
            cur.execute("SELECT * FROM users WHERE id = %s", (new_id,))
            return cur.fetchone()

        return _row_to_user(await self._call(run))

    async def list_all(self) -> List[User]:
        def run(conn, cur) -> List[Dict[str, Any]]:
            cur.execute("SELECT * FROM users ORDER BY created_at DESC, id DESC")
            return cur.fetchall()

        return [_row_to_user(row) for row in await self._call(run)]

    async def get_by_id(self, user_id: str) -> User:
        self._require_ready()
        row_id = parse_int_id(user_id)

        def run(conn, cur) -> Optional[Dict[str, Any]]:
            cur.execute("SELECT * FROM users WHERE id = %s", (row_id,))
            return cur.fetchone()

        row = await self._call(run)
        if row is None:
            raise NotFound("User not found")
        return _row_to_user(row)

    async def update(self, user_id: str, fields: Dict[str, str]) -> User:
        self._require_ready()
        row_id = parse_int_id(user_id)

        def run(conn, cur) -> Optional[Dict[str, Any]]:
            cur.execute(
                "UPDATE users SET name = %s, email = %s, phone = %s, updated_at = CURRENT_TIMESTAMP WHERE id = %s",
                (fields["name"], fields["email"], fields["phone"], row_id),
            )
            matched = cur.rowcount
            conn.commit()
            if matched == 0:
                return None
            cur.execute("SELECT * FROM users WHERE id = %s", (row_id,))
            return cur.fetchone()

        row = await self._call(run)
        if row is None:
            raise NotFound("User not found")
        return _row_to_user(row)

    async def delete_by_id(self, user_id: str) -> None:
        self._require_ready()
        row_id = parse_int_id(user_id)

        def run(conn, cur) -> int:
            cur.execute("DELETE FROM users WHERE id = %s", (row_id,))
            deleted = cur.rowcount
            conn.commit()
            return deleted

        if await self._call(run) == 0:
            raise NotFound("User not found")
