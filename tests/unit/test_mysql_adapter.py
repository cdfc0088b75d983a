import asyncio
from datetime import datetime

import mysql.connector
import pytest
from mysql.connector.constants import ClientFlag

from adapters.base import BackendUnavailable, NotFound, StoreError
from adapters.mysql import MySQLUserStore

ROW = {
    "id": 7,
    "name": "Dave",
    "email": "dave@x.com",
    "phone": "555",
    "created_at": datetime(2026, 1, 2, 3, 4, 5),
    "updated_at": datetime(2026, 1, 2, 3, 4, 5),
}


class FakeCursor:
    def __init__(self, script):
        self.script = script
        self.executed = []
        self.rowcount = 0
        self.lastrowid = None
        self._result = None

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        outcome = self.script(sql, params)
        if isinstance(outcome, Exception):
            raise outcome
        self.rowcount = outcome.get("rowcount", 0)
        self.lastrowid = outcome.get("lastrowid")
        self._result = outcome.get("rows", [])

    def fetchone(self):
        return self._result[0] if self._result else None

    def fetchall(self):
        return list(self._result)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, pool):
        self.pool = pool
        self.commits = 0

    def cursor(self, dictionary=False):
        cursor = FakeCursor(self.pool.script)
        self.pool.cursors.append(cursor)
        return cursor

    def commit(self):
        self.commits += 1

    def close(self):
        self.pool.returned += 1


class FakePool:
    def __init__(self, script=None, **kwargs):
        self.kwargs = kwargs
        self.script = script or (lambda sql, params: {})
        self.cursors = []
        self.returned = 0
        self.idle = 2

    def get_connection(self):
        return FakeConnection(self)

    def _remove_connections(self):
        closed, self.idle = self.idle, 0
        return closed

    def statements(self):
        return [sql for cursor in self.cursors for sql, _ in cursor.executed]


def _ready_store(monkeypatch, script):
    pool = FakePool(script)
    monkeypatch.setattr(MySQLUserStore, "_create_pool", lambda self: pool)
    store = MySQLUserStore(source_config={"pool_size": 2})
    assert asyncio.run(store.init()) is True
    return store, pool


def test_mysql_pool_is_bounded_and_counts_matched_rows(monkeypatch):
    captured = {}

    def fake_pool(**kwargs):
        captured.update(kwargs)
        return FakePool(**kwargs)

    monkeypatch.setattr("adapters.mysql.pooling.MySQLConnectionPool", fake_pool)
    store = MySQLUserStore(
        source_config={"host": "db", "port": 3307, "user": "app", "password": "secret", "dbname": "crud"}
    )

    assert asyncio.run(store.init()) is True
    assert captured["pool_size"] == 10
    assert captured["client_flags"] == [ClientFlag.FOUND_ROWS]
    assert (captured["host"], captured["port"], captured["user"], captured["database"]) == ("db", 3307, "app", "crud")


def test_mysql_init_creates_users_table(monkeypatch):
    pool = FakePool()
    monkeypatch.setattr("adapters.mysql.pooling.MySQLConnectionPool", lambda **kwargs: pool)
    store = MySQLUserStore()

    assert asyncio.run(store.init()) is True
    assert store.is_ready() is True
    assert pool.statements()[0].startswith("CREATE TABLE IF NOT EXISTS users (")
    assert "ON UPDATE CURRENT_TIMESTAMP" in pool.statements()[0]
    assert pool.returned == 1


def test_mysql_init_failure_leaves_store_not_ready(monkeypatch):
    def refuse(**kwargs):
        raise mysql.connector.errors.InterfaceError("2003: Can't connect to MySQL server on 'localhost:3306'")

    monkeypatch.setattr("adapters.mysql.pooling.MySQLConnectionPool", refuse)
    store = MySQLUserStore()

    assert asyncio.run(store.init()) is False
    assert store.is_ready() is False
    with pytest.raises(BackendUnavailable, match="MySQL is not available"):
        asyncio.run(store.list_all())


def test_mysql_create_reads_back_inserted_row(monkeypatch):
    def script(sql, params):
        if sql.startswith("INSERT"):
            return {"rowcount": 1, "lastrowid": 7}
        return {"rows": [ROW]}

    store, pool = _ready_store(monkeypatch, script)
    user = asyncio.run(store.create({"name": "Dave", "email": "dave@x.com", "phone": "555"}))

    assert user.id == 7
    assert user.name == "Dave"
    assert pool.statements() == [
        "INSERT INTO users (name, email, phone) VALUES (%s, %s, %s)",
        "SELECT * FROM users WHERE id = %s",
    ]
    assert pool.returned == 1


def test_mysql_list_all_orders_newest_first(monkeypatch):
    store, pool = _ready_store(monkeypatch, lambda sql, params: {"rows": []})

    assert asyncio.run(store.list_all()) == []
    assert pool.statements() == ["SELECT * FROM users ORDER BY created_at DESC, id DESC"]


def test_mysql_update_and_delete_without_match_are_not_found(monkeypatch):
    store, pool = _ready_store(monkeypatch, lambda sql, params: {"rowcount": 0})

    with pytest.raises(NotFound, match="User not found"):
        asyncio.run(store.update("42", {"name": "a", "email": "b", "phone": "c"}))
    with pytest.raises(NotFound):
        asyncio.run(store.delete_by_id("42"))
    with pytest.raises(NotFound):
        asyncio.run(store.get_by_id("42"))
    # malformed ids never reach the pool
    before = len(pool.statements())
    with pytest.raises(NotFound):
        asyncio.run(store.get_by_id("abc"))
    assert len(pool.statements()) == before


def test_mysql_update_refreshes_updated_at(monkeypatch):
    def script(sql, params):
        if sql.startswith("UPDATE"):
            return {"rowcount": 1}
        return {"rows": [dict(ROW, name="David")]}

    store, pool = _ready_store(monkeypatch, script)
    user = asyncio.run(store.update("7", {"name": "David", "email": "dave@x.com", "phone": "555"}))

    assert user.name == "David"
    update_sql, update_params = pool.cursors[0].executed[0]
    assert "updated_at = CURRENT_TIMESTAMP" in update_sql
    assert update_params == ("David", "dave@x.com", "555", 7)


def test_mysql_driver_error_becomes_store_error(monkeypatch):
    def script(sql, params):
        return mysql.connector.errors.OperationalError("2013: Lost connection to MySQL server during query")

    store, pool = _ready_store(monkeypatch, script)

    with pytest.raises(StoreError, match="Lost connection"):
        asyncio.run(store.list_all())
    assert pool.returned == 1


def test_mysql_phone_too_long_for_column_is_store_error(monkeypatch):
    def script(sql, params):
        if sql.startswith("INSERT"):
            return mysql.connector.errors.DataError("1406 (22001): Data too long for column 'phone' at row 1")
        return {}

    store, _ = _ready_store(monkeypatch, script)

    with pytest.raises(StoreError, match="Data too long"):
        asyncio.run(store.create({"name": "Dave", "email": "dave@x.com", "phone": "5" * 40}))


def test_mysql_close_disconnects_idle_connections(monkeypatch):
    store, pool = _ready_store(monkeypatch, lambda sql, params: {})

    asyncio.run(store.close())

    assert pool.idle == 0
    assert store.is_ready() is False
    with pytest.raises(BackendUnavailable):
        asyncio.run(store.list_all())
    asyncio.run(store.close())
