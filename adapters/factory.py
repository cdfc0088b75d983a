from __future__ import annotations

from typing import Any, Dict, List, Optional

from adapters.base import AdapterError, UserStore
from adapters.mongo import MongoUserStore
from adapters.mysql import MySQLUserStore
from adapters.sqlite import SQLiteUserStore
from utils.config import Settings


def get_store(engine: str, source_config: Optional[Dict[str, Any]] = None) -> UserStore:
    engine = (engine or "").strip().lower()
    if engine in {"mongo", "mongodb"}:
        return MongoUserStore(source_config=source_config)
    if engine == "mysql":
        return MySQLUserStore(source_config=source_config)
    if engine == "sqlite":
        return SQLiteUserStore(source_config=source_config)
    raise AdapterError(f"Unsupported engine: {engine}")


def build_stores(settings: Settings) -> List[UserStore]:
    return [
        get_store("mongo", settings.mongo_config()),
        get_store("mysql", settings.mysql_config()),
        get_store("sqlite", settings.sqlite_config()),
    ]
