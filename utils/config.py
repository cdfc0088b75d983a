from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_WEATHER_API_URL = (
    "https://api.open-meteo.com/v1/forecast?latitude=30.04&longitude=72.35&current_weather=true"
)


def load_environments(env_path: str = ".env") -> int:
    env_file = Path(env_path)
    if not env_file.exists():
        return 0

    loaded = 0
    for raw_line in env_file.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        if key and key not in os.environ:
            os.environ[key] = value
            loaded += 1
    return loaded


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Process configuration read from the environment (and `.env`)."""

    port: int = 3000
    log_level: str = "info"
    static_dir: str = "public"

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "multi_db_crud"
    mongo_timeout_ms: int = 5000

    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_user: str = "root"
    mysql_password: str = ""
    mysql_database: str = "multi_db_crud"
    mysql_pool_size: int = 10

    sqlite_db_path: str = "database.sqlite"

    weather_api_url: str = DEFAULT_WEATHER_API_URL
    weather_log_file: str = "weather_log.txt"

    @classmethod
    def from_env(cls, env_path: str = ".env") -> "Settings":
        load_environments(env_path)
        return cls(
            port=_env_int("PORT", 3000),
            log_level=os.getenv("LOG_LEVEL", "info").strip().lower(),
            static_dir=os.getenv("STATIC_DIR", "public"),
            mongo_uri=os.getenv("MONGO_URI") or "mongodb://localhost:27017",
            mongo_db_name=os.getenv("MONGO_DB_NAME") or "multi_db_crud",
            mongo_timeout_ms=_env_int("MONGO_TIMEOUT_MS", 5000),
            mysql_host=os.getenv("MYSQL_HOST") or "localhost",
            mysql_port=_env_int("MYSQL_PORT", 3306),
            mysql_user=os.getenv("MYSQL_USER") or "root",
            mysql_password=os.getenv("MYSQL_PASSWORD", ""),
            mysql_database=os.getenv("MYSQL_DATABASE") or "multi_db_crud",
            mysql_pool_size=_env_int("MYSQL_POOL_SIZE", 10),
            sqlite_db_path=os.getenv("SQLITE_DB_PATH") or "database.sqlite",
            weather_api_url=os.getenv("WEATHER_API_URL") or DEFAULT_WEATHER_API_URL,
            weather_log_file=os.getenv("WEATHER_LOG_FILE") or "weather_log.txt",
        )

    def mongo_config(self) -> dict:
        return {
            "uri": self.mongo_uri,
            "dbname": self.mongo_db_name,
            "timeout_ms": self.mongo_timeout_ms,
        }

    def mysql_config(self) -> dict:
        return {
            "host": self.mysql_host,
            "port": self.mysql_port,
            "user": self.mysql_user,
            "password": self.mysql_password,
            "dbname": self.mysql_database,
            "pool_size": self.mysql_pool_size,
        }

    def sqlite_config(self) -> dict:
        return {"db_path": self.sqlite_db_path}


def get_settings(env_path: str = ".env") -> Settings:
    return Settings.from_env(env_path)
