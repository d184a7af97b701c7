from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

_BACKENDS = {"memory", "sqlite", "mongo"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'mongo' (default), 'sqlite' or 'memory'
    - MONGODB_URI: document store target. Default 'mongodb://localhost/todoapp'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - STORE_TIMEOUT_MS: how long to wait for the document store to answer
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: level for the todo_backend loggers. Default 'INFO'
    """

    persistence_backend: str = "memory"
    mongodb_uri: str = "mongodb://localhost/todoapp"
    sqlite_db_path: str = "./data/todos.db"
    store_timeout_ms: int = 2000
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "mongo").strip().lower()
    if backend not in _BACKENDS:
        # Unknown backends run without persistence
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        mongodb_uri=_get_env("MONGODB_URI", "mongodb://localhost/todoapp").strip(),
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/todos.db").strip(),
        store_timeout_ms=_parse_int(_get_env("STORE_TIMEOUT_MS", "2000"), 2000),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
