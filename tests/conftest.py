from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

# Importing todo_backend.main builds a module-level app from the environment;
# keep that one off the network.
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_backend.main import create_app  # noqa: E402
from todo_backend.settings import Settings  # noqa: E402


@pytest.fixture()
def client() -> Iterator[TestClient]:
    """
    TestClient over a fresh in-memory app.

    Used as a context manager so the lifespan (load/flush) runs.
    """
    with TestClient(create_app(Settings(persistence_backend="memory"))) as c:
        yield c


@pytest.fixture()
def sqlite_settings(tmp_path: Path) -> Settings:
    return Settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "data" / "todos.db"))
