from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .errors import StoreError
from .models import TodoDocument, TodoId
from .settings import Settings

logger = logging.getLogger(__name__)

StoredTodo = Tuple[TodoId, TodoDocument]


# PUBLIC_INTERFACE
class DocumentStore(ABC):
    """
    Asynchronous document store contract used by the repository.

    Every engine failure is raised as StoreError; "not there" is reported by
    return value (None / False), never by exception.
    """

    name = "abstract"

    @abstractmethod
    async def ping(self) -> None:
        """Check the store is reachable, preparing it if needed."""

    @abstractmethod
    async def create(self, doc: TodoDocument) -> Optional[TodoId]:
        """Insert a document and return its store-native id, or None if the store assigns no ids."""

    @abstractmethod
    async def find_all(self) -> List[StoredTodo]:
        """Return every persisted (id, document) pair."""

    @abstractmethod
    async def find_by_id(self, todo_id: TodoId) -> Optional[TodoDocument]:
        """Return one document, or None if absent."""

    @abstractmethod
    async def find_by_tag(self, tag: str) -> List[StoredTodo]:
        """Return (id, document) pairs whose tags contain ``tag`` exactly."""

    @abstractmethod
    async def update_by_id(self, todo_id: TodoId, doc: TodoDocument, upsert: bool = False) -> bool:
        """Replace a document. Return False if absent and ``upsert`` is off."""

    @abstractmethod
    async def delete_by_id(self, todo_id: TodoId) -> bool:
        """Delete a document. Return False if it was not there."""

    @abstractmethod
    async def delete_all(self) -> None:
        """Delete every document."""

    async def close(self) -> None:
        """Release connections. Default: nothing to release."""


class NullStore(DocumentStore):
    """
    Store used when no persistence is configured or reachable.

    Every call succeeds without doing anything; create() returns None so the
    repository falls back to its own id allocator.
    """

    name = "memory"

    async def ping(self) -> None:
        return None

    async def create(self, doc: TodoDocument) -> Optional[TodoId]:
        return None

    async def find_all(self) -> List[StoredTodo]:
        return []

    async def find_by_id(self, todo_id: TodoId) -> Optional[TodoDocument]:
        return None

    async def find_by_tag(self, tag: str) -> List[StoredTodo]:
        return []

    async def update_by_id(self, todo_id: TodoId, doc: TodoDocument, upsert: bool = False) -> bool:
        return True

    async def delete_by_id(self, todo_id: TodoId) -> bool:
        return True

    async def delete_all(self) -> None:
        return None


def _build_store(settings: Settings) -> DocumentStore:
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteDocumentStore

        return SQLiteDocumentStore(settings.sqlite_db_path)
    if settings.persistence_backend == "mongo":
        from .mongo import MongoDocumentStore

        return MongoDocumentStore(settings.mongodb_uri, timeout_ms=settings.store_timeout_ms)
    return NullStore()


# PUBLIC_INTERFACE
async def open_store(settings: Settings) -> DocumentStore:
    """
    Factory returning the configured store, already checked for reachability.

    - memory: NullStore
    - sqlite: SQLiteDocumentStore at settings.sqlite_db_path
    - mongo: MongoDocumentStore at settings.mongodb_uri

    A store that cannot be reached is closed and replaced by NullStore, so the
    service still starts in in-memory mode.
    """
    store = _build_store(settings)
    try:
        await store.ping()
    except StoreError as exc:
        logger.warning("%s store unreachable (%s); running in-memory only", store.name, exc)
        await store.close()
        return NullStore()
    logger.info("Using %s store", store.name)
    return store
