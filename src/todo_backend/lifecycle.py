from __future__ import annotations

import logging

from .errors import StoreError
from .models import from_document, to_document
from .repositories import TodoRepository
from .store import DocumentStore

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class LifecycleSynchronizer:
    """
    Moves todos between the store and the repository at process boundaries.

    load_all() runs once before requests are served; flush_all() runs once at
    shutdown, before the store connection is closed. Neither raises on store
    failures: persistence here is best-effort and must not block startup or
    shutdown.
    """

    def __init__(self, repository: TodoRepository, store: DocumentStore) -> None:
        self._repository = repository
        self._store = store

    async def load_all(self) -> int:
        """Repopulate the repository from the store. Returns how many todos were loaded."""
        try:
            stored = await self._store.find_all()
        except StoreError:
            logger.warning("Could not load todos from %s store; starting empty", self._store.name, exc_info=True)
            stored = []

        self._repository.load(from_document(todo_id, doc) for todo_id, doc in stored)
        logger.info(
            "Loaded %d todos from %s store (next id %d)",
            len(stored),
            self._store.name,
            self._repository.allocator.next_id,
        )
        return len(stored)

    async def flush_all(self) -> int:
        """Upsert every in-memory todo into the store. Returns how many were written."""
        written = 0
        # A clear() that never reached the store is replayed first, or its todos would load again
        await self._repository.retry_pending_wipe()
        todos = self._repository.snapshot()
        for todo in todos:
            try:
                await self._store.update_by_id(todo["id"], to_document(todo), upsert=True)
            except StoreError:
                logger.exception("Could not flush todo id=%r", todo["id"])
                continue
            written += 1
        logger.info("Flushed %d/%d todos to %s store", written, len(todos), self._store.name)
        return written
