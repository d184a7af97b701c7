from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Request

from .errors import NotFound, StoreError, ValidationError
from .ids import IdAllocator
from .models import TodoEntity, TodoId, normalize_id, to_document, unique_tags
from .schemas import TodoCreate, TodoUpdate
from .store import DocumentStore, NullStore

logger = logging.getLogger(__name__)


def _validate_title(title: Any) -> str:
    if title is None:
        raise ValidationError('"title" is a required field')
    if not isinstance(title, str) or not title:
        raise ValidationError('"title" must be a string with at least one character')
    return title


def _validate_tag(tag: Any) -> str:
    if tag is None:
        raise ValidationError('"tag" is a required field')
    if not isinstance(tag, str) or not tag:
        raise ValidationError('"tag" must be a string with at least one character')
    return tag


def _validate_tags(tags: Iterable[Any]) -> List[str]:
    return unique_tags(_validate_tag(t) for t in tags)


def _copy(entity: TodoEntity) -> TodoEntity:
    # Tags are the only nested value; copy them so callers can't mutate state
    out = entity.copy()
    out["tags"] = list(entity["tags"])
    return out


# PUBLIC_INTERFACE
class TodoRepository:
    """
    Authoritative in-memory projection of todos, mirrored to a DocumentStore.

    The map is always changed first; the store call is awaited afterwards as
    part of the same operation. With a NullStore the repository is purely
    in-memory. The one exception is add(): when the store assigns ids the
    document must be created before the todo can be keyed.

    Tags live on each todo as a de-duplicated list; the tag operations below
    keep that invariant.
    """

    def __init__(self, store: Optional[DocumentStore] = None, allocator: Optional[IdAllocator] = None) -> None:
        self._store: DocumentStore = store or NullStore()
        self._allocator = allocator or IdAllocator()
        self._items: Dict[TodoId, TodoEntity] = {}
        self._pending_wipe = False

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def allocator(self) -> IdAllocator:
        return self._allocator

    def _require(self, todo_id: TodoId) -> TodoEntity:
        # Exact key first: an all-digit store id (e.g. an ObjectId) is a str key
        item = self._items.get(todo_id)
        if item is None:
            item = self._items.get(normalize_id(todo_id))
        if item is None:
            raise NotFound(todo_id)
        return item

    async def _persist(self, entity: TodoEntity) -> None:
        await self._store.update_by_id(entity["id"], to_document(entity), upsert=True)

    # Lifecycle -------------------------------------------------------------

    def load(self, entities: Iterable[TodoEntity]) -> None:
        """Replace the whole map with loaded todos and move the allocator past their ids."""
        self._items = {e["id"]: _copy(e) for e in entities}
        self._allocator.reconcile(self._items.keys())

    def snapshot(self) -> List[TodoEntity]:
        return [_copy(t) for t in self._items.values()]

    # Todos -----------------------------------------------------------------

    def list(self) -> List[TodoEntity]:
        return self.snapshot()

    def get(self, todo_id: TodoId) -> TodoEntity:
        return _copy(self._require(todo_id))

    async def add(self, data: TodoCreate) -> TodoEntity:
        title = _validate_title(data.title)
        tags = _validate_tags(data.tags or [])
        entity: TodoEntity = {
            "id": -1,
            "title": title,
            "order": data.order,
            "completed": bool(data.completed),
            "tags": tags,
        }
        store_id = await self._store.create(to_document(entity))
        entity["id"] = store_id if store_id is not None else self._allocator.allocate()
        self._items[entity["id"]] = entity
        logger.debug("Added todo id=%r", entity["id"])
        return _copy(entity)

    async def update(self, todo_id: TodoId, data: TodoUpdate) -> TodoEntity:
        existing = self._require(todo_id)
        provided = data.model_fields_set

        # Validate everything before touching the map
        changes: Dict[str, Any] = {}
        if "title" in provided:
            changes["title"] = _validate_title(data.title)
        if "order" in provided:
            changes["order"] = data.order
        if "completed" in provided:
            if data.completed is None:
                raise ValidationError('"completed" must be true or false')
            changes["completed"] = data.completed
        if "tags" in provided:
            changes["tags"] = _validate_tags(data.tags or [])

        existing.update(changes)  # type: ignore[typeddict-item]
        await self._persist(existing)
        return _copy(existing)

    async def remove(self, todo_id: TodoId) -> None:
        key = self._require(todo_id)["id"]
        # Store first: a failed delete leaves the todo in place so the client can retry
        await self._store.delete_by_id(key)
        self._items.pop(key, None)
        logger.debug("Removed todo id=%r", key)

    async def clear(self) -> None:
        self._items.clear()
        self._pending_wipe = True
        await self.retry_pending_wipe()

    @property
    def pending_wipe(self) -> bool:
        """True while a clear() has not yet reached the store."""
        return self._pending_wipe

    async def retry_pending_wipe(self) -> bool:
        """Delete every persisted todo if a clear() is still owed to the store. Returns True once done."""
        if not self._pending_wipe:
            return True
        try:
            await self._store.delete_all()
        except StoreError:
            logger.exception("Could not clear persisted todos")
            return False
        self._pending_wipe = False
        return True

    # Tags ------------------------------------------------------------------

    async def add_tag(self, todo_id: TodoId, tag: Any) -> List[str]:
        return await self.add_tags(todo_id, [tag])

    async def add_tags(self, todo_id: TodoId, tags: Iterable[Any]) -> List[str]:
        """Add tags to a todo. Already-present tags are ignored; nothing is written if none are new."""
        item = self._require(todo_id)
        new_tags = [t for t in _validate_tags(tags) if t not in item["tags"]]
        if new_tags:
            item["tags"].extend(new_tags)
            await self._persist(item)
        return list(item["tags"])

    def list_tags(self, todo_id: TodoId) -> List[str]:
        return list(self._require(todo_id)["tags"])

    async def replace_tags(self, todo_id: TodoId, tags: Iterable[Any]) -> List[str]:
        item = self._require(todo_id)
        item["tags"] = _validate_tags(tags)
        await self._persist(item)
        return list(item["tags"])

    async def remove_tag(self, todo_id: TodoId, tag: str) -> List[str]:
        """Remove one tag. Removing a tag the todo does not carry is a successful no-op."""
        item = self._require(todo_id)
        if tag in item["tags"]:
            item["tags"].remove(tag)
            await self._persist(item)
        return list(item["tags"])

    async def clear_tags_for_todo(self, todo_id: TodoId) -> None:
        """Drop every tag from one todo. The todo itself stays."""
        item = self._require(todo_id)
        item["tags"] = []
        await self._persist(item)

    def todos_by_tag(self, tag: str) -> List[TodoEntity]:
        return [_copy(t) for t in self._items.values() if tag in t["tags"]]

    async def clear_all_tags(self) -> None:
        tagged = [t for t in self._items.values() if t["tags"]]
        for item in tagged:
            item["tags"] = []
        for item in tagged:
            try:
                await self._persist(item)
            except StoreError:
                logger.exception("Could not persist cleared tags for todo id=%r", item["id"])


# PUBLIC_INTERFACE
def get_repository(request: Request) -> TodoRepository:
    """
    FastAPI dependency returning the repository built by the app lifespan.
    """
    return request.app.state.repository
