from __future__ import annotations

from typing import Any, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from .errors import StoreError
from .models import TodoDocument, TodoId
from .store import DocumentStore, StoredTodo

COLLECTION = "todos"
DEFAULT_DATABASE = "todoapp"


def _to_native(todo_id: TodoId) -> Any:
    """ObjectId hex strings map back to ObjectId; integer ids are stored as-is."""
    if isinstance(todo_id, str) and ObjectId.is_valid(todo_id):
        return ObjectId(todo_id)
    return todo_id


def _from_native(raw: Any) -> TodoId:
    if isinstance(raw, ObjectId):
        return str(raw)
    if isinstance(raw, int):
        return raw
    return str(raw)


def _split(raw: dict) -> StoredTodo:
    doc: TodoDocument = {
        "title": raw.get("title", ""),
        "order": raw.get("order"),
        "completed": bool(raw.get("completed", False)),
        "tags": list(raw.get("tags") or []),
    }
    return _from_native(raw["_id"]), doc


class MongoDocumentStore(DocumentStore):
    """
    MongoDB-backed document store using pymongo's asyncio client.

    The database comes from the connection URI path (``/todoapp`` by default)
    and documents live in the ``todos`` collection. New documents get a
    server-generated ObjectId, exposed to the rest of the app as its hex string.
    """

    name = "mongo"

    def __init__(self, uri: str, timeout_ms: int = 2000) -> None:
        self._client: AsyncMongoClient = AsyncMongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        self._collection = self._client.get_default_database(default=DEFAULT_DATABASE)[COLLECTION]

    async def ping(self) -> None:
        try:
            await self._client.admin.command("ping")
        except PyMongoError as exc:
            raise StoreError("ping", cause=exc) from exc

    async def create(self, doc: TodoDocument) -> Optional[TodoId]:
        try:
            result = await self._collection.insert_one(dict(doc))
        except PyMongoError as exc:
            raise StoreError("create", cause=exc) from exc
        return _from_native(result.inserted_id)

    async def find_all(self) -> List[StoredTodo]:
        try:
            raws = await self._collection.find({}).to_list(None)
        except PyMongoError as exc:
            raise StoreError("find_all", cause=exc) from exc
        return [_split(r) for r in raws]

    async def find_by_id(self, todo_id: TodoId) -> Optional[TodoDocument]:
        try:
            raw = await self._collection.find_one({"_id": _to_native(todo_id)})
        except PyMongoError as exc:
            raise StoreError("find_by_id", todo_id, exc) from exc
        return _split(raw)[1] if raw else None

    async def find_by_tag(self, tag: str) -> List[StoredTodo]:
        try:
            # Equality against an array field matches any element
            raws = await self._collection.find({"tags": tag}).to_list(None)
        except PyMongoError as exc:
            raise StoreError("find_by_tag", cause=exc) from exc
        return [_split(r) for r in raws]

    async def update_by_id(self, todo_id: TodoId, doc: TodoDocument, upsert: bool = False) -> bool:
        try:
            result = await self._collection.replace_one(
                {"_id": _to_native(todo_id)}, dict(doc), upsert=upsert
            )
        except PyMongoError as exc:
            raise StoreError("update", todo_id, exc) from exc
        return upsert or result.matched_count > 0

    async def delete_by_id(self, todo_id: TodoId) -> bool:
        try:
            result = await self._collection.delete_one({"_id": _to_native(todo_id)})
        except PyMongoError as exc:
            raise StoreError("delete", todo_id, exc) from exc
        return result.deleted_count > 0

    async def delete_all(self) -> None:
        try:
            await self._collection.delete_many({})
        except PyMongoError as exc:
            raise StoreError("delete_all", cause=exc) from exc

    async def close(self) -> None:
        await self._client.close()
