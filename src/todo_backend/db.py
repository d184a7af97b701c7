from __future__ import annotations

import asyncio
import json
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional

from .errors import StoreError
from .models import TodoDocument, TodoId
from .store import DocumentStore, StoredTodo


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    order: str = "sort_order"
    completed: str = "completed"
    tags: str = "tags"


_COLS = _Cols()


class SQLiteDocumentStore(DocumentStore):
    """
    Local document store on a single SQLite file.

    Each row holds one todo document; tags are stored as a JSON array. Calls
    run in a worker thread with their own connection so the event loop is
    never blocked.
    """

    name = "sqlite"

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    async def _run(self, operation: str, fn, *args, todo_id: Optional[TodoId] = None):
        try:
            return await asyncio.to_thread(fn, *args)
        except (sqlite3.Error, OSError) as exc:
            raise StoreError(operation, todo_id, exc) from exc

    def _init_db(self) -> None:
        os.makedirs(os.path.dirname(self._db_path) or ".", exist_ok=True)
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.order} NUMERIC NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.tags} TEXT NOT NULL DEFAULT '[]'
                )
                """
            )

    def _row_to_stored(self, row: sqlite3.Row) -> StoredTodo:
        doc: TodoDocument = {
            "title": str(row[_COLS.title]),
            "order": row[_COLS.order],
            "completed": bool(row[_COLS.completed]),
            "tags": json.loads(row[_COLS.tags] or "[]"),
        }
        return int(row[_COLS.id]), doc

    @staticmethod
    def _params(doc: TodoDocument) -> tuple:
        return (
            doc["title"],
            doc.get("order"),
            1 if doc.get("completed") else 0,
            json.dumps(list(doc.get("tags") or [])),
        )

    async def ping(self) -> None:
        await self._run("ping", self._init_db)

    def _create(self, doc: TodoDocument) -> int:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.order}, {_COLS.completed}, {_COLS.tags})
                VALUES (?, ?, ?, ?)
                """,
                self._params(doc),
            )
            assert cur.lastrowid is not None
            return int(cur.lastrowid)

    async def create(self, doc: TodoDocument) -> Optional[TodoId]:
        return await self._run("create", self._create, doc)

    def _find_all(self) -> List[StoredTodo]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id}").fetchall()
            return [self._row_to_stored(r) for r in rows]

    async def find_all(self) -> List[StoredTodo]:
        return await self._run("find_all", self._find_all)

    def _find_by_id(self, todo_id: int) -> Optional[TodoDocument]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()
            return self._row_to_stored(row)[1] if row else None

    async def find_by_id(self, todo_id: TodoId) -> Optional[TodoDocument]:
        if not isinstance(todo_id, int):
            return None
        return await self._run("find_by_id", self._find_by_id, todo_id, todo_id=todo_id)

    def _find_by_tag(self, tag: str) -> List[StoredTodo]:
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                WHERE EXISTS (SELECT 1 FROM json_each({_COLS.table}.{_COLS.tags}) WHERE json_each.value = ?)
                ORDER BY {_COLS.id}
                """,
                (tag,),
            ).fetchall()
            return [self._row_to_stored(r) for r in rows]

    async def find_by_tag(self, tag: str) -> List[StoredTodo]:
        return await self._run("find_by_tag", self._find_by_tag, tag)

    def _update(self, todo_id: int, doc: TodoDocument, upsert: bool) -> bool:
        with self._conn() as conn:
            if upsert:
                conn.execute(
                    f"""
                    INSERT OR REPLACE INTO {_COLS.table}
                        ({_COLS.id}, {_COLS.title}, {_COLS.order}, {_COLS.completed}, {_COLS.tags})
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (todo_id, *self._params(doc)),
                )
                return True
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.order} = ?, {_COLS.completed} = ?, {_COLS.tags} = ?
                WHERE {_COLS.id} = ?
                """,
                (*self._params(doc), todo_id),
            )
            return cur.rowcount > 0

    async def update_by_id(self, todo_id: TodoId, doc: TodoDocument, upsert: bool = False) -> bool:
        if not isinstance(todo_id, int):
            # Row ids are integers; a string id cannot live in this table
            raise StoreError("update", todo_id, ValueError("sqlite store only holds integer ids"))
        return await self._run("update", self._update, todo_id, doc, upsert, todo_id=todo_id)

    def _delete(self, todo_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0

    async def delete_by_id(self, todo_id: TodoId) -> bool:
        if not isinstance(todo_id, int):
            return False
        return await self._run("delete", self._delete, todo_id, todo_id=todo_id)

    def _delete_all(self) -> None:
        with self._conn() as conn:
            conn.execute(f"DELETE FROM {_COLS.table}")

    async def delete_all(self) -> None:
        await self._run("delete_all", self._delete_all)
