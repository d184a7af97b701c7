from __future__ import annotations

from typing import List, Optional, TypedDict, Union

# Allocator ids are ints; store-assigned ids (e.g. ObjectId hex) are strings.
TodoId = Union[int, str]


# PUBLIC_INTERFACE
class TodoDocument(TypedDict):
    """
    Persisted document shape, keyed by the store-native id.

    Fields:
    - title: Non-empty title
    - order: Optional client-side sort hint
    - completed: Boolean completion flag
    - tags: Distinct non-empty tag strings
    """

    title: str
    order: Optional[Union[int, float]]
    completed: bool
    tags: List[str]


# PUBLIC_INTERFACE
class TodoEntity(TodoDocument):
    """A TodoDocument together with its id, as held by the repository."""

    id: TodoId


def to_document(entity: TodoEntity) -> TodoDocument:
    """Strip the id, leaving the shape that gets written to a store."""
    return {
        "title": entity["title"],
        "order": entity.get("order"),
        "completed": bool(entity.get("completed", False)),
        "tags": list(entity.get("tags") or []),
    }


def from_document(todo_id: TodoId, doc: dict) -> TodoEntity:
    """Build an entity from a loaded document, tolerating missing fields."""
    return {
        "id": todo_id,
        "title": str(doc.get("title", "")),
        "order": doc.get("order"),
        "completed": bool(doc.get("completed", False)),
        "tags": unique_tags(t for t in (doc.get("tags") or []) if isinstance(t, str) and t),
    }


def unique_tags(tags) -> List[str]:
    """De-duplicate tags keeping first-insertion order."""
    return list(dict.fromkeys(tags))


def normalize_id(raw: TodoId) -> TodoId:
    """Path ids made of ASCII digits address allocator/row ids; anything else is a store id."""
    if isinstance(raw, int):
        return raw
    s = str(raw).strip()
    if s.isascii() and s.isdigit():
        return int(s)
    return s
