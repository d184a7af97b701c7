from __future__ import annotations

from fastapi.testclient import TestClient


def create_todo(client: TestClient, **payload) -> str:
    """POST a todo, check the 303 contract and return the new todo's id from Location."""
    payload.setdefault("title", "Test Task")
    res = client.post("/todos", json=payload, follow_redirects=False)
    assert res.status_code == 303, res.text
    location = res.headers["location"]
    assert "/todos/" in location
    return location.rsplit("/", 1)[1]


def assert_todo_shape(todo: dict) -> None:
    for key in ["id", "title", "order", "completed", "tags", "url"]:
        assert key in todo
    assert isinstance(todo["title"], str) and todo["title"]
    assert isinstance(todo["completed"], bool)
    assert isinstance(todo["tags"], list)
    assert len(set(todo["tags"])) == len(todo["tags"])
    assert todo["url"].endswith(f"/todos/{todo['id']}")
