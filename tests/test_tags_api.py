from .helpers import create_todo


class TestTagScenario:
    def test_build_an_api_walkthrough(self, client):
        tid = create_todo(client, title="build an API")
        assert tid == "0"
        assert client.get("/todos/0").json()["title"] == "build an API"

        assert client.post("/todos/0/tags", json={"tag": "work"}).status_code == 204
        assert client.get("/todos/0/tags").json() == {"tags": ["work"]}

        by_tag = client.get("/tags/work/todos").json()
        assert [t["id"] for t in by_tag] == [0]

        assert client.delete("/todos/0/tags/work").status_code == 204
        assert client.get("/todos/0/tags").json() == {"tags": []}

        assert client.delete("/todos/0").status_code == 204
        assert client.get("/todos/0").status_code == 404


class TestAddTags:
    def test_add_tag_is_idempotent(self, client):
        tid = create_todo(client)
        for _ in range(2):
            assert client.post(f"/todos/{tid}/tags", json={"tag": "work"}).status_code == 204
        assert client.get(f"/todos/{tid}/tags").json()["tags"] == ["work"]

    def test_add_several_tags(self, client):
        tid = create_todo(client)
        res = client.post(f"/todos/{tid}/tags", json={"tag": "a", "tags": ["b", "a", "c"]})
        assert res.status_code == 204
        assert client.get(f"/todos/{tid}/tags").json()["tags"] == ["a", "b", "c"]

    def test_missing_tag(self, client):
        tid = create_todo(client)
        res = client.post(f"/todos/{tid}/tags", json={})
        assert res.status_code == 400
        assert res.json() == {"error": '"tag" is a required field'}

    def test_no_body(self, client):
        tid = create_todo(client)
        assert client.post(f"/todos/{tid}/tags").status_code == 400

    def test_empty_tag_does_not_mutate(self, client):
        tid = create_todo(client, tags=["keep"])
        res = client.post(f"/todos/{tid}/tags", json={"tags": ["new", ""]})
        assert res.status_code == 400
        assert client.get(f"/todos/{tid}/tags").json()["tags"] == ["keep"]

    def test_non_string_tag(self, client):
        tid = create_todo(client)
        res = client.post(f"/todos/{tid}/tags", json={"tag": 7})
        assert res.status_code == 400
        assert client.get(f"/todos/{tid}/tags").json()["tags"] == []

    def test_unknown_todo(self, client):
        assert client.post("/todos/42/tags", json={"tag": "work"}).status_code == 404
        assert client.post("/todos/42/tags", json={}).status_code == 404
        assert client.get("/todos/42/tags").status_code == 404


class TestReplaceAndRemoveTags:
    def test_replace_tags(self, client):
        tid = create_todo(client, tags=["a", "b"])
        res = client.patch(f"/todos/{tid}/tags", json={"tags": ["x", "y", "x"]})
        assert res.status_code == 200
        assert res.json() == {"tags": ["x", "y"]}

    def test_replace_tags_not_found(self, client):
        assert client.patch("/todos/9/tags", json={"tags": ["x"]}).status_code == 404

    def test_remove_absent_tag_succeeds(self, client):
        tid = create_todo(client, tags=["a"])
        assert client.delete(f"/todos/{tid}/tags/zzz").status_code == 204
        assert client.get(f"/todos/{tid}/tags").json()["tags"] == ["a"]

    def test_remove_tag_unknown_todo(self, client):
        assert client.delete("/todos/9/tags/a").status_code == 404

    def test_clear_tags_for_todo_keeps_todo(self, client):
        tid = create_todo(client, title="Stay", tags=["a", "b"])
        res = client.delete(f"/todos/{tid}/tags")
        assert res.status_code == 204
        todo = client.get(f"/todos/{tid}")
        assert todo.status_code == 200
        assert todo.json()["title"] == "Stay"
        assert todo.json()["tags"] == []

    def test_clear_tags_for_unknown_todo(self, client):
        assert client.delete("/todos/9/tags").status_code == 404

    def test_clear_all_tags_keeps_todos(self, client):
        first = create_todo(client, tags=["a"])
        second = create_todo(client, tags=["a", "b"])
        res = client.delete("/todos/tags")
        assert res.status_code == 204
        todos = client.get("/todos").json()
        assert len(todos) == 2
        assert all(t["tags"] == [] for t in todos)
        assert client.get(f"/todos/{first}").status_code == 200
        assert client.get(f"/todos/{second}").status_code == 200


class TestTodosByTag:
    def test_exact_case_sensitive_match(self, client):
        work = create_todo(client, title="w", tags=["work"])
        create_todo(client, title="W", tags=["Work"])
        create_todo(client, title="none")

        res = client.get("/tags/work/todos")
        assert res.status_code == 200
        assert [str(t["id"]) for t in res.json()] == [work]

    def test_follows_tag_changes(self, client):
        tid = create_todo(client)
        assert client.get("/tags/social/todos").json() == []

        client.post(f"/todos/{tid}/tags", json={"tag": "social"})
        assert [str(t["id"]) for t in client.get("/tags/social/todos").json()] == [tid]

        client.delete(f"/todos/{tid}/tags/social")
        assert client.get("/tags/social/todos").json() == []

    def test_unknown_tag_is_empty(self, client):
        create_todo(client, tags=["a"])
        res = client.get("/tags/nothing/todos")
        assert res.status_code == 200
        assert res.json() == []
