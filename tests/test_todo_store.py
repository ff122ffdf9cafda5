"""Tests for the in-memory task store."""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone

import pytest

from todo_service.store import ZERO_TIME, Todo, TodoStore

DUE = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store() -> TodoStore:
    return TodoStore()


class TestTodoModel:
    def test_to_dict(self) -> None:
        todo = Todo(title="T", description="D", due_date=DUE)
        data = todo.to_dict()
        assert data == {
            "id": str(todo.id),
            "title": "T",
            "description": "D",
            "due_date": "2025-01-01T00:00:00Z",
        }

    def test_zero_due_date(self) -> None:
        assert Todo().to_dict()["due_date"] == "0001-01-01T00:00:00Z"

    def test_non_utc_offset_is_kept(self) -> None:
        from datetime import timedelta

        tz = timezone(timedelta(hours=2))
        todo = Todo(due_date=datetime(2025, 1, 1, 12, 30, tzinfo=tz))
        assert todo.to_dict()["due_date"] == "2025-01-01T12:30:00+02:00"

    def test_with_fields_keeps_id(self) -> None:
        todo = Todo(title="old")
        updated = todo.with_fields(title="new", description="", due_date=ZERO_TIME)
        assert updated.id == todo.id
        assert updated.title == "new"
        assert todo.title == "old"


class TestTodoStore:
    def test_empty(self, store: TodoStore) -> None:
        assert store.list_todos() == []
        assert len(store) == 0

    def test_create_then_get(self, store: TodoStore) -> None:
        created = store.create_todo("T", "D", DUE)
        assert isinstance(created.id, uuid.UUID)
        assert store.get_todo(created.id) == created
        assert store.get_todo(str(created.id)) == created

    def test_ids_are_distinct(self, store: TodoStore) -> None:
        ids = {store.create_todo(f"t{i}").id for i in range(200)}
        assert len(ids) == 200

    def test_list_preserves_insertion_order(self, store: TodoStore) -> None:
        titles = ["a", "b", "c"]
        for title in titles:
            store.create_todo(title)
        assert [t.title for t in store.list_todos()] == titles

    def test_list_is_a_snapshot(self, store: TodoStore) -> None:
        store.create_todo("a")
        snapshot = store.list_todos()
        store.create_todo("b")
        assert len(snapshot) == 1
        assert len(store.list_todos()) == 2

    def test_get_missing(self, store: TodoStore) -> None:
        store.create_todo("a")
        assert store.get_todo(uuid.uuid4()) is None
        assert store.get_todo("not-a-uuid") is None

    def test_replace_preserves_id_and_position(self, store: TodoStore) -> None:
        first = store.create_todo("a")
        second = store.create_todo("b", "old", DUE)
        store.create_todo("c")

        updated = store.replace_todo(second.id, title="B", description="new", due_date=ZERO_TIME)

        assert updated is not None
        assert updated.id == second.id
        assert updated.title == "B"
        assert updated.description == "new"
        assert updated.due_date == ZERO_TIME
        assert [t.title for t in store.list_todos()] == ["a", "B", "c"]
        assert store.get_todo(first.id).title == "a"

    def test_replace_with_defaults_zeroes_fields(self, store: TodoStore) -> None:
        todo = store.create_todo("T", "D", DUE)
        updated = store.replace_todo(todo.id)
        assert updated == Todo(id=todo.id)

    def test_replace_missing(self, store: TodoStore) -> None:
        assert store.replace_todo(uuid.uuid4(), title="x") is None
        assert store.list_todos() == []

    def test_delete_then_get(self, store: TodoStore) -> None:
        a = store.create_todo("a")
        b = store.create_todo("b")
        c = store.create_todo("c")

        assert store.delete_todo(b.id) is True
        assert store.get_todo(b.id) is None
        assert [t.id for t in store.list_todos()] == [a.id, c.id]

    def test_delete_missing(self, store: TodoStore) -> None:
        store.create_todo("a")
        assert store.delete_todo(uuid.uuid4()) is False
        assert len(store) == 1

    def test_delete_twice(self, store: TodoStore) -> None:
        todo = store.create_todo("a")
        assert store.delete_todo(todo.id) is True
        assert store.delete_todo(todo.id) is False

    def test_clear(self, store: TodoStore) -> None:
        store.create_todo("a")
        store.clear()
        assert store.list_todos() == []

    def test_concurrent_creates(self, store: TodoStore) -> None:
        def worker() -> None:
            for i in range(50):
                store.create_todo(f"t{i}")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        todos = store.list_todos()
        assert len(todos) == 400
        assert len({t.id for t in todos}) == 400
