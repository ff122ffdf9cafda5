"""In-memory task store with a single process-wide lock.

Records live in one ordered list for the lifetime of the process.  Every
operation, reads included, runs under :attr:`TodoStore._lock`, so callers on
separate threads never observe a half-applied mutation.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from loguru import logger

from .model import ZERO_TIME, Todo


class TodoStore:
    """Authoritative, insertion-ordered collection of :class:`Todo` records.

    Lookups are linear scans over the list, matching ids by their string form.
    """

    def __init__(self) -> None:
        self._todos: list[Todo] = []
        self._lock = threading.Lock()

    # -- internal helpers ---------------------------------------------------

    def _index_of(self, todo_id: Union[str, UUID]) -> Optional[int]:
        key = str(todo_id)
        for idx, todo in enumerate(self._todos):
            if str(todo.id) == key:
                return idx
        return None

    # -- public API ---------------------------------------------------------

    def list_todos(self) -> list[Todo]:
        """Return a snapshot of all records in insertion order."""
        with self._lock:
            return list(self._todos)

    def create_todo(
        self,
        title: str = "",
        description: str = "",
        due_date: datetime = ZERO_TIME,
    ) -> Todo:
        """Append a new record with a freshly generated id."""
        with self._lock:
            todo = Todo(title=title, description=description, due_date=due_date)
            # ids stay unique across live records
            while self._index_of(todo.id) is not None:
                todo = Todo(title=title, description=description, due_date=due_date)
            self._todos.append(todo)
        logger.info("Created todo {}", todo.id)
        return todo

    def get_todo(self, todo_id: Union[str, UUID]) -> Optional[Todo]:
        """Return the record with *todo_id*, or ``None`` if there is none."""
        with self._lock:
            idx = self._index_of(todo_id)
            return self._todos[idx] if idx is not None else None

    def replace_todo(
        self,
        todo_id: Union[str, UUID],
        *,
        title: str = "",
        description: str = "",
        due_date: datetime = ZERO_TIME,
    ) -> Optional[Todo]:
        """Overwrite every field except ``id`` on the matching record.

        Returns:
            The updated record, or ``None`` if no record has *todo_id*.
        """
        with self._lock:
            idx = self._index_of(todo_id)
            if idx is None:
                return None
            updated = self._todos[idx].with_fields(
                title=title,
                description=description,
                due_date=due_date,
            )
            self._todos[idx] = updated
        logger.info("Replaced todo {}", updated.id)
        return updated

    def delete_todo(self, todo_id: Union[str, UUID]) -> bool:
        """Remove the matching record; later records shift up one slot."""
        with self._lock:
            idx = self._index_of(todo_id)
            if idx is None:
                return False
            removed = self._todos.pop(idx)
        logger.info("Deleted todo {}", removed.id)
        return True

    def clear(self) -> None:
        with self._lock:
            self._todos.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._todos)
