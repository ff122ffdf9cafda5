"""Task record model held by the in-memory store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

# Zero value used for an omitted ``due_date``.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _generate_id() -> uuid.UUID:
    return uuid.uuid4()


def format_timestamp(value: datetime) -> str:
    """Render *value* as an RFC 3339 string, using ``Z`` for UTC."""
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True)
class Todo:
    """A single task record.

    ``id`` is assigned by the store on creation and never changes; the other
    fields are replaced wholesale by :meth:`with_fields`.
    """

    id: uuid.UUID = field(default_factory=_generate_id)
    title: str = ""
    description: str = ""
    due_date: datetime = ZERO_TIME

    def with_fields(self, *, title: str, description: str, due_date: datetime) -> "Todo":
        """Return a copy carrying the same id and the given fields."""
        return replace(self, title=title, description=description, due_date=due_date)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape returned by the API."""
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "due_date": format_timestamp(self.due_date),
        }
