"""Pydantic models for the todo service API."""

from __future__ import annotations

from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, field_validator

from ..store.model import ZERO_TIME


class LoginRequest(BaseModel):
    """Login request.

    Omitted fields decode as empty strings and simply fail authentication.
    """

    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    """Login response."""

    token: str


class TodoPayload(BaseModel):
    """Client-supplied task fields for create and replace.

    Any ``id`` in the body is ignored; omitted fields take their zero value.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    description: str = ""
    due_date: AwareDatetime = ZERO_TIME

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date_is_text(cls, value: Any) -> Any:
        # RFC 3339 text only, no epoch numbers
        if not isinstance(value, str):
            raise ValueError("due_date must be an RFC 3339 string")
        return value


class TodoRecord(BaseModel):
    """A stored task record as returned to clients."""

    id: str
    title: str
    description: str
    due_date: str


class ServiceInfo(BaseModel):
    name: str
    version: str
    status: str
