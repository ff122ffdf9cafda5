"""Task CRUD endpoints.

This module provides a FastAPI router for the task list.  It is mounted
under ``/api/todos`` by the main ``create_app`` factory, behind the bearer
token guard.
"""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from loguru import logger
from pydantic import ValidationError

from ..store import TodoStore
from .models import TodoPayload, TodoRecord


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Todo not found")


# ---------------------------------------------------------------------------
# Router factory
# ---------------------------------------------------------------------------

def create_todo_router(
    get_store: Callable[[], TodoStore],
    guard: Callable[..., Any],
) -> APIRouter:
    """Create the task CRUD router.

    Parameters
    ----------
    get_store:
        A callable returning the :class:`TodoStore` owned by the app.
    guard:
        Dependency run before every route; rejects unauthenticated requests.
    """
    router = APIRouter(
        prefix="/api/todos",
        tags=["todos"],
        dependencies=[Depends(guard)],
    )

    @router.get("", response_model=list[TodoRecord])
    async def list_todos() -> list[dict[str, Any]]:
        return [t.to_dict() for t in get_store().list_todos()]

    @router.post("", response_model=TodoRecord)
    async def create_todo(body: TodoPayload, request: Request) -> dict[str, Any]:
        todo = get_store().create_todo(
            title=body.title,
            description=body.description,
            due_date=body.due_date,
        )
        logger.debug("Todo {} created by {}", todo.id, getattr(request.state, "username", None))
        return todo.to_dict()

    @router.get("/{todo_id}", response_model=TodoRecord)
    async def get_todo(todo_id: str) -> dict[str, Any]:
        todo = get_store().get_todo(todo_id)
        if todo is None:
            raise _not_found()
        return todo.to_dict()

    @router.put("/{todo_id}", response_model=TodoRecord)
    async def replace_todo(
        todo_id: str,
        request: Request,
        raw: Any = Body(None),
    ) -> dict[str, Any]:
        store = get_store()
        # Unknown ids are reported before the body is looked at.
        if store.get_todo(todo_id) is None:
            raise _not_found()
        try:
            body = TodoPayload.model_validate(raw)
        except ValidationError:
            raise HTTPException(status_code=400, detail="Invalid request payload")

        todo = store.replace_todo(
            todo_id,
            title=body.title,
            description=body.description,
            due_date=body.due_date,
        )
        if todo is None:
            raise _not_found()
        logger.debug("Todo {} replaced by {}", todo.id, getattr(request.state, "username", None))
        return todo.to_dict()

    @router.delete("/{todo_id}", status_code=204)
    async def delete_todo(todo_id: str) -> Response:
        if not get_store().delete_todo(todo_id):
            raise _not_found()
        return Response(status_code=204)

    return router
