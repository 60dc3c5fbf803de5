"""CRUD, listing and stats endpoints for tasks."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from todo_api import config
from todo_api.dependencies import get_store
from todo_api.errors import NotFoundError
from todo_api.models import TaskCreate, TaskListQuery, TaskUpdate
from todo_api.responses import success_body
from todo_api.store import TaskStore

router = APIRouter(prefix=f"/api/{config.API_VERSION}/todos", tags=["todos"])

RESOURCE = "Task"


@router.get("/")
def list_tasks(
    request: Request,
    query: Annotated[TaskListQuery, Query()],
    store: TaskStore = Depends(get_store),
) -> dict:
    """List tasks with filtering, sorting and pagination."""
    return success_body(request, store.find_all(query))


@router.get("/stats")
def task_stats(request: Request, store: TaskStore = Depends(get_store)) -> dict:
    """Aggregate counts over live tasks."""
    return success_body(request, store.get_stats())


@router.get("/{task_id}")
def get_task(
    request: Request,
    task_id: uuid.UUID,
    include_deleted: bool = False,
    store: TaskStore = Depends(get_store),
) -> dict:
    """Get a single task by ID."""
    task = store.find_by_id(str(task_id), include_deleted=include_deleted)
    if task is None:
        raise NotFoundError(RESOURCE, str(task_id))
    return success_body(request, task)


@router.post("/", status_code=201)
def create_task(
    request: Request, body: TaskCreate, store: TaskStore = Depends(get_store)
) -> dict:
    """Create a new task."""
    return success_body(request, store.create(body))


@router.patch("/{task_id}")
def update_task(
    request: Request,
    task_id: uuid.UUID,
    body: TaskUpdate,
    store: TaskStore = Depends(get_store),
) -> dict:
    """Update an existing task. Only provided fields are changed."""
    task = store.update(str(task_id), body)
    if task is None:
        raise NotFoundError(RESOURCE, str(task_id))
    return success_body(request, task)


@router.delete("/{task_id}", response_model=None)
def delete_task(
    request: Request,
    task_id: uuid.UUID,
    permanent: bool = False,
    store: TaskStore = Depends(get_store),
) -> dict | Response:
    """Soft-delete a task, or remove it for good with ``?permanent=true``."""
    if permanent:
        if not store.hard_delete(str(task_id)):
            raise NotFoundError(RESOURCE, str(task_id))
        return Response(status_code=204)

    task = store.soft_delete(str(task_id))
    if task is None:
        raise NotFoundError(RESOURCE, str(task_id))
    return success_body(request, task)


@router.post("/{task_id}/restore")
def restore_task(
    request: Request, task_id: uuid.UUID, store: TaskStore = Depends(get_store)
) -> dict:
    """Restore a soft-deleted task."""
    task = store.restore(str(task_id))
    if task is None:
        raise NotFoundError(RESOURCE, str(task_id))
    return success_body(request, task)
