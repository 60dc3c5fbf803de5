"""FastAPI dependencies."""

from fastapi import Request

from todo_api.store import TaskStore


def get_store(request: Request) -> TaskStore:
    """Return the TaskStore owned by the running app."""
    return request.app.state.store
