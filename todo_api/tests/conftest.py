"""Shared fixtures: a controllable clock, a fresh store and an API client."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from todo_api.dependencies import get_store
from todo_api.main import create_app
from todo_api.store import TaskStore

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock: each call returns the current time, then steps forward."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current

    def set(self, when: datetime) -> None:
        self.now = when


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock()


@pytest.fixture(name="store")
def store_fixture(clock: FakeClock) -> TaskStore:
    """Create a fresh store for each test."""
    return TaskStore(clock=clock)


@pytest.fixture(name="client")
def client_fixture():
    """Create a test client backed by its own empty store."""
    store = TaskStore()
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
