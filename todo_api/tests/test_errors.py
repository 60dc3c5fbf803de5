"""Tests for the application error types and their HTTP rendering."""

import pytest
from fastapi.testclient import TestClient

from todo_api.errors import AppError, NotFoundError
from todo_api.main import create_app


class TestErrorTypes:
    def test_not_found_message(self):
        err = NotFoundError("Task", "abc")
        assert isinstance(err, AppError)
        assert err.status_code == 404
        assert err.code == "NOT_FOUND"
        assert err.is_operational is True
        assert err.message == "Task with ID 'abc' not found"
        assert NotFoundError("Task").message == "Task not found"

    def test_app_error_defaults(self):
        err = AppError("Task already exists", 409, "CONFLICT")
        assert str(err) == "Task already exists"
        assert err.is_operational is True
        assert err.details is None


@pytest.fixture(name="error_client")
def error_client_fixture():
    """App with extra routes that raise application errors."""
    app = create_app()

    @app.get("/raise/conflict")
    def raise_conflict():
        raise AppError("Task already exists", 409, "CONFLICT")

    @app.get("/raise/details")
    def raise_with_details():
        raise AppError(
            "Bad tags", 400, "VALIDATION_ERROR",
            details=[{"field": "tags", "message": "dup"}],
        )

    @app.get("/raise/internal")
    def raise_internal():
        raise AppError("Store invariant broken", 500, "INTERNAL_ERROR", is_operational=False)

    return TestClient(app)


class TestErrorRendering:
    def test_conflict(self, error_client):
        response = error_client.get("/raise/conflict")
        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"] == {"code": "CONFLICT", "message": "Task already exists"}
        assert body["meta"]["request_id"] == response.headers["X-Request-ID"]

    def test_details_included_outside_production(self, error_client):
        response = error_client.get("/raise/details")
        assert response.status_code == 400
        assert response.json()["error"]["details"] == [
            {"field": "tags", "message": "dup"}
        ]

    def test_details_hidden_in_production(self, error_client, monkeypatch):
        monkeypatch.setattr("todo_api.config.ENV", "production")
        response = error_client.get("/raise/details")
        assert response.status_code == 400
        assert "details" not in response.json()["error"]

    def test_non_operational_error(self, error_client, caplog):
        with caplog.at_level("ERROR", logger="todo_api.errors"):
            response = error_client.get("/raise/internal")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
        assert any(
            r.levelname == "ERROR" and r.error_code == "INTERNAL_ERROR"
            for r in caplog.records
        )
