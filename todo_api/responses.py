"""Uniform JSON envelope shared by routes and error handlers."""

from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder


def _meta(request: Request) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", "unknown"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def success_body(request: Request, data: Any) -> dict:
    """Wrap *data* in a success envelope."""
    return {
        "success": True,
        "data": jsonable_encoder(data),
        "meta": _meta(request),
    }


def error_body(request: Request, code: str, message: str, details: Any = None) -> dict:
    """Build an error envelope; ``details`` is omitted when empty."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = jsonable_encoder(details)
    return {
        "success": False,
        "error": error,
        "meta": _meta(request),
    }
