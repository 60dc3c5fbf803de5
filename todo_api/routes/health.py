"""Liveness and readiness endpoints."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from todo_api import config

router = APIRouter(prefix="/health", tags=["health"])

_STARTED = time.monotonic()


@router.get("")
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED, 3),
        "version": config.APP_VERSION,
    }


@router.get("/live")
def liveness():
    return {"status": "ok"}


@router.get("/ready")
def readiness():
    return {"status": "ok"}
