"""FastAPI application for the in-memory todo API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_api import config
from todo_api.errors import register_error_handlers
from todo_api.logging_config import setup_logging
from todo_api.middleware import REQUEST_ID_HEADER, register_request_id_middleware
from todo_api.routes.health import router as health_router
from todo_api.routes.tasks import router as tasks_router
from todo_api.store import TaskStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup and log the lifecycle."""
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)
    logger.info(
        "Todo API started env=%s api_version=%s", config.ENV, config.API_VERSION
    )
    yield
    logger.info("Todo API shutting down")


def create_app(store: Optional[TaskStore] = None) -> FastAPI:
    """Build the app around *store*, or a fresh empty store."""
    app = FastAPI(title="Todo API", version=config.APP_VERSION, lifespan=lifespan)
    app.state.store = store if store is not None else TaskStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    )
    register_request_id_middleware(app)
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(tasks_router)
    return app


app = create_app()
