"""Application errors and the FastAPI handlers that render them.

Every error response uses the same envelope as successful ones, with
``success`` set to false and an ``error`` object of ``code``, ``message``
and (outside production) ``details``.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api import config
from todo_api.middleware import REQUEST_ID_HEADER
from todo_api.responses import error_body

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error carrying an HTTP status and an error code.

    ``is_operational`` separates expected failures (bad input, missing
    records) from programming errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        code: str,
        is_operational: bool = True,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.is_operational = is_operational
        self.details = details


class NotFoundError(AppError):
    def __init__(self, resource: str, identifier: Optional[str] = None) -> None:
        if identifier:
            message = f"{resource} with ID '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, 404, "NOT_FOUND", True)


def _format_validation_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def _request_id_headers(request: Request) -> Optional[dict]:
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        return None
    return {REQUEST_ID_HEADER: request_id}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = _format_validation_errors(exc)
        logger.warning(
            "Validation error on %s: %s", request.url.path, details,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(
                request, "VALIDATION_ERROR", "Request validation failed", details
            ),
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        extra = {
            "request_id": getattr(request.state, "request_id", None),
            "error_code": exc.code,
        }
        if exc.is_operational:
            logger.warning("Operational error: %s", exc.message, extra=extra)
        else:
            logger.error("Non-operational error: %s", exc.message, extra=extra)

        details = exc.details if not config.is_production() else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, exc.code, exc.message, details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            code = "NOT_FOUND"
            message = f"Route {request.method} {request.url.path} not found"
        else:
            code = "HTTP_ERROR"
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, code, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unexpected error on %s: %s", request.url.path, exc,
            exc_info=True,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        message = (
            "An unexpected error occurred" if config.is_production() else str(exc)
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(request, "INTERNAL_ERROR", message),
            headers=_request_id_headers(request),
        )
