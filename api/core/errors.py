"""
Service-level errors and the FastAPI handlers that render them.

Every error body shares the `{"success": false, ...}` envelope used by the
successful responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(RuntimeError):
    """
    A request could not be completed because a collaborator failed.

    `error` is the short, client-facing summary; `message` carries the
    underlying cause.
    """

    def __init__(self, error: str, *, message: str = "", status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(error)
        self.error = error
        self.message = message
        self.status_code = status_code


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.error(
        "service_error path=%s error=%s message=%s",
        request.url.path,
        exc.error,
        exc.message,
        exc_info=exc.__cause__,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.error, "message": exc.message},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": detail},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
