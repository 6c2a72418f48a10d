"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskline.core.config import get_settings
from taskline.domain.exceptions import TasklineException

logger = logging.getLogger(__name__)

# Domain error_code -> HTTP status. Conflicts are retryable (409); a state or
# reference problem is unprocessable (422); storage failures are opaque 500s.
_ERROR_CODE_STATUS: dict[str, int] = {
    "TASK_NOT_FOUND_OR_CONFLICT": 409,
    "INVALID_TRANSITION": 422,
    "INVALID_REFERENCE": 422,
    "VALIDATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "STORAGE_ERROR": 500,
}


def status_for(exc: TasklineException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _taskline_exception_handler(
    request: Request, exc: TasklineException
) -> JSONResponse:
    """Return JSON from TasklineException.to_dict() with the mapped status code."""
    status = status_for(exc)
    content = exc.to_dict()
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message, exc_info=exc)
        if not get_settings().debug:
            content["details"] = {}
    return JSONResponse(status_code=status, content=content)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: TasklineException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(TasklineException, _taskline_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
