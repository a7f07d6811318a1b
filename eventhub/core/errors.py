"""Exception handlers rendering every failure as ``{"error": "<message>"}``.

Register them in main.py:

    from eventhub.core.errors import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.services.exceptions import EventError
from eventhub.services.validation import (
    CAPACITY_MESSAGE,
    DATE_MESSAGE,
    text_field_message,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first framework validation error into a client message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = tuple(first.get("loc", ()))

    if loc and loc[0] == "path":
        return "Invalid event id"
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    if loc == ("body",):
        return "Request body must be a JSON object"
    if len(loc) >= 2 and loc[0] == "body":
        field = str(loc[1])
        if field == "capacity":
            return CAPACITY_MESSAGE
        if field == "date":
            return DATE_MESSAGE
        return text_field_message(field)
    return str(first.get("msg", "Invalid request"))


async def event_error_handler(request: Request, exc: EventError) -> JSONResponse:
    """Handle domain errors raised by the services and stores."""
    if exc.status_code >= 500:
        # the store already logged the original error
        return error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)
    logger.warning(
        "Event error: %s (status=%d, kind=%s, path=%s)",
        exc.message,
        exc.status_code,
        exc.kind,
        request.url.path,
    )
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTPExceptions (unknown routes, wrong methods) with the standard body."""
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is a 400, not FastAPI's default 422."""
    message = describe_validation_error(exc)
    logger.warning("Rejected request: %s (path=%s)", message, request.url.path)
    return error_response(400, message)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions without leaking them to the client."""
    logger.exception("Unhandled exception: %s (path=%s)", exc, request.url.path)
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(EventError, event_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
