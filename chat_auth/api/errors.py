"""
API exception handlers.

Renders every error the HTTP layer produces in the shared
{"success": false, "error": "..."} envelope:

- HTTPException raised by routes (status and message chosen by the route)
- RequestValidationError from FastAPI, turned into one human readable
  message describing the first problem found
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_auth.api.models import ErrorResponse

logger = logging.getLogger(__name__)

TYPE_ERROR_SUFFIXES = ("_type", "_parsing")


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


def _expected_type(kind: str) -> str:
    """Expected type named by a pydantic error type, e.g. int_parsing -> int."""
    for suffix in TYPE_ERROR_SUFFIXES:
        if kind.endswith(suffix):
            return kind[: -len(suffix)]
    return kind


def validation_message(exc: RequestValidationError) -> str:
    """
    Describe the first validation error in a sentence.

    Args:
        exc: RequestValidationError from FastAPI

    Returns:
        Message naming the offending field where there is one
    """
    errors = exc.errors()
    if not errors:
        return "Unable to process request body."

    error = errors[0]
    loc = [str(part) for part in error.get("loc", ())]
    kind = error.get("type", "")
    source = loc[0] if loc else ""
    field = loc[-1] if len(loc) > 1 else ""

    if kind == "missing":
        if source == "body" and not field:
            return "Expected non-empty request body."
        if source == "query":
            return f"Missing required query parameter {field}."
        if source == "body":
            return f"Missing required field {field} in request body."
    if field and kind.endswith(TYPE_ERROR_SUFFIXES):
        return f"Invalid data type {_expected_type(kind)} for field {field}."
    if field and (kind == "value_error" or kind.startswith("string_")):
        return f"Invalid value for field {field}."
    return "Unable to process request body."


def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException in the error envelope."""
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors in the error envelope (422)."""
    message = validation_message(exc)
    logger.warning("Request validation failed on %s: %s", request.url.path, message)
    return _error_response(422, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
