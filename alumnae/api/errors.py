"""Exception handlers rendering every error as ``{"success": false, "message": ...}``."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)

STORE_ERROR_MESSAGE = "Server error. Please try again later."


def _error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert HTTPException, keeping headers such as WWW-Authenticate."""
    assert isinstance(exc, HTTPException)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(exc.status_code, message, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report the first invalid field as a 400 with a field-level message."""
    assert isinstance(exc, RequestValidationError)
    errors = exc.errors()
    if not errors:
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request data")

    error = errors[0]
    field = ".".join(str(p) for p in error.get("loc", []) if p != "body") or "body"
    return _error_response(
        status.HTTP_400_BAD_REQUEST, f"{field}: {error.get('msg', 'invalid value')}"
    )


async def store_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Backing store failures surface as a generic 500, never retried."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, STORE_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
