"""Alumnae API Logging Configuration.

Every record carries the id of the request that produced it and, once the
session guard has resolved a token, the id of the signed-in user. Both live
in context variables set by ``RequestContextMiddleware`` and ``bind_user``,
so login, lockout and revocation events can be traced back to a request
without passing the request around.
"""

import json
import logging
import sys
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from typing import Literal
from uuid import UUID, uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

# Human-readable format for development
DEV_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | req=%(request_id)s user=%(user_id)s | %(message)s"
)


def bind_user(user_id: UUID | str) -> None:
    """Attach the authenticated user to log records for the rest of the request."""
    user_id_var.set(str(user_id))


class RequestContextFilter(logging.Filter):
    """Copy the request and user context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.user_id = user_id_var.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter.

    Fields are serialized with json.dumps() so quotes and newlines in
    messages cannot break the line-per-record output. Context fields are
    omitted when the record was logged outside a request.
    """

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ("request_id", "user_id"):
            value = getattr(record, field, "-")
            if value != "-":
                log_entry[field] = value
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign each request an id, honoring a client-supplied X-Request-ID.

    The id is echoed back in the response header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request_token = request_id_var.set(request_id)
        user_token = user_id_var.set(None)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            user_id_var.reset(user_token)
            request_id_var.reset(request_token)


def setup_logging(
    level: str = "INFO",
    format_type: Literal["structured", "dev"] = "dev",
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format - 'structured' for JSON, 'dev' for readable
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    if format_type == "structured":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEV_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper()))

    # Access lines duplicate the request id logging; aiosqlite is chatty at DEBUG
    for logger_name in ["uvicorn.access", "aiosqlite"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # Keep SQLAlchemy quiet unless debugging
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    )

    logging.getLogger("alumnae").info(f"Logging configured: level={level}, format={format_type}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the alumnae prefix."""
    return logging.getLogger(f"alumnae.{name}")
