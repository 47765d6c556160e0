"""
Error Taxonomy
Broker Relay

Every failure a route can surface is one of three kinds:
- bad_request: missing or invalid caller input (400)
- upstream_error: a broker call failed (500)
- data_source_error: the security master is missing or malformed (500)

Handlers registered on the application render them as
``{"message": ..., "kind": ...}`` and log them server-side.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class ErrorKind(str, Enum):
    """Machine-readable error kinds."""
    BAD_REQUEST = "bad_request"
    UPSTREAM_ERROR = "upstream_error"
    DATA_SOURCE_ERROR = "data_source_error"


class RelayError(Exception):
    """Base class for errors rendered as JSON error responses."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    status_code: int = 500

    def __init__(self, message: str, cause: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "kind": self.kind.value}


class BadRequestError(RelayError):
    """Missing or invalid request parameters."""

    kind = ErrorKind.BAD_REQUEST
    status_code = 400


class UpstreamError(RelayError):
    """
    A downstream broker call failed.

    ``upstream`` holds the broker's error payload when one was returned, and
    is echoed to the caller under ``error``.
    """

    kind = ErrorKind.UPSTREAM_ERROR
    status_code = 500

    def __init__(self, message: str, upstream: Optional[Any] = None, cause: Optional[str] = None):
        super().__init__(message, cause=cause)
        self.upstream = upstream

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.upstream is not None:
            data["error"] = self.upstream
        return data


class DataSourceError(RelayError):
    """The security master could not be opened or parsed."""

    kind = ErrorKind.DATA_SOURCE_ERROR
    status_code = 500


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    if exc.status_code >= 500:
        detail = exc.cause or exc.message
        logger.error(f"{request.method} {request.url.path} failed [{exc.kind.value}]: {detail}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        parts = [p for p in (location, first.get("msg", "")) if p]
        message = "Invalid request: " + " ".join(parts) if parts else "Invalid request"
    else:
        message = "Invalid request"
    return await relay_error_handler(request, BadRequestError(message))


def register_error_handlers(application: FastAPI) -> None:
    """Attach the relay's JSON error handlers to an application."""
    application.add_exception_handler(RelayError, relay_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
