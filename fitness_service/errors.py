"""
Application exception types and the handlers that turn them into the
standard `{success: false, message}` response envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings

logger = logging.getLogger(__name__)


class FitnessError(Exception):
    """Base class for errors that map onto a single HTTP response."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FitnessError):
    """A required field is missing or malformed."""
    status_code = 400


class InvalidInput(ValidationError):
    """A calculation received values it cannot work with."""


class AuthError(FitnessError):
    """Missing, invalid or expired token, or wrong credentials."""
    status_code = 401


class NotFoundError(FitnessError):
    """
    The record does not exist or belongs to another user.

    Both cases produce the same response so that ids of other users'
    records cannot be probed.
    """
    status_code = 404


class UpstreamVendorError(FitnessError):
    """A call to the wearable provider failed."""
    status_code = 400


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Installs the handlers that keep every error response in one shape."""

    @app.exception_handler(FitnessError)
    async def fitness_error_handler(request: Request, exc: FitnessError):
        return _error_response(exc.status_code, exc.message)

    # General exception handler to ensure consistent error responses.
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else first.get("msg")
        else:
            message = "Invalid request"
        return _error_response(400, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"success": False, "message": "Server Error"}
        content["error"] = str(exc) if settings.is_development else "Something went wrong"
        return JSONResponse(status_code=500, content=content)
