"""Domain errors and their HTTP mapping.

Every failure leaves the API as ``{"error": "<message>"}`` with the status code
of the matching exception class.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class GymTrackerError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GymTrackerError):
    """Missing or malformed input. Request body and path validation failures map here too."""

    status_code = 400


class Unauthorized(GymTrackerError):
    """Missing credential or failed login."""

    status_code = 401


class Forbidden(GymTrackerError):
    """Valid credential that does not grant access to the resource."""

    status_code = 403


class NotFound(GymTrackerError):
    status_code = 404


class Conflict(GymTrackerError):
    """Duplicate of a unique resource (username, email, closed workout)."""

    status_code = 409


class StoreError(GymTrackerError):
    """Underlying database failure; message is passed through for diagnostics."""

    status_code = 500


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def _gymtracker_error_handler(request: Request, exc: GymTrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, detail, headers=getattr(exc, "headers", None))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationError.status_code, _format_validation_errors(exc))


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    orig = getattr(exc, "orig", None)
    return error_response(500, str(orig) if orig is not None else str(exc))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the ``{"error": ...}`` handlers on the app."""
    app.add_exception_handler(GymTrackerError, _gymtracker_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
