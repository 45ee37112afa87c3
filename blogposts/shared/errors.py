"""
Secure Error Handling

Translates failures into the service's `{"message": ...}` error payloads
without leaking store details to clients. Full causes are logged server-side
under a short error id that is also returned in the X-Error-ID header.
"""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"
NOT_FOUND_MESSAGE = "Not Found"
ERROR_ID_HEADER = "X-Error-ID"


class StoreError(Exception):
    """Any failure reported by the persistence layer."""


def log_and_sanitize_error(error: Exception, context: str) -> tuple[str, str]:
    """
    Log full error details server-side and return the client-safe message.

    Args:
        error: The exception that occurred
        context: Description of what operation failed (e.g., "GET /posts")

    Returns:
        Tuple of (sanitized_message, error_id) for client response
    """
    # Generate unique error ID for correlation
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "%s failed [%s]: %s: %s",
        context,
        error_id,
        type(error).__name__,
        error,
        exc_info=error,
    )

    return SERVER_ERROR_MESSAGE, error_id


def error_response(
    message: str, status_code: int, headers: Optional[dict] = None
) -> JSONResponse:
    """Consistent error payloads across the API."""
    return JSONResponse(
        status_code=status_code,
        content={"message": message},
        headers=headers,
    )


def server_error_response(request: Request, exc: Exception) -> JSONResponse:
    context = f"{request.method} {request.url.path}"
    message, error_id = log_and_sanitize_error(exc, context)
    return error_response(
        message,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers={ERROR_ID_HEADER: error_id},
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Register the handlers shared by every route of the service."""

    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError):
        return server_error_response(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND,
            status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            # Every unmatched method/path pair falls through to the same 404
            return error_response(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)

        detail = exc.detail
        message = (
            detail.get("message") if isinstance(detail, dict) else str(detail)
        ) or "Request failed."
        return error_response(
            message, exc.status_code, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def malformed_body_handler(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request on %s: %s", request.url.path, exc.errors())
        return error_response("Malformed JSON body", status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        return server_error_response(request, exc)
