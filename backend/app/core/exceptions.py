"""
Error taxonomy and exception handlers.

Every failure leaves the API in the same envelope as a success does:
``{"code": -1, "message": "..."}`` with the matching HTTP status.
"""
import logging
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from app.core.utils import format_error

logger = logging.getLogger(__name__)


class GiftBookError(Exception):
    """Base exception for the gift book API."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(GiftBookError):
    """Malformed or missing input."""
    status_code = status.HTTP_400_BAD_REQUEST


class UsernameTaken(GiftBookError):
    """Registration with a username that already exists."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, username: str):
        super().__init__("Username already exists")
        self.username = username


class NoRecords(GiftBookError):
    """Nothing to clear in the caller's ledger."""
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(GiftBookError):
    """
    Missing or unusable bearer credential.

    ``reason`` is one of ``missing``, ``malformed``, ``expired`` or
    ``invalid_signature``; clients only ever see the 401.
    """
    status_code = status.HTTP_401_UNAUTHORIZED

    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"

    def __init__(self, reason: str, message: Optional[str] = None):
        if message is None:
            if reason == self.MISSING:
                message = "Not logged in, please log in first"
            else:
                message = "Token expired or invalid, please log in again"
        super().__init__(message)
        self.reason = reason


class InvalidCredentials(GiftBookError):
    """Unknown username or wrong password."""
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(GiftBookError):
    """Caller does not own the requested record."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(GiftBookError):
    """Unknown resource id."""
    status_code = status.HTTP_404_NOT_FOUND


class StorageFailure(GiftBookError):
    """Underlying store unreachable or a statement failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(f"Server error: {detail}")
        self.detail = detail


def describe_storage_error(exc: SQLAlchemyError) -> str:
    """
    Short diagnostic text for a store error.

    Only the driver's own message is used. ``str(exc)`` would append the
    bound parameters, which may include a password hash.
    """
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return exc.__class__.__name__


async def giftbook_exception_handler(request: Request, exc: GiftBookError) -> JSONResponse:
    """Convert GiftBookError to the response envelope."""
    return JSONResponse(status_code=exc.status_code, content=format_error(exc.message))


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable request bodies as 400 rather than FastAPI's 422."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid value for {field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=format_error(message))


async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface store errors as StorageFailure."""
    failure = StorageFailure(describe_storage_error(exc))
    logger.error(f"Storage failure on {request.method} {request.url.path}: {failure.detail}", exc_info=exc)
    return JSONResponse(status_code=failure.status_code, content=format_error(failure.message))
