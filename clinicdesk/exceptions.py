"""
Global exception handlers and custom exception classes.

Every failure leaving the API is rendered in the same envelope shape as a
successful response: ``{"success": false, "data": null, "message": ..., "error": kind}``.
"""
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from .core.envelope import fail

# Set up logging
logger = logging.getLogger(__name__)

class AppException(Exception):
    """
    Base exception class for application-specific exceptions.

    Args:
        status_code: HTTP status code the failure is reported with
        detail: Human readable message
        kind: Stable machine readable error kind
    """
    kind = "error"

    def __init__(self, status_code: int, detail: str, kind: str = None):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        if kind:
            self.kind = kind


class ValidationFailedException(AppException):
    """Raised when required input is missing or malformed."""
    kind = "validation"

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class RecordNotFoundException(AppException):
    """Raised when a requested record does not exist."""
    kind = "not_found"

    def __init__(self, detail: str = "Record not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class ConflictException(AppException):
    """Raised when a write would violate a uniqueness or integrity rule."""
    kind = "conflict"

    def __init__(self, detail: str = "Record already exists"):
        super().__init__(status.HTTP_409_CONFLICT, detail)


class InsufficientStockException(AppException):
    """Raised when a dispense asks for more than is in stock."""
    kind = "insufficient_stock"

    def __init__(self, available: int, requested: int, item: str = "medicine"):
        self.available = available
        self.requested = requested
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"Not enough {item} in stock. Available: {available}, Requested: {requested}"
        )


class InvalidCredentialsException(AppException):
    """Raised when a login attempt fails."""
    kind = "invalid_credentials"

    def __init__(self, detail: str = "Invalid username or password"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class PermissionDeniedException(AppException):
    """Raised when a staff member lacks access to a module."""
    kind = "permission_denied"

    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class UnsupportedFormatException(AppException):
    """Raised for export formats that are recognised but not available."""
    kind = "unsupported"

    def __init__(self, detail: str = "Format not supported"):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class BackendException(AppException):
    """Raised when the database rejects or fails a query."""
    kind = "backend"

    def __init__(self, detail: str = "A database error occurred"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


_HTTP_KINDS = {
    status.HTTP_400_BAD_REQUEST: "validation",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "permission_denied",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Envelope with success=false
    """
    if exc.status_code >= 500:
        logger.error(f"Application error on {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"Request to {request.url.path} failed ({exc.kind}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=fail(exc.kind, exc.detail)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for framework raised HTTP errors (missing token, unknown route).

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Envelope with success=false
    """
    logger.warning(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    kind = _HTTP_KINDS.get(exc.status_code, "error")
    return JSONResponse(
        status_code=exc.status_code,
        content=fail(kind, str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Envelope with validation details
    """
    logger.error(f"Validation error: {exc.errors()}")
    content = fail("validation", "Validation error")
    content["errors"] = jsonable_encoder(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=content
    )


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
