"""
Application error taxonomy and the global exception handlers.
Every failure leaves the API as the same JSON envelope:
{"success": false, "error": <message>, "details": <optional>}.
"""

import enum
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.core.config import settings


logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Error kind enumeration."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AppException(Exception):
    """Base application exception."""

    kind = ErrorKind.INTERNAL
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationFailedError(AppException):
    kind = ErrorKind.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationError(AppException):
    kind = ErrorKind.AUTHENTICATION
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class MissingCredentialsError(AuthenticationError):
    default_message = "Access token required"


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid token"


class ExpiredTokenError(AuthenticationError):
    default_message = "Token expired"


class UnauthorizedAccountError(AuthenticationError):
    default_message = "Account not found or inactive"


class AuthorizationError(AppException):
    kind = ErrorKind.AUTHORIZATION
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied. Administrator role required"


class NotFoundError(AppException):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppException):
    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Duplicate resource"


class InternalError(AppException):
    pass


def error_response(
    status_code: int,
    message: str,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the error envelope."""
    content: Dict[str, Any] = {"success": False, "error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle custom application exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Application exception: {exc.message}",
        extra={
            "kind": exc.kind.value,
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return error_response(exc.status_code, exc.message, exc.details, headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"Route {request.url.path} not found"
    return error_response(exc.status_code, str(message), headers=getattr(exc, "headers", None))


def _serialize_validation_errors(errors: list) -> list:
    """Flatten pydantic errors into one entry per offending field."""
    serialized = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        serialized.append(
            {
                "field": ".".join(location) or "body",
                "message": error.get("msg", "Invalid value"),
            }
        )
    return serialized


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    serialized_errors = _serialize_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {serialized_errors}",
        extra={
            "path": request.url.path,
            "errors": serialized_errors,
        },
    )

    return error_response(
        ValidationFailedError.status_code,
        ValidationFailedError.default_message,
        serialized_errors,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Translate constraint violations from the persistence layer."""
    logger.warning(
        f"Integrity error: {exc.orig}",
        extra={"path": request.url.path},
    )
    return error_response(ConflictError.status_code, ConflictError.default_message)


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    """Translate a missing row from the persistence layer."""
    return error_response(NotFoundError.status_code, NotFoundError.default_message)


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit rejections from slowapi; its middleware calls this synchronously."""
    logger.warning(
        "Rate limit exceeded",
        extra={"path": request.url.path, "limit": str(exc.detail)},
    )
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests from this IP, please try again later",
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    content: Dict[str, Any] = {"success": False, "error": InternalError.default_message}
    if settings.is_development:
        content["detail"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, general_exception_handler)
