"""
Centralized error handling for the CharForge FastAPI application.

Domain errors, HTTP exceptions and unexpected exceptions are all turned into
the standard ``{"error": {...}}`` body built by
``error_types.create_standard_error_response``. Tracebacks never reach the
client.
"""

# pylint: disable=too-many-return-statements

import traceback
from typing import Any

import bleach
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error_types import ErrorMessages, ErrorSeverity, ErrorType, create_standard_error_response
from .exceptions import (
    AuthenticationError,
    CharForgeError,
    ConfigurationError,
    DatabaseError,
    IncompleteAssignmentError,
    LoggedHTTPException,
    NetworkError,
    ResourceNotFoundError,
    SelectionLimitError,
    ValidationError,
    create_error_context,
    handle_exception,
)
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

# Ordered most specific first; lookups walk the exception's MRO
_ERROR_TYPE_MAPPING: dict[type, ErrorType] = {
    SelectionLimitError: ErrorType.SELECTION_LIMIT_EXCEEDED,
    IncompleteAssignmentError: ErrorType.INCOMPLETE_ASSIGNMENT,
    AuthenticationError: ErrorType.AUTHENTICATION_FAILED,
    ValidationError: ErrorType.VALIDATION_ERROR,
    ResourceNotFoundError: ErrorType.RESOURCE_NOT_FOUND,
    DatabaseError: ErrorType.DATABASE_ERROR,
    NetworkError: ErrorType.NETWORK_ERROR,
    ConfigurationError: ErrorType.CONFIGURATION_ERROR,
}

_SEVERITY_MAPPING: dict[type, ErrorSeverity] = {
    AuthenticationError: ErrorSeverity.LOW,
    ValidationError: ErrorSeverity.LOW,
    ResourceNotFoundError: ErrorSeverity.LOW,
    DatabaseError: ErrorSeverity.HIGH,
    NetworkError: ErrorSeverity.HIGH,
    ConfigurationError: ErrorSeverity.CRITICAL,
}

_STATUS_CODE_MAPPING: dict[type, int] = {
    AuthenticationError: 401,
    ValidationError: 400,
    ResourceNotFoundError: 404,
    NetworkError: 502,
    DatabaseError: 500,
    ConfigurationError: 500,
}

_SAFE_DETAIL_KEYS = {
    "auth_type",
    "operation",
    "table",
    "field",
    "value",
    "limit",
    "unassigned",
    "config_key",
    "connection_type",
    "resource_type",
    "resource_id",
}

_UNSAFE_DETAIL_PATTERNS = [
    "password",
    "secret",
    "key",
    "token",
    "credential",
    "path",
    "file",
    "sql",
    "query",
    "stack",
    "trace",
    "internal",
    "debug",
]


class ErrorResponse:
    """Standardized error response format."""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        error_type: ErrorType,
        message: str,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    ):
        self.error_type = error_type
        self.message = message
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.status_code = status_code
        self.severity = severity

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return create_standard_error_response(
            self.error_type,
            self.message,
            self.user_friendly,
            self.details,
            self.severity,
        )

    def to_response(self) -> JSONResponse:
        """Convert to FastAPI JSONResponse."""
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


def _lookup(mapping: dict[type, Any], error: Exception, default: Any) -> Any:
    for klass in type(error).__mro__:
        if klass in mapping:
            return mapping[klass]
    return default


def create_error_response(error: CharForgeError) -> ErrorResponse:
    """
    Create a standardized error response from a CharForge error.

    Details are only exposed for client errors (4xx) and only for keys known
    to be safe.
    """
    status_code = _lookup(_STATUS_CODE_MAPPING, error, 500)

    details: dict[str, Any] = {}
    if status_code < 500:
        details = {
            key: _sanitize_detail_value(value) for key, value in error.details.items() if _is_safe_detail_key(key)
        }

    # Server-side failures never echo their technical message
    user_friendly = error.user_friendly
    if status_code >= 500 and user_friendly == error.message:
        user_friendly = ErrorMessages.INTERNAL_ERROR
    message = error.message if status_code < 500 else user_friendly

    return ErrorResponse(
        error_type=_lookup(_ERROR_TYPE_MAPPING, error, ErrorType.INTERNAL_ERROR),
        message=message,
        details=details,
        user_friendly=user_friendly,
        status_code=status_code,
        severity=_lookup(_SEVERITY_MAPPING, error, ErrorSeverity.MEDIUM),
    )


async def charforge_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle CharForge domain exceptions."""
    if not isinstance(exc, CharForgeError):
        return await general_exception_handler(request, exc)
    if not exc.context.request_id:
        exc.context.request_id = str(request.url)

    error_response = create_error_response(exc)

    logger.info(
        "CharForge exception handled",
        error_type=exc.__class__.__name__,
        path=str(request.url),
        method=request.method,
        status_code=error_response.status_code,
    )

    return error_response.to_response()


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions as internal errors."""
    context = create_error_context(
        request_id=str(request.url),
        metadata={
            "path": str(request.url),
            "method": request.method,
            "user_agent": request.headers.get("user-agent", ""),
        },
    )

    charforge_error = handle_exception(exc, context)
    error_response = create_error_response(charforge_error)

    logger.error(
        "Unhandled exception converted to CharForge error",
        original_type=type(exc).__name__,
        original_message=str(exc),
        charforge_error_type=charforge_error.__class__.__name__,
        path=str(request.url),
        method=request.method,
        status_code=error_response.status_code,
        traceback=traceback.format_exc(),
    )

    return error_response.to_response()


def _error_type_for_status(status_code: int) -> tuple[ErrorType, str]:
    if status_code == 401:
        return ErrorType.AUTHENTICATION_FAILED, ErrorMessages.AUTHENTICATION_REQUIRED
    if status_code == 403:
        return ErrorType.AUTHORIZATION_DENIED, ErrorMessages.AUTHENTICATION_REQUIRED
    if status_code == 404:
        return ErrorType.RESOURCE_NOT_FOUND, ErrorMessages.RESOURCE_NOT_FOUND
    if status_code in (400, 422):
        return ErrorType.VALIDATION_ERROR, ErrorMessages.INVALID_INPUT
    return ErrorType.INTERNAL_ERROR, ErrorMessages.INTERNAL_ERROR


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle FastAPI/Starlette HTTP exceptions, including LoggedHTTPException.

    A string detail is treated as the user-facing message, since endpoints
    raise HTTP exceptions with messages written for the user.
    """
    if not isinstance(exc, StarletteHTTPException):
        return await general_exception_handler(request, exc)
    error_type, fallback_message = _error_type_for_status(exc.status_code)
    user_friendly = exc.detail if isinstance(exc.detail, str) and exc.detail else fallback_message

    error_response = create_standard_error_response(
        error_type=error_type,
        message=str(exc.detail),
        user_friendly=user_friendly,
        details={"status_code": exc.status_code},
        severity=ErrorSeverity.MEDIUM,
    )

    # LoggedHTTPException already logged itself
    if not isinstance(exc, LoggedHTTPException):
        logger.warning(
            "HTTP exception handled",
            status_code=exc.status_code,
            detail=exc.detail,
            path=str(request.url),
            method=request.method,
            error_type=error_type.value,
        )

    return JSONResponse(status_code=exc.status_code, content=error_response, headers=getattr(exc, "headers", None))


def register_error_handlers(app: Any) -> None:
    """
    Register all error handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(CharForgeError, charforge_exception_handler)
    app.add_exception_handler(LoggedHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Error handlers registered with FastAPI application")


def _is_safe_detail_key(key: str) -> bool:
    """Check if a detail key is safe to expose to users."""
    if key in _SAFE_DETAIL_KEYS:
        return True
    key_lower = key.lower()
    return not any(pattern in key_lower for pattern in _UNSAFE_DETAIL_PATTERNS)


def _sanitize_detail_value(value: Any) -> Any:
    """
    Sanitize a detail value to prevent information exposure.

    Strings are stripped of HTML with bleach and truncated.
    """
    if isinstance(value, str):
        if any(pattern in value.lower() for pattern in ["traceback", "file:", "line:"]):
            return "[REDACTED]"
        sanitized = bleach.clean(value, tags=[], attributes={}, strip=True, strip_comments=True)
        if len(sanitized) > 100:
            return sanitized[:100] + "..."
        return sanitized
    if isinstance(value, bool | int | float) or value is None:
        return value
    if isinstance(value, dict):
        return {k: _sanitize_detail_value(v) for k, v in value.items() if _is_safe_detail_key(k)}
    if isinstance(value, list):
        return [_sanitize_detail_value(v) for v in value]
    return _sanitize_detail_value(str(value))
