"""
Exception hierarchy and error handling utilities for CharForge.

Every domain error carries an ErrorContext, a technical message and a
user-friendly message. Errors log themselves on construction; the HTTP layer
(see error_handlers) turns them into consistent JSON responses.
"""

import traceback
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fastapi import HTTPException

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """
    Contextual information for error handling.

    Provides structured context for error reporting and debugging.
    """

    user_id: str | None = None
    character_id: str | None = None
    session_id: str | None = None
    request_id: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "user_id": self.user_id,
            "character_id": self.character_id,
            "session_id": self.session_id,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class CharForgeError(Exception):
    """
    Base exception for all CharForge errors.

    Provides structured error handling with context and metadata
    for proper error categorization and debugging.
    """

    log_level = "error"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize CharForge error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self):
        """Log the error with structured context."""
        log_method = getattr(logger, self.log_level)
        log_method(
            "CharForge error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class AuthenticationError(CharForgeError):
    """Authentication and authorization errors."""

    log_level = "warning"

    def __init__(self, message: str, context: ErrorContext | None = None, auth_type: str = "unknown", **kwargs):
        super().__init__(message, context, **kwargs)
        self.auth_type = auth_type
        self.details["auth_type"] = auth_type


class DatabaseError(CharForgeError):
    """Database operation errors."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table


class ValidationError(CharForgeError):
    """Data validation errors. Always recoverable; surfaced to the user."""

    log_level = "warning"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        field: str | None = None,
        value: Any | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.field = field
        self.value = value
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)


class SelectionLimitError(ValidationError):
    """Raised when adding to a selection set that is already at its class limit."""

    def __init__(self, message: str, context: ErrorContext | None = None, limit: int = 0, **kwargs):
        super().__init__(message, context, **kwargs)
        self.limit = limit
        self.details["limit"] = limit


class IncompleteAssignmentError(ValidationError):
    """Raised when scores are requested before every ability has a pool entry."""

    def __init__(
        self, message: str, context: ErrorContext | None = None, unassigned: list[str] | None = None, **kwargs
    ):
        super().__init__(message, context, **kwargs)
        self.unassigned = unassigned or []
        self.details["unassigned"] = self.unassigned


class ConfigurationError(CharForgeError):
    """Configuration and setup errors."""

    def __init__(self, message: str, context: ErrorContext | None = None, config_key: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class NetworkError(CharForgeError):
    """Network and communication errors, e.g. the reference catalog being unreachable."""

    def __init__(self, message: str, context: ErrorContext | None = None, connection_type: str = "unknown", **kwargs):
        super().__init__(message, context, **kwargs)
        self.connection_type = connection_type
        self.details["connection_type"] = connection_type


class ResourceNotFoundError(CharForgeError):
    """Resource not found errors."""

    log_level = "warning"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type:
            self.details["resource_type"] = resource_type
        if resource_id:
            self.details["resource_id"] = resource_id


class LoggedHTTPException(HTTPException):
    """
    HTTPException that logs itself with structured context.

    Used by endpoints that need a specific status code and detail message
    rather than one derived from a domain error.
    """

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        context: ErrorContext | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.context = context or ErrorContext()
        log_method = logger.error if status_code >= 500 else logger.warning
        log_method(
            "HTTP exception raised",
            status_code=status_code,
            detail=detail,
            context=self.context.to_dict(),
            **kwargs,
        )


def create_error_context(**kwargs) -> ErrorContext:
    """
    Create an error context with the given parameters.

    Args:
        **kwargs: Context parameters

    Returns:
        ErrorContext object
    """
    return ErrorContext(**kwargs)


def handle_exception(exc: Exception, context: ErrorContext | None = None) -> CharForgeError:
    """
    Convert a generic exception to a CharForge error.

    Args:
        exc: The original exception
        context: Error context

    Returns:
        CharForgeError instance
    """
    if isinstance(exc, CharForgeError):
        return exc

    if isinstance(exc, ValueError | TypeError):
        return ValidationError(str(exc), context, details={"original_type": type(exc).__name__})
    elif isinstance(exc, FileNotFoundError):
        return ResourceNotFoundError(str(exc), context, details={"original_type": type(exc).__name__})
    elif isinstance(exc, ConnectionError | TimeoutError):
        return NetworkError(str(exc), context, details={"original_type": type(exc).__name__})
    else:
        return CharForgeError(
            str(exc), context, details={"original_type": type(exc).__name__, "traceback": traceback.format_exc()}
        )
