"""
Error logging utilities for CharForge.

Standardized helpers that log an error with its context before raising, so
every raise site reports in the same shape.
"""

from typing import Any, NoReturn

from fastapi import Request

from ..exceptions import CharForgeError, ErrorContext, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def log_and_raise(
    exception_class: type[CharForgeError],
    message: str,
    context: ErrorContext | None = None,
    details: dict[str, Any] | None = None,
    user_friendly: str | None = None,
    logger_name: str | None = None,
    **kwargs: Any,
) -> NoReturn:
    """
    Log an error and raise a CharForge exception.

    Args:
        exception_class: The CharForge exception class to raise
        message: Technical error message
        context: Error context information
        details: Additional error details
        user_friendly: User-friendly error message
        logger_name: Specific logger name to use (defaults to current module)
        **kwargs: Extra constructor arguments of the exception class
            (for example operation/table for DatabaseError)

    Raises:
        The specified CharForge exception
    """
    error_logger = get_logger(logger_name) if logger_name else logger

    if context is None:
        context = create_error_context()

    error_logger.error(
        f"Error logged and exception raised: {message}",
        error_type=exception_class.__name__,
        details=details or {},
        user_friendly=user_friendly,
    )

    raise exception_class(
        message,
        context,
        details=details,
        user_friendly=user_friendly,
        **kwargs,
    )


def create_context_from_request(request: Request | None) -> ErrorContext:
    """
    Create error context from a FastAPI request.

    Args:
        request: FastAPI request object (can be None for testing)

    Returns:
        ErrorContext with request information
    """
    if request is None:
        return create_error_context(metadata={"path": "unknown", "method": "unknown"})

    metadata = {
        "path": str(request.url),
        "method": request.method,
        "user_agent": request.headers.get("user-agent", ""),
        "remote_addr": request.client.host if request.client else "",
    }

    user_id = getattr(request.state, "user_id", None)
    correlation_id = getattr(request.state, "correlation_id", None)

    return create_error_context(
        user_id=str(user_id) if user_id else None,
        request_id=correlation_id,
        metadata=metadata,
    )
