"""
Context management utilities for structured logging.

Request-scoped values (correlation id, user id, path) are stored in
contextvars so every log line emitted while serving a request carries them.
"""

import uuid
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars


def bind_request_context(
    correlation_id: str | None = None,
    user_id: str | None = None,
    request_id: str | None = None,
    **kwargs: Any,
) -> str:
    """
    Bind request context to the current logging context.

    Args:
        correlation_id: Correlation ID for the request (generated when omitted)
        user_id: Authenticated user ID if known
        request_id: Request ID if available
        **kwargs: Additional context variables

    Returns:
        str: The correlation ID that was bound
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    context_vars = {
        "correlation_id": correlation_id,
        "user_id": user_id,
        "request_id": request_id,
        **kwargs,
    }
    bind_contextvars(**{k: v for k, v in context_vars.items() if v is not None})
    return correlation_id


def clear_request_context() -> None:
    """Clear the current request context from logging."""
    clear_contextvars()


def get_current_context() -> dict[str, Any]:
    """Get the current logging context."""
    return structlog.contextvars.get_contextvars()
