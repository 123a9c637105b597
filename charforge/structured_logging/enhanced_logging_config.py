"""
Enhanced structlog-based logging configuration for CharForge.

This module is the main entry point for the logging system: it wires the
processor chain (redaction, correlation ids, request context), the file
handlers and uvicorn's loggers together. Application code obtains loggers
exclusively through ``get_logger``.
"""

import json
import logging
import re
from typing import Any, cast

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

from .logging_context import bind_request_context as _bind_request_context
from .logging_context import clear_request_context as _clear_request_context
from .logging_context import get_current_context as _get_current_context
from .logging_file_setup import remove_file_handlers, setup_enhanced_file_logging
from .logging_processors import add_correlation_id, sanitize_sensitive_data
from .logging_utilities import detect_environment

# Re-exported so callers only need this module
bind_request_context = _bind_request_context
clear_request_context = _clear_request_context
get_current_context = _get_current_context

# Infrastructure code may use structlog.get_logger() directly; everything else
# goes through get_logger() below.
logger = structlog.get_logger(__name__)

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class _LoggingState:  # pylint: disable=too-few-public-methods
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    signature: str | None = None


_logging_state = _LoggingState()


def _strip_ansi_renderer(bound_logger: Any, name: str, event_dict: dict[str, Any]) -> str:
    """Render key=value pairs with ANSI escape sequences removed."""
    formatted = structlog.processors.KeyValueRenderer(key_order=["event"])(bound_logger, name, event_dict)
    return _ANSI_ESCAPE.sub("", formatted)


def configure_enhanced_structlog(
    environment: str | None = None,
    log_level: str = "INFO",
    log_config: dict[str, Any] | None = None,
) -> None:
    """
    Configure structlog with redaction, correlation ids and request context.

    Args:
        environment: Environment name (auto-detected if None)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_config: The "logging" section of the legacy config dict
    """
    if environment is None:
        environment = detect_environment()

    processors = [
        # Context variables first so request-bound values are visible to the rest
        merge_contextvars,
        sanitize_sensitive_data,
        add_correlation_id,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _strip_ansi_renderer,
    ]

    if log_config and not log_config.get("disable_logging", False):
        setup_enhanced_file_logging(environment, log_config, log_level)
    else:
        remove_file_handlers()
        logging.getLogger().setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_enhanced_logging(config: dict[str, Any], *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from the legacy config dictionary.

    Repeated calls with any configuration are no-ops unless force_reconfigure
    is set.

    Args:
        config: Application configuration dictionary (AppConfig.to_legacy_dict())
        force_reconfigure: When True, tear down existing handlers before reconfiguring
    """
    config_signature = json.dumps(config, sort_keys=True, default=str)

    if _logging_state.initialized and not force_reconfigure:
        get_logger(__name__).debug(
            "setup_enhanced_logging skipped; logging system already initialized",
            config_signature=_logging_state.signature,
        )
        return

    logging_config = config.get("logging", {})
    environment = logging_config.get("environment", detect_environment())
    log_level = logging_config.get("level", "INFO")

    configure_enhanced_structlog(environment, log_level, logging_config)

    if not logging_config.get("disable_logging", False):
        _configure_enhanced_uvicorn_logging()
        get_logger(__name__).info(
            "Enhanced logging system initialized",
            environment=environment,
            log_level=log_level,
            log_base=logging_config.get("log_base", "logs"),
        )

    _logging_state.initialized = True
    _logging_state.signature = config_signature


def _configure_enhanced_uvicorn_logging() -> None:
    """Route uvicorn's loggers through the root handlers."""
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    get_logger("uvicorn.enhanced").info("Enhanced uvicorn logging configured")


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    This is the public API for obtaining loggers. All application code
    should use this function rather than calling structlog.get_logger()
    directly.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def log_exception_once(
    bound_logger: BoundLogger,
    level: str,
    message: str,
    *,
    exc: Exception | None = None,
    mark_logged: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log an exception once, respecting exceptions that have already been logged.

    Args:
        bound_logger: Structlog bound logger instance.
        level: Logging level to use (for example, "error" or "warning").
        message: Log message to emit.
        exc: Optional exception to include in the log entry.
        mark_logged: When True, mark the exception as logged to prevent duplicates.
        **kwargs: Additional key-value pairs for structured logging.
    """
    if exc is not None:
        if getattr(exc, "already_logged", False):
            return
        kwargs.setdefault("error_type", type(exc).__name__)
        kwargs.setdefault("error", str(exc))

    log_method = getattr(bound_logger, level.lower(), bound_logger.error)
    log_method(message, **kwargs)

    if exc is not None and mark_logged:
        marker = getattr(exc, "mark_logged", None)
        if callable(marker):
            marker()  # pylint: disable=not-callable
        else:
            cast(Any, exc).already_logged = True
