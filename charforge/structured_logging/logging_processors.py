"""
Logging processors for structlog event processing.

This module provides processors for sanitizing sensitive data and adding
correlation IDs to every event.
"""

import re
import uuid
from typing import Any

# These patterns match whole words or specific suffixes/prefixes
SENSITIVE_PATTERNS = [
    r"\bpassword\b",
    r"\bhashed_password\b",
    r"\btoken\b",
    r"\baccess_token\b",
    r"\bsecret\b",
    r"_secret\b",
    r"_key\b",
    r"^key$",
    r"\bcredential\b",
    r"\bjwt\b",
    r"\bbearer\b",
    r"\bauthorization\b",
]

# Never redacted even though they match a pattern above
SAFE_FIELDS = {
    "ability_key",
    "category_key",
}


def _is_sensitive(key: str) -> bool:
    key_lower = key.lower()
    if key_lower in SAFE_FIELDS:
        return False
    return any(re.search(pattern, key_lower) for pattern in SENSITIVE_PATTERNS)


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive data from log entries.

    Redacts passwords, tokens and credentials (recursively through nested
    dictionaries) so they never reach a log file.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """

    def sanitize_dict(d: dict[str, Any]) -> dict[str, Any]:
        sanitized: dict[str, Any] = {}
        for key, value in d.items():
            if isinstance(value, dict):
                sanitized[key] = sanitize_dict(value)
            elif _is_sensitive(str(key)):
                sanitized[key] = "[REDACTED]"
            else:
                sanitized[key] = value
        return sanitized

    return sanitize_dict(event_dict)


def add_correlation_id(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Add a correlation ID to log entries if not already present.

    Request handlers bind one through the logging context; events emitted
    outside a request get a fresh one.
    """
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = str(uuid.uuid4())
    return event_dict
