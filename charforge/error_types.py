"""
Centralized error types and constants for CharForge.

This module defines standardized error types and user-facing messages so
every layer reports errors in the same shape.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Standardized error types for consistent categorization."""

    # Authentication and Authorization
    AUTHENTICATION_FAILED = "authentication_failed"
    AUTHORIZATION_DENIED = "authorization_denied"
    INVALID_TOKEN = "invalid_token"

    # Validation Errors
    VALIDATION_ERROR = "validation_error"
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    SELECTION_LIMIT_EXCEEDED = "selection_limit_exceeded"
    INCOMPLETE_ASSIGNMENT = "incomplete_assignment"

    # Resource Errors
    RESOURCE_NOT_FOUND = "resource_not_found"
    RESOURCE_ALREADY_EXISTS = "resource_already_exists"

    # Database Errors
    DATABASE_ERROR = "database_error"

    # Network and Communication
    NETWORK_ERROR = "network_error"

    # Configuration and System
    CONFIGURATION_ERROR = "configuration_error"
    INTERNAL_ERROR = "internal_error"


class ErrorSeverity(Enum):
    """Error severity levels for logging and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def create_standard_error_response(
    error_type: ErrorType,
    message: str,
    user_friendly: str | None = None,
    details: dict[str, Any] | None = None,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
) -> dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        error_type: The type of error
        message: Technical error message
        user_friendly: User-friendly error message (optional)
        details: Additional error details (optional)
        severity: Error severity level (optional)

    Returns:
        Standardized error response dictionary
    """
    return {
        "error": {
            "type": error_type.value,
            "message": message,
            "user_friendly": user_friendly or message,
            "details": details or {},
            "severity": severity.value,
            "timestamp": datetime.now(UTC).isoformat(),
        }
    }


class ErrorMessages:
    """Common error messages for consistent user experience."""

    # Authentication
    AUTHENTICATION_REQUIRED = "Authentication required"
    INVALID_CREDENTIALS = "Invalid email or password"
    EMAIL_ALREADY_REGISTERED = "A user with this email already exists"

    # Validation
    INVALID_INPUT = "Invalid input provided"
    MISSING_REQUIRED_FIELD = "Required field is missing"
    INCOMPLETE_ASSIGNMENT = "Please assign a score to every ability"
    MAX_LEVEL_REACHED = "Character is already at the maximum level of 20"

    # Resources
    RESOURCE_NOT_FOUND = "Resource not found"
    CHARACTER_NOT_FOUND = "Character not found"
    REFERENCE_NOT_FOUND = "Reference entry not found"

    # Network
    CATALOG_UNAVAILABLE = "The rules reference service is unavailable. Please try again later."

    # System
    INTERNAL_ERROR = "An internal error occurred"
