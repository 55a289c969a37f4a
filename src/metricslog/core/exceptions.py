"""
Core Exceptions for the metrics log builder.

This module defines the exception classes raised while building a metrics
report. The exceptions are organized into categories:
- Report Invariant Exceptions
- Collection Exceptions
- Configuration Exceptions

Each exception carries a descriptive message, an error code for programmatic
handling and a context dictionary to aid in troubleshooting.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class MetricsLogError(Exception):
    """Base exception class for all metrics log errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize a metrics log error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional context information for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

        logger.error(f"MetricsLogError: {message}", extra={
            "error_code": error_code,
            "context": context
        })


# Report Invariant Exceptions

class InvariantViolation(MetricsLogError):
    """Raised when a caller breaks a precondition of the report builder.

    Mutating a locked report, locking twice, or encountering an unmapped
    enumeration while strict invariants are enabled all raise this error.
    It is not meant to be recovered from.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            error_code="INVARIANT_VIOLATION",
            context=context,
        )


class ReportLockedError(InvariantViolation):
    """Raised when a locked report receives a mutating call."""

    def __init__(self, operation: str, message: Optional[str] = None):
        """
        Initialize a report locked error.

        Args:
            operation: The mutating operation that was attempted
            message: Optional custom message
        """
        self.operation = operation
        default_message = f"Cannot perform '{operation}' on a locked report"
        super().__init__(message or default_message, context={"operation": operation})


# Collection Exceptions

class MetricsCollectionError(MetricsLogError):
    """Raised when a collector fails unexpectedly while writing a report."""

    def __init__(self, collector: str, message: Optional[str] = None, cause: Optional[Exception] = None):
        """
        Initialize a metrics collection error.

        Args:
            collector: Name of the collector that failed
            message: Optional custom message
            cause: Optional underlying exception that caused this error
        """
        self.collector = collector
        self.cause = cause
        default_message = f"Collector '{collector}' failed"
        if cause:
            default_message += f": {str(cause)}"

        super().__init__(
            message or default_message,
            error_code="METRICS_COLLECTION_ERROR",
            context={"collector": collector, "cause": str(cause) if cause else None}
        )


# Configuration Exceptions

class ConfigurationError(MetricsLogError):
    """Base exception for configuration errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, config_key: str, value: Any, reason: str, message: Optional[str] = None):
        """
        Initialize an invalid configuration error.

        Args:
            config_key: The configuration key with invalid value
            value: The invalid value
            reason: The reason the value is invalid
            message: Optional custom message
        """
        self.config_key = config_key
        self.value = value
        self.reason = reason

        default_message = f"Invalid configuration value for '{config_key}': {value} ({reason})"

        super().__init__(
            message or default_message,
            error_code="INVALID_CONFIGURATION",
            context={"config_key": config_key, "value": str(value), "reason": reason}
        )


# Utility Functions

def format_exception_context(exception: MetricsLogError) -> str:
    """
    Format exception context for logging or display.

    Args:
        exception: The metrics log exception

    Returns:
        Formatted string representation of the exception context
    """
    if not exception.context:
        return exception.message

    context_parts = [f"{key}={value}" for key, value in exception.context.items()]
    return f"{exception.message} [{', '.join(context_parts)}]"
