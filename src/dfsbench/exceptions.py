"""
Exceptions raised by the dfsbench harness.

The hierarchy mirrors the failure taxonomy of a benchmark run:

- ConfigurationError: malformed input detected before any worker starts
- UnknownOperationError: an operation tag with no registered handler
- OperationIOFailure: a storage backend failure during one operation attempt
- MalformedMetricPayloadError: a value the reducer cannot read as a duration
- IncompatibleMergeError: merging records of different operation/measurement
- InvalidFormatError: a metric key that does not follow the key grammar

Only ConfigurationError and IncompatibleMergeError are meant to escape to
callers; the executor and the reducer recover from the others locally.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "DfsBenchError",
    "ConfigurationError",
    "UnknownOperationError",
    "OperationIOFailure",
    "MalformedMetricPayloadError",
    "IncompatibleMergeError",
    "InvalidFormatError",
]


class DfsBenchError(Exception):
    """Base exception class for all dfsbench errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a dfsbench error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional context information for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class ConfigurationError(DfsBenchError):
    """Raised when the run configuration is invalid."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFIGURATION_ERROR", context=context)


class UnknownOperationError(DfsBenchError):
    """Raised when an operation tag has no registered handler."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Unknown operation type: {operation}",
            error_code="UNKNOWN_OPERATION",
            context={"operation": operation},
        )


class OperationIOFailure(DfsBenchError):
    """Wraps a backend exception raised during one operation attempt."""

    def __init__(self, operation: str, index: int, cause: BaseException):
        self.operation = operation
        self.index = index
        self.cause = cause
        super().__init__(
            f"Failed to execute {operation} at index {index}: {cause}",
            error_code="OPERATION_IO_FAILURE",
            context={"operation": operation, "index": index, "cause": repr(cause)},
        )


class MalformedMetricPayloadError(DfsBenchError):
    """Raised when a reducer value cannot be read as a duration."""

    def __init__(self, payload: Any, reason: str):
        self.payload = payload
        super().__init__(
            f"Malformed metric payload {payload!r}: {reason}",
            error_code="MALFORMED_PAYLOAD",
            context={"payload": repr(payload)},
        )


class IncompatibleMergeError(DfsBenchError):
    """Raised when two records with different keys are merged."""

    def __init__(self, left_key: str, right_key: str):
        super().__init__(
            f"Cannot merge {left_key} with {right_key}: operation and measurement types must match",
            error_code="INCOMPATIBLE_MERGE",
            context={"left": left_key, "right": right_key},
        )


class InvalidFormatError(DfsBenchError):
    """Raised when a metric key does not follow ``TYPE:operation*measurement``."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(
            f"Invalid key format - {reason} - {key!r}",
            error_code="INVALID_FORMAT",
            context={"key": key},
        )
