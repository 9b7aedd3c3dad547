"""
Domain exceptions for Rankboard.

Purpose
-------
Define the domain-specific exception hierarchy raised by leaderboard services
for caller errors (invalid offsets, page indices). Absence of a member is
never an exception: it is reported as a ``None`` result.

Design Notes
------------
- All domain exceptions inherit from `RankboardDomainException`.
- `ValidationError` also subclasses `ValueError` so plain callers can catch it
  without importing this module.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from rankboard.core.exceptions import ErrorSeverity


class RankboardDomainException(Exception):
    """
    Base exception for all Rankboard domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        error_code: Optional code for programmatic handling
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"


class ValidationError(RankboardDomainException, ValueError):
    """
    Raised when a query argument fails domain validation.

    Args:
        field: Name of the argument that failed validation
        message: Explanation of why validation failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.validation_message = message
        error_message = f"Validation error for {field}: {message}"
        super().__init__(
            error_message,
            details={
                "field": field,
                "validation_message": message,
            },
            error_code="VALIDATION_ERROR",
        )


__all__ = [
    "RankboardDomainException",
    "ValidationError",
]
