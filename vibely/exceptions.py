"""Custom exceptions for Vibely.

Defines specific exception types for better error handling and reporting.
"""

import math
from typing import Any, Dict, Optional


def _json_safe(value: Any) -> Any:
    # JSON has no literal for NaN or infinity
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


class VibelyException(Exception):
    """Base exception for Vibely errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class InvalidArgumentError(VibelyException):
    """Raised when an argument value is outside what the operation accepts."""

    def __init__(self, argument: str, value: Any, reason: str):
        message = f"Invalid value for '{argument}': {value!r} ({reason})"
        super().__init__(
            message=message,
            status_code=400,
            details={"argument": argument, "value": _json_safe(value), "reason": reason},
        )


class UserNotFoundError(VibelyException):
    """Raised when a user does not exist in storage."""

    def __init__(self, user_id: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"User {user_id} not found",
            status_code=404,
            details=details or {"user_id": user_id},
        )


class VenueNotFoundError(VibelyException):
    """Raised when a venue does not exist in storage."""

    def __init__(self, venue_id: int, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Cafe {venue_id} not found",
            status_code=404,
            details=details or {"venue_id": venue_id},
        )
