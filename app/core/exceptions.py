"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A single place where error kinds map to HTTP status codes

Exception Hierarchy:
    BaseApplicationError (base, 500)
    ├── ValidationError - Missing or malformed request input (400)
    └── ExternalServiceError - Third-party service rejected or failed a call (500)

Usage:
    from core.exceptions import ValidationError, ExternalServiceError

    # Raise with message only
    raise ValidationError("Missing fields")

    # Raise with additional details
    raise ValidationError(
        "Missing fields",
        details={"customerId": ["This field is required."]},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.status_code)

Note:
    Views inheriting core.view_mixins.ApplicationErrorMixin get this
    conversion for free.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, upstream codes, etc.)
        status_code: HTTP status used when the error reaches a view
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Missing fields",
                "error_code": "VALIDATION_ERROR",
                "details": {"amount": ["This field is required."]}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when request input is missing or invalid.

    Always client-caused and never retried. Raised before any call to an
    external service is made.

    Example:
        if not payment_intent_id:
            raise ValidationError(
                "Missing paymentIntentId",
                details={"paymentIntentId": ["This field is required."]},
            )
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Third-party API rejections (invalid account, bad currency, ...)
    - Network failures and timeouts
    - Unknown resources on the remote side

    The upstream message is kept verbatim in ``message`` so callers see
    what the provider reported.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 500
