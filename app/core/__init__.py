"""
Core Application - Infrastructure & Base Classes

Generic, reusable building blocks shared by domain apps. No payment logic
lives here.

Services (import from core.services):
    - BaseService: Base class for service layer (per-class logger)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError: Input validation failures (400)
    - ExternalServiceError: Third-party service failures (500)

View Mixins (import from core.view_mixins):
    - ApplicationErrorMixin: Render application errors as JSON responses

Views (import from core.views):
    - health_check: Liveness endpoint

Usage:
    from core.services import BaseService
    from core.exceptions import ValidationError, ExternalServiceError
    from core.view_mixins import ApplicationErrorMixin

Note:
    View mixins are NOT imported here because they pull in DRF, which
    needs configured settings. Import them directly from their module.
"""

# Services (no Django dependencies)
from .services import BaseService

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "ExternalServiceError",
]
