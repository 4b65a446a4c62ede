"""
View mixins for common DRF functionality.

- ApplicationErrorMixin: Render BaseApplicationError subclasses as JSON
  error responses with the status code the exception declares.

Usage:
    from core.view_mixins import ApplicationErrorMixin

    class RefundView(ApplicationErrorMixin, APIView):
        def post(self, request):
            result = service.reverse_settlement(...)  # may raise
            return Response(...)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class ApplicationErrorMixin:
    """
    Convert application errors raised inside a view into responses.

    - BaseApplicationError: ``exc.to_dict()`` with ``exc.status_code``
    - DRF APIException: left to DRF's default handler
    - Anything else: logged with traceback, 500 with the exception message
    """

    def handle_exception(self, exc: Exception) -> Any:
        if isinstance(exc, BaseApplicationError):
            log = logger.warning if exc.status_code < 500 else logger.error
            log(
                f"{type(self).__name__} failed: {exc}",
                extra={"error_code": exc.error_code, "details": exc.details},
            )
            return Response(exc.to_dict(), status=exc.status_code)

        if isinstance(exc, APIException):
            return super().handle_exception(exc)

        logger.error(
            f"Unexpected error in {type(self).__name__}: {type(exc).__name__}",
            exc_info=True,
        )
        return Response(
            {"error": str(exc), "error_code": "INTERNAL_ERROR"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
