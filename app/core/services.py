"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views.
Views handle HTTP concerns, adapters handle third-party APIs,
services handle the logic in between.

Pattern:
    - Expected failures (bad input, upstream rejection) raise
      core.exceptions subclasses; views render them.
    - Collaborators (API adapters) are passed to the constructor so
      services never read credentials from ambient state.

Usage:
    from core.services import BaseService

    class RefundService(BaseService):
        def __init__(self, adapter):
            self.adapter = adapter

        def refund(self, payment_intent_id):
            self.get_logger().info("Refunding", extra={"pi": payment_intent_id})
            return self.adapter.create_refund(payment_intent_id)
"""

from __future__ import annotations

import logging


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Services hold no per-request state
        - Dependencies are injected at construction
        - Raise core.exceptions subclasses for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")
