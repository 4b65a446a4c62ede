"""
Payments app configuration.

Configures the process-wide Stripe HTTP client once at startup.
"""

from django.apps import AppConfig
from django.conf import settings


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    def ready(self):
        from payments.adapters import configure_http_client

        configure_http_client(settings.STRIPE_API_TIMEOUT_SECONDS)
