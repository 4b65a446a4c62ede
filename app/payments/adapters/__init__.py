"""
Payment adapters for external services.

This module provides adapters for external payment services like Stripe.
All external payment API calls should go through these adapters to ensure
consistent error handling, timeouts, and observability.

Usage:
    from payments.adapters import CreatePaymentIntentParams, get_stripe_adapter

    adapter = get_stripe_adapter()
    result = adapter.create_payment_intent(
        CreatePaymentIntentParams(
            amount_cents=5000,
            currency="myr",
            customer_id="cus_xxx",
            destination_account="acct_xxx",
            transfer_group="booking_1718000000000_a1b2c3d4e5f6",
        )
    )
"""

from payments.adapters.stripe_adapter import (
    ClientSecretResult,
    ConnectedAccountResult,
    CreatePaymentIntentParams,
    CustomerResult,
    PaymentIntentResult,
    RefundResult,
    StripeAdapter,
    StripeCredentials,
    TransferResult,
    TransferReversalResult,
    configure_http_client,
)


def get_stripe_adapter() -> StripeAdapter:
    """Build an adapter from the credentials in Django settings."""
    return StripeAdapter(StripeCredentials.from_settings())


__all__ = [
    "ClientSecretResult",
    "ConnectedAccountResult",
    "CreatePaymentIntentParams",
    "CustomerResult",
    "PaymentIntentResult",
    "RefundResult",
    "StripeAdapter",
    "StripeCredentials",
    "TransferResult",
    "TransferReversalResult",
    "configure_http_client",
    "get_stripe_adapter",
]
