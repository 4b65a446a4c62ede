"""
Payment-specific exceptions for payment operations.

This module provides the exceptions raised by the payments app: request
validation failures and errors reported by Stripe.

Exception Hierarchy:
    ValidationError (core, 400)
    └── PaymentValidationError - Missing/invalid payment request fields

    ExternalServiceError (core, 500)
    └── StripeError - Base for all Stripe errors
        ├── StripeCardDeclinedError - Card declined
        ├── StripeInvalidAccountError - Invalid or restricted Connect account
        ├── StripeInvalidRequestError - Invalid request params
        ├── StripeResourceMissingError - Unknown Stripe object id
        ├── StripeAuthenticationError - Bad API key
        ├── StripeRateLimitError - Rate limited
        ├── StripeAPIUnavailableError - API unavailable or network failure
        └── SettlementReversalIncompleteError - Refund done, transfer unwind failed

No error kind is retried locally; every failure is surfaced to the HTTP
caller with the upstream message.

Usage:
    from payments.exceptions import PaymentValidationError, StripeError

    if not payment_intent_id:
        raise PaymentValidationError("Missing paymentIntentId")

    try:
        adapter.create_refund(payment_intent_id)
    except StripeError as e:
        logger.error(f"Refund failed: {e.stripe_code}")
        raise
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ExternalServiceError, ValidationError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentValidationError(ValidationError):
    """
    Raised when a payment request fails validation.

    Use for:
    - Missing amount, payer or payee on a payment request
    - Missing payment identifier on a refund request
    - Missing account identifiers on deletion

    Raised before any Stripe call is made.
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeError(ExternalServiceError):
    """
    Base exception for all Stripe-related errors.

    Provides common attributes for Stripe error handling:
    - stripe_code: Stripe's internal error code
    - decline_code: Card decline code (if applicable)

    The message is Stripe's own message so clients see what the platform
    reported.
    """

    default_error_code: str = "STRIPE_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


class StripeCardDeclinedError(StripeError):
    """
    Card was declined by the issuing bank.

    The decline_code attribute contains the specific reason
    (generic_decline, insufficient_funds, expired_card, ...).
    """

    default_error_code: str = "CARD_DECLINED"


class StripeInvalidAccountError(StripeError):
    """
    Invalid Stripe Connect account.

    Raised when the destination account for a payment or transfer is:
    - Not found
    - Disabled or restricted
    - Missing the transfers capability
    """

    default_error_code: str = "INVALID_STRIPE_ACCOUNT"


class StripeInvalidRequestError(StripeError):
    """
    Invalid request parameters sent to Stripe.

    Possible causes:
    - Invalid amount or currency
    - Platform fee larger than the amount
    - Refund of an already fully refunded charge
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"


class StripeResourceMissingError(StripeInvalidRequestError):
    """
    Stripe has no object with the given id.

    Unknown payment intents, customers and payment methods end up here.
    Still an upstream failure from the caller's point of view.
    """

    default_error_code: str = "STRIPE_RESOURCE_MISSING"


class StripeAuthenticationError(StripeError):
    """
    Stripe rejected the API key.

    Operational issue: STRIPE_SECRET_KEY is wrong or revoked.
    """

    default_error_code: str = "STRIPE_AUTHENTICATION_FAILED"


class StripeRateLimitError(StripeError):
    """
    Rate limited by Stripe API.

    Stripe allows 100 requests/second in live mode, 25/second in test mode.
    Not retried here; the caller decides whether to try again.
    """

    default_error_code: str = "STRIPE_RATE_LIMITED"


class StripeAPIUnavailableError(StripeError):
    """
    Stripe API is temporarily unavailable.

    This covers:
    - Network connectivity issues and timeouts
    - Stripe server errors (5xx)
    - Any SDK error we do not recognise
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"


class SettlementReversalIncompleteError(StripeError):
    """
    The renter's refund succeeded but unwinding the owner's transfers failed.

    The refund is NOT rolled back. Details carry everything needed to
    finish the reversal out-of-band:
    - refundId / refundStatus: the refund that already happened
    - transferGroup: the settlement group being unwound
    - failedStep: retrieve_payment_intent, list_transfers or reverse_transfer
    - reversedTransferIds: transfers already reversed before the failure

    Example:
        except SettlementReversalIncompleteError as e:
            alert_finance(e.details["refundId"], e.details["failedStep"])
    """

    default_error_code: str = "SETTLEMENT_REVERSAL_INCOMPLETE"
