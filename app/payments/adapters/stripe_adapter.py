"""
Stripe API adapter for payment operations.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions. All Stripe calls go through this adapter to
ensure consistent error handling and observability.

Features:
- Credentials injected at construction (no global api_key)
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Typed result objects for the settlement flow

Configuration (via settings, see StripeCredentials.from_settings):
- STRIPE_SECRET_KEY: Stripe API secret key (required)
- STRIPE_PUBLISHABLE_KEY: Publishable key handed to mobile clients
- STRIPE_API_VERSION: Pinned API version (default: 2024-09-30.acacia)
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Usage:
    from payments.adapters import CreatePaymentIntentParams, get_stripe_adapter

    adapter = get_stripe_adapter()

    # Create a PaymentIntent routed to a connected account
    result = adapter.create_payment_intent(
        CreatePaymentIntentParams(
            amount_cents=10000,
            currency="myr",
            customer_id="cus_xxx",
            destination_account="acct_xxx",
            transfer_group="booking_1718000000000_a1b2c3d4e5f6",
            application_fee_cents=500,
        )
    )

    # Reverse a transfer in full
    reversal = adapter.create_transfer_reversal("tr_xxx", amount_cents=9500)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import stripe
from django.conf import settings

from payments.exceptions import (
    StripeAPIUnavailableError,
    StripeAuthenticationError,
    StripeCardDeclinedError,
    StripeInvalidAccountError,
    StripeInvalidRequestError,
    StripeRateLimitError,
    StripeResourceMissingError,
)

if TYPE_CHECKING:
    from collections.abc import Callable


DEFAULT_API_VERSION = "2024-09-30.acacia"

# Stripe's list endpoints return at most this many objects per page
HISTORY_PAGE_SIZE = 50


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class StripeCredentials:
    """
    Credentials and client options for talking to Stripe.

    Attributes:
        secret_key: Stripe secret API key (sk_...)
        publishable_key: Publishable key returned to clients (pk_...)
        api_version: Stripe API version sent with every request
        timeout_seconds: HTTP timeout for Stripe calls
    """

    secret_key: str
    publishable_key: str = ""
    api_version: str = DEFAULT_API_VERSION
    timeout_seconds: int = 10

    def __post_init__(self) -> None:
        """Validate credentials after initialization."""
        if not self.secret_key:
            raise ValueError("secret_key is required")

    @classmethod
    def from_settings(cls) -> StripeCredentials:
        """Build credentials from Django settings."""
        return cls(
            secret_key=settings.STRIPE_SECRET_KEY,
            publishable_key=getattr(settings, "STRIPE_PUBLISHABLE_KEY", ""),
            api_version=getattr(settings, "STRIPE_API_VERSION", DEFAULT_API_VERSION),
            timeout_seconds=getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10),
        )


def configure_http_client(timeout_seconds: int) -> None:
    """
    Configure the process-wide Stripe HTTP client.

    Called once at app startup. Network retries are disabled: failures are
    reported to the caller, never retried here.
    """
    stripe.default_http_client = stripe.RequestsClient(timeout=timeout_seconds)
    stripe.max_network_retries = 0


def _plain_metadata(obj: Any) -> dict[str, str]:
    """Metadata of a Stripe object as a plain dict (StripeObject is not a mapping)."""
    metadata = obj.metadata
    if not metadata:
        return {}
    if hasattr(metadata, "to_dict"):
        return metadata.to_dict()
    return dict(metadata)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CreatePaymentIntentParams:
    """
    Parameters for creating a destination-charge PaymentIntent.

    Attributes:
        amount_cents: Payment amount in smallest currency unit (e.g., sen)
        currency: ISO 4217 currency code
        customer_id: Stripe Customer ID of the payer
        destination_account: Connect account receiving the transfer
        transfer_group: Settlement group tagged on the charge and transfer
        application_fee_cents: Platform fee withheld from the transfer
        description: Description shown on the charge
    """

    amount_cents: int
    currency: str
    customer_id: str
    destination_account: str
    transfer_group: str
    application_fee_cents: int = 0
    description: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.amount_cents <= 0:
            raise ValueError("amount_cents must be positive")
        if self.application_fee_cents < 0:
            raise ValueError("application_fee_cents must not be negative")
        if not self.currency:
            raise ValueError("currency is required")
        if not self.customer_id:
            raise ValueError("customer_id is required")
        if not self.destination_account:
            raise ValueError("destination_account is required")
        if not self.transfer_group:
            raise ValueError("transfer_group is required")


@dataclass
class CustomerResult:
    """Result from Stripe Customer creation."""

    id: str
    email: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConnectedAccountResult:
    """Result from Stripe Connect account creation."""

    id: str
    email: str | None = None
    country: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class ClientSecretResult:
    """
    Result from operations whose output is a secret for the mobile SDK.

    Used for SetupIntents (client_secret) and EphemeralKeys (secret).
    """

    id: str
    secret: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentIntentResult:
    """
    Result from Stripe PaymentIntent operations.

    Attributes:
        id: PaymentIntent ID (pi_xxx)
        status: Current status (requires_payment_method, succeeded, etc.)
        amount_cents: Amount in smallest currency unit
        currency: Currency code
        client_secret: Secret for client-side confirmation
        transfer_group: Settlement group, None for legacy payments
        metadata: Attached metadata
        raw_response: Full Stripe response dict (for debugging)
    """

    id: str
    status: str
    amount_cents: int
    currency: str
    client_secret: str | None = None
    transfer_group: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundResult:
    """
    Result from Stripe Refund operations.

    Attributes:
        id: Refund ID (re_xxx)
        amount_cents: Refunded amount
        currency: Currency code
        status: Refund status (succeeded, pending, failed)
        payment_intent_id: Original PaymentIntent ID
        raw_response: Full Stripe response dict
    """

    id: str
    amount_cents: int
    currency: str
    status: str
    payment_intent_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferResult:
    """
    Result from Stripe Transfer operations.

    Attributes:
        id: Transfer ID (tr_xxx)
        amount_cents: Amount transferred
        currency: Currency code
        destination_account: Destination Stripe account ID
        transfer_group: Settlement group the transfer belongs to
        raw_response: Full Stripe response dict
    """

    id: str
    amount_cents: int
    currency: str
    destination_account: str | None = None
    transfer_group: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferReversalResult:
    """
    Result from a Stripe Transfer reversal.

    Attributes:
        id: Reversal ID (trr_xxx)
        amount_cents: Amount pulled back from the connected account
        currency: Currency code
        transfer_id: The reversed transfer
        raw_response: Full Stripe response dict, echoed to API clients
    """

    id: str
    amount_cents: int
    currency: str
    transfer_id: str
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    Holds only immutable credentials, so one instance can serve concurrent
    requests. The API key and version are sent per request instead of being
    set on the ``stripe`` module.

    Usage:
        adapter = StripeAdapter(StripeCredentials.from_settings())
        result = adapter.create_payment_intent(params)
        refund = adapter.create_refund("pi_xxx")
    """

    def __init__(self, credentials: StripeCredentials):
        self.credentials = credentials

    @property
    def publishable_key(self) -> str:
        return self.credentials.publishable_key

    @property
    def _request_options(self) -> dict[str, Any]:
        return {
            "api_key": self.credentials.secret_key,
            "stripe_version": self.credentials.api_version,
        }

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def _call(
        self,
        operation: str,
        log_context: dict[str, Any],
        request: Callable[[], Any],
        level: int = logging.INFO,
    ) -> Any:
        """
        Run one Stripe request with timing logs and error translation.

        Raises:
            StripeError subclass for any failure
        """
        logger = self.get_logger()
        log_context = {"operation": operation, **log_context}

        start_time = time.time()
        logger.log(level, "Starting Stripe operation", extra=log_context)

        try:
            response = request()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_stripe_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

        duration_ms = (time.time() - start_time) * 1000
        logger.log(
            level,
            "Stripe operation completed",
            extra={**log_context, "duration_ms": duration_ms},
        )
        return response

    # =========================================================================
    # Customers and Connect accounts
    # =========================================================================

    def create_customer(
        self,
        email: str | None,
        name: str | None,
        user_id: str | None = None,
    ) -> CustomerResult:
        """
        Create a Stripe Customer for a renter.

        Args:
            email: Renter email
            name: Renter display name
            user_id: Application user id, stored as metadata.userId ("" if absent)
        """
        customer = self._call(
            "create_customer",
            {"user_id": user_id},
            lambda: stripe.Customer.create(
                email=email,
                name=name,
                metadata={"userId": user_id or ""},
                **self._request_options,
            ),
        )
        return CustomerResult(
            id=customer.id,
            email=customer.email,
            metadata=_plain_metadata(customer),
            raw_response=customer.to_dict(),
        )

    def delete_customer(self, customer_id: str) -> bool:
        """Delete a Stripe Customer. Returns Stripe's ``deleted`` flag."""
        deleted = self._call(
            "delete_customer",
            {"customer_id": customer_id},
            lambda: stripe.Customer.delete(customer_id, **self._request_options),
        )
        return bool(deleted.deleted)

    def create_connected_account(
        self,
        email: str | None,
        country: str = "MY",
    ) -> ConnectedAccountResult:
        """
        Create a Standard Connect account for an owner.

        The account requests card_payments and transfers capabilities so it
        can be the destination of booking payments.
        """
        account = self._call(
            "create_connected_account",
            {"country": country},
            lambda: stripe.Account.create(
                type="standard",
                country=country,
                email=email,
                business_type="individual",
                capabilities={
                    "card_payments": {"requested": True},
                    "transfers": {"requested": True},
                },
                **self._request_options,
            ),
        )
        return ConnectedAccountResult(
            id=account.id,
            email=account.email,
            country=account.country,
            raw_response=account.to_dict(),
        )

    def delete_connected_account(self, account_id: str) -> bool:
        """Delete a Connect account. Returns Stripe's ``deleted`` flag."""
        deleted = self._call(
            "delete_connected_account",
            {"account_id": account_id},
            lambda: stripe.Account.delete(account_id, **self._request_options),
        )
        return bool(deleted.deleted)

    def create_account_link(
        self,
        account_id: str,
        refresh_url: str,
        return_url: str,
    ) -> str:
        """
        Create an onboarding link for a Connect account.

        Returns:
            The hosted onboarding URL
        """
        link = self._call(
            "create_account_link",
            {"account_id": account_id},
            lambda: stripe.AccountLink.create(
                account=account_id,
                refresh_url=refresh_url,
                return_url=return_url,
                type="account_onboarding",
                **self._request_options,
            ),
        )
        return link.url

    # =========================================================================
    # Payment methods
    # =========================================================================

    def create_setup_intent(self, customer_id: str) -> ClientSecretResult:
        """Create a SetupIntent so the renter can save a card."""
        intent = self._call(
            "create_setup_intent",
            {"customer_id": customer_id},
            lambda: stripe.SetupIntent.create(
                customer=customer_id,
                automatic_payment_methods={"enabled": True},
                **self._request_options,
            ),
        )
        return ClientSecretResult(
            id=intent.id,
            secret=intent.client_secret,
            raw_response=intent.to_dict(),
        )

    def create_ephemeral_key(self, customer_id: str) -> ClientSecretResult:
        """
        Create an ephemeral key for the mobile SDK.

        Stripe requires the API version explicitly for this resource; it is
        always the adapter's pinned version.
        """
        key = self._call(
            "create_ephemeral_key",
            {"customer_id": customer_id},
            lambda: stripe.EphemeralKey.create(
                customer=customer_id,
                **self._request_options,
            ),
        )
        return ClientSecretResult(
            id=key.id,
            secret=key.secret,
            raw_response=key.to_dict(),
        )

    def list_card_payment_methods(self, customer_id: str) -> list[dict[str, Any]]:
        """List the renter's saved cards."""
        methods = self._call(
            "list_payment_methods",
            {"customer_id": customer_id},
            lambda: stripe.PaymentMethod.list(
                customer=customer_id,
                type="card",
                **self._request_options,
            ),
            level=logging.DEBUG,
        )
        return [method.to_dict() for method in methods.data]

    def detach_payment_method(self, payment_method_id: str) -> str:
        """
        Detach a saved card from its customer.

        Returns:
            The detached PaymentMethod id
        """
        method = self._call(
            "detach_payment_method",
            {"payment_method_id": payment_method_id},
            lambda: stripe.PaymentMethod.detach(
                payment_method_id, **self._request_options
            ),
        )
        return method.id

    # =========================================================================
    # Settlement operations
    # =========================================================================

    def create_payment_intent(
        self,
        params: CreatePaymentIntentParams,
    ) -> PaymentIntentResult:
        """
        Create a destination-charge PaymentIntent.

        The full amount is routed to ``params.destination_account`` with
        ``params.application_fee_cents`` withheld by the platform, and the
        charge and its transfer are tagged with ``params.transfer_group``.

        Raises:
            StripeInvalidAccountError: Invalid destination account
            StripeInvalidRequestError: Invalid parameters (currency, fee, ...)
            StripeAPIUnavailableError: Stripe service unavailable
        """
        intent = self._call(
            "create_payment_intent",
            {
                "amount_cents": params.amount_cents,
                "currency": params.currency,
                "customer_id": params.customer_id,
                "destination_account": params.destination_account,
                "transfer_group": params.transfer_group,
            },
            lambda: stripe.PaymentIntent.create(
                amount=params.amount_cents,
                currency=params.currency,
                customer=params.customer_id,
                automatic_payment_methods={"enabled": True},
                transfer_data={"destination": params.destination_account},
                transfer_group=params.transfer_group,
                application_fee_amount=params.application_fee_cents,
                description=params.description,
                metadata=params.metadata,
                **self._request_options,
            ),
        )
        return self._payment_intent_result(intent)

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        """
        Retrieve a PaymentIntent by ID.

        Raises:
            StripeResourceMissingError: PaymentIntent not found
        """
        intent = self._call(
            "retrieve_payment_intent",
            {"payment_intent_id": payment_intent_id},
            lambda: stripe.PaymentIntent.retrieve(
                payment_intent_id, **self._request_options
            ),
            level=logging.DEBUG,
        )
        return self._payment_intent_result(intent)

    def create_refund(self, payment_intent_id: str) -> RefundResult:
        """
        Fully refund the charge behind a PaymentIntent.

        Raises:
            StripeInvalidRequestError: Refund not possible (already refunded, ...)
            StripeResourceMissingError: PaymentIntent not found
        """
        refund = self._call(
            "create_refund",
            {"payment_intent_id": payment_intent_id},
            lambda: stripe.Refund.create(
                payment_intent=payment_intent_id,
                **self._request_options,
            ),
        )
        return RefundResult(
            id=refund.id,
            amount_cents=refund.amount,
            currency=refund.currency,
            status=refund.status,
            payment_intent_id=refund.payment_intent,
            raw_response=refund.to_dict(),
        )

    def list_transfers_in_group(self, transfer_group: str) -> list[TransferResult]:
        """
        List every transfer tagged with a settlement group.

        Follows pagination so no transfer of the group is missed.
        """
        transfers = self._call(
            "list_transfers_in_group",
            {"transfer_group": transfer_group},
            lambda: list(
                stripe.Transfer.list(
                    transfer_group=transfer_group,
                    limit=100,
                    **self._request_options,
                ).auto_paging_iter()
            ),
        )
        return [
            TransferResult(
                id=transfer.id,
                amount_cents=transfer.amount,
                currency=transfer.currency,
                destination_account=transfer.destination,
                transfer_group=transfer.transfer_group,
                raw_response=transfer.to_dict(),
            )
            for transfer in transfers
        ]

    def create_transfer_reversal(
        self,
        transfer_id: str,
        amount_cents: int,
    ) -> TransferReversalResult:
        """
        Reverse a transfer, pulling funds back from the connected account.

        Args:
            transfer_id: Transfer to reverse (tr_xxx)
            amount_cents: Amount to reverse
        """
        reversal = self._call(
            "create_transfer_reversal",
            {"transfer_id": transfer_id, "amount_cents": amount_cents},
            lambda: stripe.Transfer.create_reversal(
                transfer_id,
                amount=amount_cents,
                **self._request_options,
            ),
        )
        return TransferReversalResult(
            id=reversal.id,
            amount_cents=reversal.amount,
            currency=reversal.currency,
            transfer_id=reversal.transfer or transfer_id,
            raw_response=reversal.to_dict(),
        )

    # =========================================================================
    # History listings
    # =========================================================================

    def list_customer_charges(self, customer_id: str) -> list[dict[str, Any]]:
        """List the most recent charges for a customer."""
        charges = self._call(
            "list_customer_charges",
            {"customer_id": customer_id},
            lambda: stripe.Charge.list(
                customer=customer_id,
                limit=HISTORY_PAGE_SIZE,
                **self._request_options,
            ),
            level=logging.DEBUG,
        )
        return [charge.to_dict() for charge in charges.data]

    def list_recent_refunds(self) -> list[dict[str, Any]]:
        """
        List the most recent refunds on the platform with charges expanded.

        Stripe cannot filter refunds by customer; callers filter on
        ``refund["charge"]["customer"]``.
        """
        refunds = self._call(
            "list_recent_refunds",
            {},
            lambda: stripe.Refund.list(
                limit=HISTORY_PAGE_SIZE,
                expand=["data.charge"],
                **self._request_options,
            ),
            level=logging.DEBUG,
        )
        return [refund.to_dict() for refund in refunds.data]

    def list_account_transfers(self, account_id: str) -> list[dict[str, Any]]:
        """
        List the most recent transfers to a connected account.

        Source charges (with their PaymentIntent) and reversals are expanded.
        """
        transfers = self._call(
            "list_account_transfers",
            {"account_id": account_id},
            lambda: stripe.Transfer.list(
                destination=account_id,
                limit=HISTORY_PAGE_SIZE,
                expand=["data.source_transaction.payment_intent", "data.reversals"],
                **self._request_options,
            ),
            level=logging.DEBUG,
        )
        return [transfer.to_dict() for transfer in transfers.data]

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _payment_intent_result(intent: Any) -> PaymentIntentResult:
        return PaymentIntentResult(
            id=intent.id,
            status=intent.status,
            amount_cents=intent.amount,
            currency=intent.currency,
            client_secret=intent.client_secret,
            transfer_group=intent.transfer_group or None,
            metadata=_plain_metadata(intent),
            raw_response=intent.to_dict(),
        )

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to domain exceptions.

        Stripe's own message is kept so the HTTP caller sees it verbatim.

        Raises:
            StripeCardDeclinedError: Card was declined
            StripeInvalidAccountError: Invalid Connect account
            StripeResourceMissingError: Unknown object id
            StripeInvalidRequestError: Invalid request parameters
            StripeAuthenticationError: Bad API key
            StripeRateLimitError: Rate limited
            StripeAPIUnavailableError: API unavailable or unexpected error
        """
        logger = cls.get_logger()

        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, stripe.CardError):
            decline_code = getattr(error, "decline_code", None)
            if decline_code is None and getattr(error, "error", None) is not None:
                decline_code = getattr(error.error, "decline_code", None)
            logger.warning(
                "Card error from Stripe",
                extra={**log_context, "decline_code": decline_code},
            )
            raise StripeCardDeclinedError(
                str(error.user_message or error),
                stripe_code=error.code,
                decline_code=decline_code,
            ) from error

        elif isinstance(error, stripe.InvalidRequestError):
            logger.error(
                "Invalid request to Stripe",
                extra={**log_context, "stripe_code": error.code},
            )
            message = error.user_message or str(error)
            param = getattr(error, "param", None) or ""

            if "account" in message.lower() or "destination" in param:
                raise StripeInvalidAccountError(
                    message, stripe_code=error.code
                ) from error

            if error.code == "resource_missing":
                raise StripeResourceMissingError(
                    message, stripe_code=error.code
                ) from error

            raise StripeInvalidRequestError(message, stripe_code=error.code) from error

        elif isinstance(error, stripe.RateLimitError):
            logger.warning("Rate limited by Stripe", extra=log_context)
            raise StripeRateLimitError(
                "Stripe rate limit exceeded. Please retry.",
                stripe_code="rate_limit",
            ) from error

        elif isinstance(error, stripe.APIConnectionError):
            logger.error(
                "Connection error to Stripe",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                "Could not connect to Stripe. Please retry.",
                stripe_code="api_connection_error",
            ) from error

        elif isinstance(error, stripe.AuthenticationError):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
            raise StripeAuthenticationError(
                "Stripe authentication failed",
                stripe_code="authentication_error",
            ) from error

        elif isinstance(error, stripe.StripeError):
            logger.error(
                "Stripe API error",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                str(error.user_message or error),
                stripe_code=getattr(error, "code", None) or "api_error",
            ) from error

        else:
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise StripeAPIUnavailableError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            ) from error
