"""
Settlement service for booking payments and their reversal.

A booking payment is a single destination charge: the renter pays the full
amount, Stripe transfers it to the owner's Connect account minus the
platform fee, and both the charge and the transfer are tagged with a
settlement group (``transfer_group``) minted here.

Reversing a settlement undoes both legs, strictly in this order:
1. Full refund of the PaymentIntent (aborts on failure)
2. Retrieve the PaymentIntent and read its settlement group
3. List every transfer in the group
4. Reverse each transfer in full, one at a time

Once step 1 succeeds the refund is never rolled back. A failure in steps
2-4 raises SettlementReversalIncompleteError carrying the refund and the
transfers already reversed.

Usage:
    from payments.adapters import get_stripe_adapter
    from payments.services import SettlementService

    service = SettlementService(get_stripe_adapter())

    initiation = service.initiate_settlement(
        amount=10000,
        customer_id="cus_xxx",
        destination_account="acct_xxx",
        platform_fee=500,
    )

    reversal = service.reverse_settlement(initiation.payment_intent_id)
    if not reversal.transfer_reversed:
        print("Refunded, no owner transfer to reverse")
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from django.conf import settings

from core.services import BaseService

from payments.adapters import CreatePaymentIntentParams
from payments.exceptions import (
    PaymentValidationError,
    SettlementReversalIncompleteError,
    StripeError,
)

if TYPE_CHECKING:
    from payments.adapters import StripeAdapter


DEFAULT_DESCRIPTION = "Rentify booking"


def generate_settlement_group() -> str:
    """
    Mint a new settlement group token.

    Format: ``booking_<epoch-ms>_<12 hex chars>``. The random suffix keeps
    tokens minted in the same millisecond distinct.
    """
    return f"booking_{time.time_ns() // 1_000_000}_{uuid.uuid4().hex[:12]}"


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class SettlementInitiation:
    """
    Result of initiating a settlement.

    Attributes:
        client_secret: Secret the mobile client confirms the payment with
        payment_intent_id: Created PaymentIntent ID
        transfer_group: Settlement group tagged on the charge and transfer
    """

    client_secret: str | None
    payment_intent_id: str
    transfer_group: str


@dataclass
class SettlementReversal:
    """
    Result of reversing a settlement.

    Attributes:
        refund_id: The refund issued to the renter
        refund_status: Stripe status of that refund
        transfer_group: Settlement group read back from the PaymentIntent,
            None for payments created without one
        reversals: Raw reversal records, in the order they were issued
    """

    refund_id: str
    refund_status: str
    transfer_group: str | None = None
    reversals: list[dict[str, Any]] = field(default_factory=list)

    @property
    def transfer_reversed(self) -> bool:
        """True when at least one transfer reversal was issued."""
        return bool(self.reversals)

    @property
    def last_reversal(self) -> dict[str, Any] | None:
        return self.reversals[-1] if self.reversals else None


# =============================================================================
# Settlement Service
# =============================================================================


class SettlementService(BaseService):
    """
    Coordinates booking payments and their reversal.

    The adapter is injected, so the service holds no credentials and no
    mutable state.
    """

    def __init__(self, adapter: StripeAdapter):
        self.adapter = adapter

    def initiate_settlement(
        self,
        amount: int,
        customer_id: str,
        destination_account: str,
        currency: str | None = None,
        platform_fee: int = 0,
        description: str | None = None,
    ) -> SettlementInitiation:
        """
        Create a destination-charge PaymentIntent under a fresh settlement group.

        Args:
            amount: Amount in smallest currency unit, must be positive
            customer_id: Renter's Stripe Customer ID
            destination_account: Owner's Connect account ID
            currency: Defaults to SETTLEMENT_DEFAULT_CURRENCY
            platform_fee: Amount withheld by the platform. Not checked
                against ``amount``; Stripe rejects an oversized fee.
            description: Defaults to "Rentify booking"

        Raises:
            PaymentValidationError: amount, customer or destination missing
            StripeError: Stripe rejected the request
        """
        if not amount or not customer_id or not destination_account:
            raise PaymentValidationError(
                "Missing fields",
                details={
                    "amount": amount,
                    "customerId": customer_id,
                    "ownerConnectAccountId": destination_account,
                },
            )

        transfer_group = generate_settlement_group()
        params = CreatePaymentIntentParams(
            amount_cents=amount,
            currency=currency or settings.SETTLEMENT_DEFAULT_CURRENCY,
            customer_id=customer_id,
            destination_account=destination_account,
            transfer_group=transfer_group,
            application_fee_cents=platform_fee or 0,
            description=description or DEFAULT_DESCRIPTION,
        )
        intent = self.adapter.create_payment_intent(params)

        self.get_logger().info(
            "Settlement initiated",
            extra={
                "payment_intent_id": intent.id,
                "transfer_group": transfer_group,
                "amount_cents": amount,
                "platform_fee_cents": params.application_fee_cents,
            },
        )

        return SettlementInitiation(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
            transfer_group=transfer_group,
        )

    def reverse_settlement(self, payment_intent_id: str) -> SettlementReversal:
        """
        Refund the renter, then reverse every transfer to the owner.

        Args:
            payment_intent_id: The PaymentIntent to unwind

        Returns:
            SettlementReversal describing the refund and reversals

        Raises:
            PaymentValidationError: payment_intent_id missing
            StripeError: The refund failed; nothing was changed
            SettlementReversalIncompleteError: Refund succeeded but
                unwinding the transfers failed part way
        """
        if not payment_intent_id:
            raise PaymentValidationError("Missing paymentIntentId")

        logger = self.get_logger()

        refund = self.adapter.create_refund(payment_intent_id)
        result = SettlementReversal(refund_id=refund.id, refund_status=refund.status)

        reversed_ids: list[str] = []
        step = "retrieve_payment_intent"
        try:
            intent = self.adapter.retrieve_payment_intent(payment_intent_id)
            result.transfer_group = intent.transfer_group

            if not result.transfer_group:
                logger.info(
                    "Refunded payment has no settlement group; no transfers to reverse",
                    extra={
                        "payment_intent_id": payment_intent_id,
                        "refund_id": refund.id,
                    },
                )
                return result

            step = "list_transfers"
            transfers = self.adapter.list_transfers_in_group(result.transfer_group)

            step = "reverse_transfer"
            for transfer in transfers:
                reversal = self.adapter.create_transfer_reversal(
                    transfer.id, amount_cents=transfer.amount_cents
                )
                result.reversals.append(reversal.raw_response)
                reversed_ids.append(transfer.id)

        except Exception as e:
            logger.error(
                "Settlement reversal incomplete: refund issued but transfers not unwound",
                exc_info=not isinstance(e, StripeError),
                extra={
                    "payment_intent_id": payment_intent_id,
                    "refund_id": refund.id,
                    "transfer_group": result.transfer_group,
                    "failed_step": step,
                    "reversed_transfer_ids": reversed_ids,
                },
            )
            raise SettlementReversalIncompleteError(
                f"Refund {refund.id} succeeded but reversing transfers failed: "
                f"{getattr(e, 'message', None) or e}",
                stripe_code=getattr(e, "stripe_code", None),
                details={
                    "refundId": refund.id,
                    "refundStatus": refund.status,
                    "transferGroup": result.transfer_group,
                    "failedStep": step,
                    "reversedTransferIds": reversed_ids,
                },
            ) from e

        logger.info(
            "Settlement reversed",
            extra={
                "payment_intent_id": payment_intent_id,
                "refund_id": refund.id,
                "transfer_group": result.transfer_group,
                "reversal_count": len(result.reversals),
            },
        )
        return result
