"""
Transaction history for renters and owners.

History is read straight from Stripe; nothing is stored locally. Each
Stripe object becomes a TransactionEntry and the combined list is sorted
newest first.

Renter history (by Customer):
    - charges   -> payment / out
    - refunds   -> refund / in (only refunds whose charge belongs to the
      customer; Stripe cannot filter refunds by customer)

Owner history (by Connect account):
    - transfers          -> transfer / in ("Payout received")
    - transfer reversals -> reverse_transfer / out ("Payout reversed")

Usage:
    from payments.services import TransactionHistoryService

    service = TransactionHistoryService(get_stripe_adapter())
    entries = service.renter_history("cus_xxx")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.services import BaseService

from payments.exceptions import PaymentValidationError

if TYPE_CHECKING:
    from payments.adapters import StripeAdapter


class EntryType:
    PAYMENT = "payment"
    REFUND = "refund"
    TRANSFER = "transfer"
    REVERSE_TRANSFER = "reverse_transfer"


class Direction:
    IN = "in"
    OUT = "out"


@dataclass
class TransactionEntry:
    """
    One line of a user's transaction history.

    Attributes:
        id: Stripe object id (ch_, re_, tr_ or trr_)
        amount: Amount in smallest currency unit
        currency: Currency code
        created: Unix timestamp (seconds)
        type: One of EntryType
        direction: Money flow from the user's point of view
        payment_intent_id: Related PaymentIntent, when known
        description: Human-readable label
        receipt_url: Receipt of the underlying charge, when known
    """

    id: str
    amount: int
    currency: str
    created: int
    type: str
    direction: str
    payment_intent_id: str | None = None
    description: str | None = None
    receipt_url: str | None = None

    @property
    def amount_rm(self) -> float:
        """Amount in major units (ringgit for MYR)."""
        return self.amount / 100


def _expanded(value: Any) -> dict[str, Any] | None:
    """Return an expanded Stripe object, or None when it is only an id."""
    return value if isinstance(value, dict) else None


def _object_id(value: Any) -> str | None:
    if isinstance(value, dict):
        return value.get("id")
    return value or None


def _newest_first(entries: list[TransactionEntry]) -> list[TransactionEntry]:
    return sorted(entries, key=lambda entry: entry.created, reverse=True)


class TransactionHistoryService(BaseService):
    """Builds renter and owner transaction histories from Stripe listings."""

    def __init__(self, adapter: StripeAdapter):
        self.adapter = adapter

    def renter_history(self, customer_id: str) -> list[TransactionEntry]:
        """
        Payments made by a renter and refunds returned to them.

        Raises:
            PaymentValidationError: customer_id missing
            StripeError: A Stripe listing failed
        """
        if not customer_id:
            raise PaymentValidationError("Missing customerId")

        entries = [
            TransactionEntry(
                id=charge["id"],
                amount=charge["amount"],
                currency=charge["currency"],
                created=charge["created"],
                type=EntryType.PAYMENT,
                direction=Direction.OUT,
                payment_intent_id=_object_id(charge.get("payment_intent")),
                description=charge.get("description") or "Payment",
                receipt_url=charge.get("receipt_url") or None,
            )
            for charge in self.adapter.list_customer_charges(customer_id)
        ]

        for refund in self.adapter.list_recent_refunds():
            charge = _expanded(refund.get("charge"))
            if charge is None or charge.get("customer") != customer_id:
                continue
            entries.append(
                TransactionEntry(
                    id=refund["id"],
                    amount=refund["amount"],
                    currency=refund["currency"],
                    created=refund["created"],
                    type=EntryType.REFUND,
                    direction=Direction.IN,
                    payment_intent_id=_object_id(refund.get("payment_intent")),
                    description="Refund",
                    receipt_url=charge.get("receipt_url") or None,
                )
            )

        self.get_logger().debug(
            "Built renter history",
            extra={"customer_id": customer_id, "count": len(entries)},
        )
        return _newest_first(entries)

    def owner_history(self, connect_account_id: str) -> list[TransactionEntry]:
        """
        Payouts received by an owner and reversals taken back.

        Reversals are reported in their transfer's currency and carry the
        transfer's source PaymentIntent.

        Raises:
            PaymentValidationError: connect_account_id missing
            StripeError: The Stripe listing failed
        """
        if not connect_account_id:
            raise PaymentValidationError("Missing connectAccountId")

        entries: list[TransactionEntry] = []
        for transfer in self.adapter.list_account_transfers(connect_account_id):
            charge = _expanded(transfer.get("source_transaction")) or {}
            payment_intent_id = _object_id(charge.get("payment_intent"))
            receipt_url = charge.get("receipt_url") or None

            entries.append(
                TransactionEntry(
                    id=transfer["id"],
                    amount=transfer["amount"],
                    currency=transfer["currency"],
                    created=transfer["created"],
                    type=EntryType.TRANSFER,
                    direction=Direction.IN,
                    payment_intent_id=payment_intent_id,
                    description="Payout received",
                    receipt_url=receipt_url,
                )
            )

            reversals = (transfer.get("reversals") or {}).get("data") or []
            for reversal in reversals:
                entries.append(
                    TransactionEntry(
                        id=reversal["id"],
                        amount=reversal["amount"],
                        currency=transfer["currency"],
                        created=reversal["created"],
                        type=EntryType.REVERSE_TRANSFER,
                        direction=Direction.OUT,
                        payment_intent_id=payment_intent_id,
                        description="Payout reversed",
                        receipt_url=receipt_url,
                    )
                )

        self.get_logger().debug(
            "Built owner history",
            extra={"account_id": connect_account_id, "count": len(entries)},
        )
        return _newest_first(entries)
