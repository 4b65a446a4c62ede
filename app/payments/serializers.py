"""
DRF serializers for payments app.

Request and response bodies use the camelCase field names the mobile
client already sends; ``source=`` maps them onto the snake_case service
results.

This module provides serializers for:
- Customer, Connect account and payment method requests
- Settlement initiation and reversal
- Transaction history
- Account deletion

Usage:
    serializer = CreatePaymentIntentSerializer(data=request.data)
    if not serializer.is_valid():
        raise PaymentValidationError("Missing fields", details=serializer.errors)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiExample, extend_schema_serializer
from rest_framework import serializers


# =============================================================================
# Customers and Connect accounts
# =============================================================================


class CreateCustomerSerializer(serializers.Serializer):
    """Renter details copied onto the new Stripe Customer."""

    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    userId = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Rentify user id, stored as metadata.userId",
    )


class CreateConnectAccountSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)


class AccountIdSerializer(serializers.Serializer):
    accountId = serializers.CharField(help_text="Connect account id (acct_...)")


class CustomerIdSerializer(serializers.Serializer):
    customerId = serializers.CharField(help_text="Stripe Customer id (cus_...)")


class ConnectAccountIdSerializer(serializers.Serializer):
    connectAccountId = serializers.CharField(
        help_text="Connect account id (acct_...)"
    )


class PaymentMethodIdSerializer(serializers.Serializer):
    paymentMethodId = serializers.CharField(help_text="PaymentMethod id (pm_...)")


class DeleteAccountsSerializer(serializers.Serializer):
    """At least one id is required; checked by AccountService."""

    customerId = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    connectAccountId = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )


# =============================================================================
# Settlement
# =============================================================================


@extend_schema_serializer(
    examples=[
        OpenApiExample(
            "Booking payment with platform fee",
            value={
                "amount": 15000,
                "customerId": "cus_Q1a2b3c4",
                "ownerConnectAccountId": "acct_1Pq2r3s4",
                "currency": "myr",
                "platformFee": 750,
                "description": "Rentify booking #4821",
            },
            request_only=True,
        ),
    ]
)
class CreatePaymentIntentSerializer(serializers.Serializer):
    """
    Serializer for booking payment requests.

    Validates:
    - amount is a positive integer in the smallest currency unit
    - payer and payee ids are present
    - platformFee is a non-negative integer (not compared to amount)
    """

    amount = serializers.IntegerField(min_value=1)
    customerId = serializers.CharField()
    ownerConnectAccountId = serializers.CharField()
    currency = serializers.CharField(required=False, allow_blank=True)
    platformFee = serializers.IntegerField(min_value=0, required=False, default=0)
    description = serializers.CharField(required=False, allow_blank=True)


class PaymentIntentCreatedSerializer(serializers.Serializer):
    clientSecret = serializers.CharField(source="client_secret")
    paymentIntentId = serializers.CharField(source="payment_intent_id")
    transferGroup = serializers.CharField(source="transfer_group")


class RefundRequestSerializer(serializers.Serializer):
    paymentIntentId = serializers.CharField()


class SettlementReversalSerializer(serializers.Serializer):
    """
    Response for a settlement reversal.

    ``reversal`` is the last reversal record (or null) and ``reversals``
    lists every record issued, in order.
    """

    success = serializers.SerializerMethodField()
    refundId = serializers.CharField(source="refund_id")
    refundStatus = serializers.CharField(source="refund_status")
    transferGroup = serializers.CharField(source="transfer_group", allow_null=True)
    transferReversed = serializers.BooleanField(source="transfer_reversed")
    reversal = serializers.JSONField(source="last_reversal", allow_null=True)
    reversals = serializers.ListField(child=serializers.JSONField())

    def get_success(self, obj) -> bool:
        return True


# =============================================================================
# Transaction history
# =============================================================================


class TransactionEntrySerializer(serializers.Serializer):
    """One transaction history entry."""

    id = serializers.CharField()
    amount = serializers.IntegerField()
    amountRm = serializers.FloatField(source="amount_rm")
    currency = serializers.CharField()
    created = serializers.IntegerField(help_text="Unix timestamp (seconds)")
    type = serializers.CharField()
    direction = serializers.CharField()
    paymentIntentId = serializers.CharField(source="payment_intent_id", allow_null=True)
    description = serializers.CharField(allow_null=True)
    receiptUrl = serializers.CharField(source="receipt_url", allow_null=True)
