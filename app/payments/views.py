"""
DRF views for payments app.

This module provides API views for:
- Renter customers, saved cards and ephemeral keys
- Owner Connect accounts and onboarding links
- Booking settlement and its reversal
- Transaction history
- Account deletion

Related files:
    - services/: SettlementService, TransactionHistoryService, AccountService
    - adapters/: StripeAdapter
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Security:
    - No authentication; the mobile client calls these directly
    - Errors are rendered by ApplicationErrorMixin (400 validation,
      500 Stripe/unexpected)
"""

from __future__ import annotations

import logging

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from core.view_mixins import ApplicationErrorMixin

from payments.adapters import get_stripe_adapter
from payments.exceptions import PaymentValidationError
from payments.serializers import (
    AccountIdSerializer,
    ConnectAccountIdSerializer,
    CreateConnectAccountSerializer,
    CreateCustomerSerializer,
    CreatePaymentIntentSerializer,
    CustomerIdSerializer,
    DeleteAccountsSerializer,
    PaymentIntentCreatedSerializer,
    PaymentMethodIdSerializer,
    RefundRequestSerializer,
    SettlementReversalSerializer,
    TransactionEntrySerializer,
)
from payments.services import (
    AccountService,
    SettlementService,
    TransactionHistoryService,
)

logger = logging.getLogger(__name__)


ERROR_RESPONSES = {
    400: OpenApiResponse(description="Missing or invalid fields"),
    500: OpenApiResponse(description="Stripe rejected the request or was unreachable"),
}


def validated_data(serializer_class, data, message: str) -> dict:
    """
    Validate request data, raising PaymentValidationError on failure.

    The serializer's field errors are returned in the error details.
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise PaymentValidationError(message, details=dict(serializer.errors))
    return serializer.validated_data


class PaymentsAPIView(ApplicationErrorMixin, APIView):
    """Base view: application errors rendered as JSON, adapter built per request."""

    def get_adapter(self):
        return get_stripe_adapter()


# =============================================================================
# Customers and Connect accounts
# =============================================================================


class CreateStripeCustomerView(PaymentsAPIView):
    """
    Create a Stripe Customer for a renter.

    POST /create-stripe-customer
    """

    @extend_schema(
        operation_id="create_stripe_customer",
        summary="Create Stripe customer",
        request=CreateCustomerSerializer,
        responses={
            200: inline_serializer(
                "CustomerCreated", {"customerId": serializers.CharField()}
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Accounts"],
    )
    def post(self, request):
        data = validated_data(CreateCustomerSerializer, request.data, "Invalid fields")
        customer = self.get_adapter().create_customer(
            email=data.get("email") or None,
            name=data.get("name") or None,
            user_id=data.get("userId") or None,
        )
        return Response({"customerId": customer.id})


class CreateConnectAccountView(PaymentsAPIView):
    """
    Create a Standard Connect account for an owner.

    POST /create-connect-account
    """

    @extend_schema(
        operation_id="create_connect_account",
        summary="Create Connect account",
        request=CreateConnectAccountSerializer,
        responses={
            200: inline_serializer(
                "ConnectAccountCreated", {"accountId": serializers.CharField()}
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Accounts"],
    )
    def post(self, request):
        data = validated_data(
            CreateConnectAccountSerializer, request.data, "Invalid fields"
        )
        account = self.get_adapter().create_connected_account(
            email=data.get("email") or None,
            country=settings.STRIPE_CONNECT_COUNTRY,
        )
        return Response({"accountId": account.id})


class CreateConnectAccountLinkView(PaymentsAPIView):
    """
    Create an onboarding link for a Connect account.

    POST /create-connect-account-link
    """

    @extend_schema(
        operation_id="create_connect_account_link",
        summary="Create onboarding link",
        request=AccountIdSerializer,
        responses={
            200: inline_serializer("AccountLink", {"url": serializers.URLField()}),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Accounts"],
    )
    def post(self, request):
        data = validated_data(AccountIdSerializer, request.data, "Missing accountId")
        url = self.get_adapter().create_account_link(
            data["accountId"],
            refresh_url=settings.STRIPE_CONNECT_REFRESH_URL,
            return_url=settings.STRIPE_CONNECT_RETURN_URL,
        )
        return Response({"url": url})


class DeleteAccountsView(PaymentsAPIView):
    """
    Best-effort deletion of a renter's Customer and/or owner's Connect account.

    DELETE /stripe/delete-accounts
    """

    @extend_schema(
        operation_id="delete_stripe_accounts",
        summary="Delete Stripe accounts",
        request=DeleteAccountsSerializer,
        responses={
            200: inline_serializer(
                "AccountsDeleted",
                {
                    "success": serializers.BooleanField(),
                    "message": serializers.CharField(),
                    "details": serializers.DictField(child=serializers.BooleanField()),
                },
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Accounts"],
    )
    def delete(self, request):
        data = validated_data(DeleteAccountsSerializer, request.data, "Invalid fields")
        details = AccountService(self.get_adapter()).delete_accounts(
            customer_id=data.get("customerId"),
            connect_account_id=data.get("connectAccountId"),
        )
        return Response(
            {"success": True, "message": "Deletion attempted.", "details": details}
        )


# =============================================================================
# Settlement
# =============================================================================


class CreatePaymentIntentView(PaymentsAPIView):
    """
    Start a booking payment routed to the owner's Connect account.

    POST /create-payment-intent

    Response:
        200 OK: clientSecret, paymentIntentId, transferGroup
        400 Bad Request: amount, customerId or ownerConnectAccountId missing
        500 Internal Server Error: Stripe rejected the payment
    """

    @extend_schema(
        operation_id="create_payment_intent",
        summary="Create booking payment",
        description=(
            "Creates a PaymentIntent for the full amount with the owner's "
            "Connect account as transfer destination and the platform fee as "
            "application fee. A fresh settlement group is tagged on the payment "
            "so a later refund can reverse exactly this payment's transfers."
        ),
        request=CreatePaymentIntentSerializer,
        responses={200: PaymentIntentCreatedSerializer, **ERROR_RESPONSES},
        tags=["Payments - Settlement"],
    )
    def post(self, request):
        data = validated_data(
            CreatePaymentIntentSerializer, request.data, "Missing fields"
        )
        initiation = SettlementService(self.get_adapter()).initiate_settlement(
            amount=data["amount"],
            customer_id=data["customerId"],
            destination_account=data["ownerConnectAccountId"],
            currency=data.get("currency"),
            platform_fee=data.get("platformFee", 0),
            description=data.get("description"),
        )
        return Response(PaymentIntentCreatedSerializer(initiation).data)


class RefundView(PaymentsAPIView):
    """
    Refund a booking payment and reverse the owner's transfers.

    POST /refund

    Response:
        200 OK: refund and reversal summary
        400 Bad Request: paymentIntentId missing
        500 Internal Server Error: refund failed, or refund succeeded but
            the transfers could not all be reversed (see details)
    """

    @extend_schema(
        operation_id="refund_payment",
        summary="Refund booking payment",
        description=(
            "Fully refunds the PaymentIntent, then reverses in full every "
            "transfer in its settlement group. Payments without a settlement "
            "group are refunded with transferReversed=false."
        ),
        request=RefundRequestSerializer,
        responses={200: SettlementReversalSerializer, **ERROR_RESPONSES},
        tags=["Payments - Settlement"],
    )
    def post(self, request):
        data = validated_data(
            RefundRequestSerializer, request.data, "Missing paymentIntentId"
        )
        reversal = SettlementService(self.get_adapter()).reverse_settlement(
            data["paymentIntentId"]
        )
        return Response(SettlementReversalSerializer(reversal).data)


# =============================================================================
# Payment methods
# =============================================================================


class CreateSetupIntentView(PaymentsAPIView):
    """POST /create-setup-intent"""

    @extend_schema(
        operation_id="create_setup_intent",
        summary="Create setup intent",
        request=CustomerIdSerializer,
        responses={
            200: inline_serializer(
                "SetupIntentCreated", {"clientSecret": serializers.CharField()}
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Payment Methods"],
    )
    def post(self, request):
        data = validated_data(CustomerIdSerializer, request.data, "Missing customerId")
        intent = self.get_adapter().create_setup_intent(data["customerId"])
        return Response({"clientSecret": intent.secret})


class CreateEphemeralKeyView(PaymentsAPIView):
    """POST /create-ephemeral-key"""

    @extend_schema(
        operation_id="create_ephemeral_key",
        summary="Create ephemeral key",
        request=CustomerIdSerializer,
        responses={
            200: inline_serializer(
                "EphemeralKeyCreated", {"ephemeralKey": serializers.CharField()}
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Payment Methods"],
    )
    def post(self, request):
        data = validated_data(CustomerIdSerializer, request.data, "Missing customerId")
        key = self.get_adapter().create_ephemeral_key(data["customerId"])
        return Response({"ephemeralKey": key.secret})


class ListPaymentMethodsView(PaymentsAPIView):
    """GET /list-payment-methods/<customer_id>"""

    @extend_schema(
        operation_id="list_payment_methods",
        summary="List saved cards",
        responses={
            200: inline_serializer(
                "PaymentMethodList",
                {"methods": serializers.ListField(child=serializers.JSONField())},
            ),
            500: ERROR_RESPONSES[500],
        },
        tags=["Payments - Payment Methods"],
    )
    def get(self, request, customer_id):
        methods = self.get_adapter().list_card_payment_methods(customer_id)
        return Response({"methods": methods})


class DetachPaymentMethodView(PaymentsAPIView):
    """POST /detach-payment-method"""

    @extend_schema(
        operation_id="detach_payment_method",
        summary="Remove saved card",
        request=PaymentMethodIdSerializer,
        responses={
            200: inline_serializer(
                "PaymentMethodDetached",
                {"success": serializers.BooleanField(), "id": serializers.CharField()},
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - Payment Methods"],
    )
    def post(self, request):
        data = validated_data(
            PaymentMethodIdSerializer, request.data, "Missing paymentMethodId"
        )
        detached_id = self.get_adapter().detach_payment_method(data["paymentMethodId"])
        return Response({"success": True, "id": detached_id})


class PublishableKeyView(PaymentsAPIView):
    """GET /config"""

    @extend_schema(
        operation_id="get_stripe_config",
        summary="Get publishable key",
        responses={200: OpenApiTypes.OBJECT},
        tags=["Payments - Payment Methods"],
    )
    def get(self, request):
        return Response({"publishableKey": self.get_adapter().publishable_key})


# =============================================================================
# Transaction history
# =============================================================================


def _history_response(entries) -> Response:
    return Response(
        {"transactions": TransactionEntrySerializer(entries, many=True).data}
    )


class RenterTransactionsView(PaymentsAPIView):
    """
    Payments and refunds for a renter, newest first.

    POST /transactions/renter
    """

    @extend_schema(
        operation_id="renter_transactions",
        summary="Renter transaction history",
        request=CustomerIdSerializer,
        responses={
            200: inline_serializer(
                "RenterTransactions",
                {"transactions": TransactionEntrySerializer(many=True)},
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - History"],
    )
    def post(self, request):
        data = validated_data(CustomerIdSerializer, request.data, "Missing customerId")
        entries = TransactionHistoryService(self.get_adapter()).renter_history(
            data["customerId"]
        )
        return _history_response(entries)


class OwnerTransactionsView(PaymentsAPIView):
    """
    Payouts and payout reversals for an owner, newest first.

    POST /transactions/owner
    """

    @extend_schema(
        operation_id="owner_transactions",
        summary="Owner transaction history",
        request=ConnectAccountIdSerializer,
        responses={
            200: inline_serializer(
                "OwnerTransactions",
                {"transactions": TransactionEntrySerializer(many=True)},
            ),
            **ERROR_RESPONSES,
        },
        tags=["Payments - History"],
    )
    def post(self, request):
        data = validated_data(
            ConnectAccountIdSerializer, request.data, "Missing connectAccountId"
        )
        entries = TransactionHistoryService(self.get_adapter()).owner_history(
            data["connectAccountId"]
        )
        return _history_response(entries)
