"""
Tests for SettlementService.

Tests cover:
- Settlement group format and uniqueness
- Payment initiation (validation, defaults, Stripe arguments)
- Reversal ordering (refund first, then transfers)
- Reversal without a settlement group
- Partial failure after the refund succeeded
"""

import re
from unittest.mock import call

import pytest
from django.test import override_settings

from payments.adapters import PaymentIntentResult
from payments.exceptions import (
    PaymentValidationError,
    SettlementReversalIncompleteError,
    StripeAPIUnavailableError,
    StripeInvalidRequestError,
    StripeRateLimitError,
)
from payments.services import SettlementService, generate_settlement_group

GROUP = "booking_1718000000000_a1b2c3d4e5f6"
GROUP_PATTERN = re.compile(r"^booking_\d{13}_[0-9a-f]{12}$")


# =============================================================================
# Settlement Group Tests
# =============================================================================


class TestGenerateSettlementGroup:
    """Tests for settlement group minting."""

    def test_format(self):
        assert GROUP_PATTERN.match(generate_settlement_group())

    def test_unique_within_same_millisecond(self):
        groups = {generate_settlement_group() for _ in range(1000)}

        assert len(groups) == 1000


# =============================================================================
# Initiation Tests
# =============================================================================


class TestInitiateSettlement:
    """Tests for SettlementService.initiate_settlement."""

    @pytest.fixture
    def service(self, mock_stripe_adapter):
        mock_stripe_adapter.create_payment_intent.side_effect = (
            lambda params: PaymentIntentResult(
                id="pi_new",
                status="requires_payment_method",
                amount_cents=params.amount_cents,
                currency=params.currency,
                client_secret="pi_new_secret",
                transfer_group=params.transfer_group,
            )
        )
        return SettlementService(mock_stripe_adapter)

    def test_creates_destination_charge(self, service, mock_stripe_adapter):
        result = service.initiate_settlement(
            amount=15000,
            customer_id="cus_renter",
            destination_account="acct_owner",
            currency="myr",
            platform_fee=750,
            description="Booking #4821",
        )

        params = mock_stripe_adapter.create_payment_intent.call_args.args[0]
        assert params.amount_cents == 15000
        assert params.customer_id == "cus_renter"
        assert params.destination_account == "acct_owner"
        assert params.application_fee_cents == 750
        assert params.description == "Booking #4821"

        assert result.payment_intent_id == "pi_new"
        assert result.client_secret == "pi_new_secret"
        assert result.transfer_group == params.transfer_group
        assert GROUP_PATTERN.match(result.transfer_group)

    @override_settings(SETTLEMENT_DEFAULT_CURRENCY="myr")
    def test_defaults(self, service, mock_stripe_adapter):
        service.initiate_settlement(
            amount=100, customer_id="cus_renter", destination_account="acct_owner"
        )

        params = mock_stripe_adapter.create_payment_intent.call_args.args[0]
        assert params.currency == "myr"
        assert params.application_fee_cents == 0
        assert params.description == "Rentify booking"

    def test_each_payment_gets_its_own_group(self, service):
        first = service.initiate_settlement(100, "cus_renter", "acct_owner")
        second = service.initiate_settlement(100, "cus_renter", "acct_owner")

        assert first.transfer_group != second.transfer_group

    @pytest.mark.parametrize(
        "amount,customer_id,destination",
        [
            (0, "cus_renter", "acct_owner"),
            (None, "cus_renter", "acct_owner"),
            (100, "", "acct_owner"),
            (100, None, "acct_owner"),
            (100, "cus_renter", ""),
            (100, "cus_renter", None),
        ],
    )
    def test_missing_fields_rejected_before_stripe(
        self, service, mock_stripe_adapter, amount, customer_id, destination
    ):
        with pytest.raises(PaymentValidationError) as exc_info:
            service.initiate_settlement(amount, customer_id, destination)

        assert exc_info.value.message == "Missing fields"
        assert exc_info.value.status_code == 400
        mock_stripe_adapter.create_payment_intent.assert_not_called()

    def test_fee_larger_than_amount_left_to_stripe(
        self, mock_stripe_adapter
    ):
        """No local fee check: Stripe's rejection surfaces unchanged."""
        mock_stripe_adapter.create_payment_intent.side_effect = (
            StripeInvalidRequestError(
                "The application fee must be less than the amount.",
                stripe_code="parameter_invalid_integer",
            )
        )
        service = SettlementService(mock_stripe_adapter)

        with pytest.raises(StripeInvalidRequestError) as exc_info:
            service.initiate_settlement(100, "cus_renter", "acct_owner", platform_fee=500)

        assert exc_info.value.status_code == 500
        mock_stripe_adapter.create_payment_intent.assert_called_once()


# =============================================================================
# Reversal Tests
# =============================================================================


class TestReverseSettlement:
    """Tests for SettlementService.reverse_settlement."""

    @pytest.fixture
    def service(
        self,
        mock_stripe_adapter,
        refund_result,
        intent_result,
        reversal_result,
    ):
        mock_stripe_adapter.create_refund.return_value = refund_result
        mock_stripe_adapter.retrieve_payment_intent.return_value = intent_result()
        mock_stripe_adapter.list_transfers_in_group.return_value = []
        mock_stripe_adapter.create_transfer_reversal.side_effect = (
            lambda transfer_id, amount_cents: reversal_result(transfer_id, amount_cents)
        )
        return SettlementService(mock_stripe_adapter)

    def test_reverses_every_transfer_in_full(
        self, service, mock_stripe_adapter, transfer_result
    ):
        mock_stripe_adapter.list_transfers_in_group.return_value = [
            transfer_result("tr_1", 9500),
            transfer_result("tr_2", 250),
        ]

        result = service.reverse_settlement("pi_test123")

        mock_stripe_adapter.list_transfers_in_group.assert_called_once_with(GROUP)
        assert mock_stripe_adapter.create_transfer_reversal.call_args_list == [
            call("tr_1", amount_cents=9500),
            call("tr_2", amount_cents=250),
        ]
        assert result.refund_id == "re_test123"
        assert result.refund_status == "succeeded"
        assert result.transfer_group == GROUP
        assert result.transfer_reversed is True
        assert [r["id"] for r in result.reversals] == ["trr_1", "trr_2"]
        assert result.last_reversal["id"] == "trr_2"

    def test_refund_happens_before_anything_else(self, service, mock_stripe_adapter):
        service.reverse_settlement("pi_test123")

        method_names = [c[0] for c in mock_stripe_adapter.method_calls]
        assert method_names[:3] == [
            "create_refund",
            "retrieve_payment_intent",
            "list_transfers_in_group",
        ]
        mock_stripe_adapter.create_refund.assert_called_once_with("pi_test123")

    def test_group_without_transfers(self, service, mock_stripe_adapter):
        result = service.reverse_settlement("pi_test123")

        assert result.transfer_group == GROUP
        assert result.transfer_reversed is False
        assert result.last_reversal is None
        mock_stripe_adapter.create_transfer_reversal.assert_not_called()

    def test_payment_without_group(self, service, mock_stripe_adapter, intent_result):
        mock_stripe_adapter.retrieve_payment_intent.return_value = intent_result(
            transfer_group=None
        )

        result = service.reverse_settlement("pi_legacy")

        assert result.transfer_group is None
        assert result.transfer_reversed is False
        assert result.reversals == []
        mock_stripe_adapter.list_transfers_in_group.assert_not_called()
        mock_stripe_adapter.create_transfer_reversal.assert_not_called()

    def test_missing_payment_intent_id(self, service, mock_stripe_adapter):
        with pytest.raises(PaymentValidationError, match="Missing paymentIntentId"):
            service.reverse_settlement("")

        mock_stripe_adapter.create_refund.assert_not_called()

    def test_refund_failure_aborts(self, service, mock_stripe_adapter):
        mock_stripe_adapter.create_refund.side_effect = StripeInvalidRequestError(
            "Charge ch_1 has already been refunded.",
            stripe_code="charge_already_refunded",
        )

        with pytest.raises(StripeInvalidRequestError) as exc_info:
            service.reverse_settlement("pi_test123")

        assert not isinstance(exc_info.value, SettlementReversalIncompleteError)
        mock_stripe_adapter.retrieve_payment_intent.assert_not_called()
        mock_stripe_adapter.list_transfers_in_group.assert_not_called()
        mock_stripe_adapter.create_transfer_reversal.assert_not_called()

    def test_retrieve_failure_after_refund(self, service, mock_stripe_adapter):
        mock_stripe_adapter.retrieve_payment_intent.side_effect = (
            StripeAPIUnavailableError("Could not connect to Stripe. Please retry.")
        )

        with pytest.raises(SettlementReversalIncompleteError) as exc_info:
            service.reverse_settlement("pi_test123")

        details = exc_info.value.details
        assert details["refundId"] == "re_test123"
        assert details["refundStatus"] == "succeeded"
        assert details["failedStep"] == "retrieve_payment_intent"
        assert details["transferGroup"] is None
        assert details["reversedTransferIds"] == []
        assert exc_info.value.status_code == 500

    def test_list_failure_after_refund(self, service, mock_stripe_adapter):
        mock_stripe_adapter.list_transfers_in_group.side_effect = StripeRateLimitError(
            "Stripe rate limit exceeded. Please retry.", stripe_code="rate_limit"
        )

        with pytest.raises(SettlementReversalIncompleteError) as exc_info:
            service.reverse_settlement("pi_test123")

        assert exc_info.value.details["failedStep"] == "list_transfers"
        assert exc_info.value.details["transferGroup"] == GROUP
        assert exc_info.value.stripe_code == "rate_limit"

    def test_reversal_failure_reports_progress(
        self, service, mock_stripe_adapter, transfer_result, reversal_result
    ):
        mock_stripe_adapter.list_transfers_in_group.return_value = [
            transfer_result("tr_1", 9500),
            transfer_result("tr_2", 250),
        ]
        mock_stripe_adapter.create_transfer_reversal.side_effect = [
            reversal_result("tr_1", 9500),
            StripeInvalidRequestError("Insufficient funds in the connected account."),
        ]

        with pytest.raises(SettlementReversalIncompleteError) as exc_info:
            service.reverse_settlement("pi_test123")

        details = exc_info.value.details
        assert details["failedStep"] == "reverse_transfer"
        assert details["reversedTransferIds"] == ["tr_1"]
        assert "Insufficient funds" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, StripeInvalidRequestError)

    def test_unexpected_error_after_refund_is_reported(
        self, service, mock_stripe_adapter
    ):
        mock_stripe_adapter.retrieve_payment_intent.side_effect = TypeError(
            "StripeObject is not iterable or a mapping"
        )

        with pytest.raises(SettlementReversalIncompleteError) as exc_info:
            service.reverse_settlement("pi_test123")

        details = exc_info.value.details
        assert details["refundId"] == "re_test123"
        assert details["failedStep"] == "retrieve_payment_intent"
        assert details["reversedTransferIds"] == []
        assert exc_info.value.stripe_code is None
        assert "not iterable" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, TypeError)
