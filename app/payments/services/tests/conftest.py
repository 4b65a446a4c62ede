"""
Pytest fixtures for payment service tests.

Services receive a MagicMock adapter spec'd on StripeAdapter, so tests
assert on adapter calls rather than SDK calls.
"""

from unittest.mock import MagicMock

import pytest

from payments.adapters import (
    PaymentIntentResult,
    RefundResult,
    StripeAdapter,
    TransferResult,
    TransferReversalResult,
)

GROUP = "booking_1718000000000_a1b2c3d4e5f6"


@pytest.fixture
def mock_stripe_adapter():
    """Mock the StripeAdapter for testing."""
    return MagicMock(spec=StripeAdapter)


@pytest.fixture
def refund_result():
    return RefundResult(
        id="re_test123",
        amount_cents=10000,
        currency="myr",
        status="succeeded",
        payment_intent_id="pi_test123",
    )


@pytest.fixture
def intent_result():
    def _create(transfer_group: str | None = GROUP) -> PaymentIntentResult:
        return PaymentIntentResult(
            id="pi_test123",
            status="succeeded",
            amount_cents=10000,
            currency="myr",
            client_secret="pi_test123_secret_abc",
            transfer_group=transfer_group,
        )

    return _create


@pytest.fixture
def transfer_result():
    def _create(id: str = "tr_test1", amount_cents: int = 9500) -> TransferResult:
        return TransferResult(
            id=id,
            amount_cents=amount_cents,
            currency="myr",
            destination_account="acct_owner123",
            transfer_group=GROUP,
        )

    return _create


@pytest.fixture
def reversal_result():
    def _create(transfer_id: str, amount_cents: int) -> TransferReversalResult:
        reversal_id = transfer_id.replace("tr_", "trr_")
        return TransferReversalResult(
            id=reversal_id,
            amount_cents=amount_cents,
            currency="myr",
            transfer_id=transfer_id,
            raw_response={
                "id": reversal_id,
                "object": "transfer_reversal",
                "amount": amount_cents,
                "transfer": transfer_id,
            },
        )

    return _create
