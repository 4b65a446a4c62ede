"""
Pytest fixtures for Stripe adapter tests.

Each fixture patches one SDK resource class so the adapter's calls can be
asserted without reaching Stripe. Mock objects and error factories come
from payments/conftest.py.
"""

from unittest.mock import patch

import pytest

from payments.adapters import StripeAdapter, StripeCredentials


# =============================================================================
# Adapter Fixtures
# =============================================================================


@pytest.fixture
def credentials():
    return StripeCredentials(
        secret_key="sk_test_adapter",
        publishable_key="pk_test_adapter",
        api_version="2024-09-30.acacia",
        timeout_seconds=10,
    )


@pytest.fixture
def adapter(credentials):
    return StripeAdapter(credentials)


@pytest.fixture
def request_options():
    """Options every SDK call is expected to receive."""
    return {"api_key": "sk_test_adapter", "stripe_version": "2024-09-30.acacia"}


# =============================================================================
# Mock Stripe Client Fixtures
# =============================================================================


@pytest.fixture
def mock_stripe_payment_intent(mock_payment_intent):
    """Mock stripe.PaymentIntent API."""
    with patch("stripe.PaymentIntent") as mock:
        mock.create.return_value = mock_payment_intent()
        mock.retrieve.return_value = mock_payment_intent(status="succeeded")
        yield mock


@pytest.fixture
def mock_stripe_refund(mock_refund):
    """Mock stripe.Refund API."""
    with patch("stripe.Refund") as mock:
        mock.create.return_value = mock_refund()
        yield mock


@pytest.fixture
def mock_stripe_transfer():
    """Mock stripe.Transfer API."""
    with patch("stripe.Transfer") as mock:
        yield mock


@pytest.fixture
def mock_stripe_customer():
    """Mock stripe.Customer API."""
    with patch("stripe.Customer") as mock:
        yield mock


@pytest.fixture
def mock_stripe_account():
    """Mock stripe.Account API."""
    with patch("stripe.Account") as mock:
        yield mock


@pytest.fixture
def mock_stripe_charge():
    """Mock stripe.Charge API."""
    with patch("stripe.Charge") as mock:
        yield mock


@pytest.fixture
def mock_stripe_http_client():
    """Mock stripe.RequestsClient."""
    with patch("stripe.RequestsClient") as mock:
        yield mock
