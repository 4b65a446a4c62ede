"""
Shared pytest fixtures for the payments app.

Provides mock Stripe objects and SDK errors so no test reaches Stripe.

Sections:
    - Mock Stripe Objects
    - Stripe Object Factories
    - Error Response Fixtures
"""

from dataclasses import dataclass
from typing import Any

import pytest
import stripe


# =============================================================================
# Mock Stripe Objects
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


@dataclass
class MockStripeList:
    """Mock Stripe list response with data attribute and auto-pagination."""

    items: list[MockStripeObject]
    has_more: bool = False

    @property
    def data(self) -> list[MockStripeObject]:
        return self.items

    def auto_paging_iter(self):
        return iter(self.items)


@pytest.fixture
def stripe_object():
    """Build a mock Stripe object from a dict."""
    return MockStripeObject


@pytest.fixture
def stripe_list():
    """Wrap mock objects in a Stripe list response."""

    def _create(*items: MockStripeObject) -> MockStripeList:
        return MockStripeList(items=list(items))

    return _create


# =============================================================================
# Stripe Object Factories
# =============================================================================


@pytest.fixture
def mock_payment_intent():
    """Create a mock PaymentIntent response."""

    def _create(
        id: str = "pi_test123456",
        status: str = "requires_payment_method",
        amount: int = 10000,
        currency: str = "myr",
        client_secret: str = "pi_test123456_secret_abc123",
        transfer_group: str | None = "booking_1718000000000_a1b2c3d4e5f6",
        metadata: dict | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "payment_intent",
                "status": status,
                "amount": amount,
                "currency": currency,
                "client_secret": client_secret,
                "transfer_group": transfer_group,
                "metadata": metadata or {},
            }
        )

    return _create


@pytest.fixture
def mock_refund():
    """Create a mock Refund response."""

    def _create(
        id: str = "re_test123456",
        amount: int = 10000,
        currency: str = "myr",
        status: str = "succeeded",
        payment_intent: str = "pi_test123456",
        charge: Any = "ch_test123456",
        created: int = 1718000500,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "refund",
                "amount": amount,
                "currency": currency,
                "status": status,
                "payment_intent": payment_intent,
                "charge": charge,
                "created": created,
            }
        )

    return _create


@pytest.fixture
def mock_transfer():
    """Create a mock Transfer response."""

    def _create(
        id: str = "tr_test123456",
        amount: int = 9500,
        currency: str = "myr",
        destination: str = "acct_owner123",
        transfer_group: str | None = "booking_1718000000000_a1b2c3d4e5f6",
        created: int = 1718000100,
        source_transaction: Any = None,
        reversals: list[dict] | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "transfer",
                "amount": amount,
                "currency": currency,
                "destination": destination,
                "transfer_group": transfer_group,
                "created": created,
                "source_transaction": source_transaction,
                "reversals": {"object": "list", "data": reversals or []},
            }
        )

    return _create


@pytest.fixture
def mock_transfer_reversal():
    """Create a mock TransferReversal response."""

    def _create(
        id: str = "trr_test123456",
        amount: int = 9500,
        currency: str = "myr",
        transfer: str = "tr_test123456",
        created: int = 1718000600,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "transfer_reversal",
                "amount": amount,
                "currency": currency,
                "transfer": transfer,
                "created": created,
            }
        )

    return _create


@pytest.fixture
def mock_charge():
    """Create a mock Charge response."""

    def _create(
        id: str = "ch_test123456",
        amount: int = 10000,
        currency: str = "myr",
        customer: str = "cus_renter123",
        payment_intent: str = "pi_test123456",
        description: str | None = "Rentify booking",
        receipt_url: str | None = "https://pay.stripe.com/receipts/ch_test123456",
        created: int = 1718000000,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "charge",
                "amount": amount,
                "currency": currency,
                "customer": customer,
                "payment_intent": payment_intent,
                "description": description,
                "receipt_url": receipt_url,
                "created": created,
            }
        )

    return _create


@pytest.fixture
def mock_deleted():
    """Create a mock deletion response."""

    def _create(id: str, object: str = "customer") -> MockStripeObject:
        return MockStripeObject({"id": id, "object": object, "deleted": True})

    return _create


# =============================================================================
# Mock Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    """Create a Stripe CardError."""

    def _create(
        message: str = "Your card was declined.",
        code: str = "card_declined",
        decline_code: str | None = "generic_decline",
    ) -> stripe.CardError:
        error = stripe.CardError(message=message, param=None, code=code)
        error.decline_code = decline_code
        return error

    return _create


@pytest.fixture
def invalid_request_error():
    """Create a Stripe InvalidRequestError."""

    def _create(
        message: str = "No such payment_intent: 'pi_missing'",
        param: str | None = "intent",
        code: str | None = "resource_missing",
    ) -> stripe.InvalidRequestError:
        return stripe.InvalidRequestError(message=message, param=param, code=code)

    return _create


@pytest.fixture
def rate_limit_error():
    """Create a Stripe RateLimitError."""
    return stripe.RateLimitError(message="Too many requests hit the API too quickly.")


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError."""
    return stripe.APIConnectionError(message="Could not connect to Stripe.")


@pytest.fixture
def api_error():
    """Create a Stripe APIError."""
    return stripe.APIError(message="Something went wrong on Stripe's end.")


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(message="Invalid API Key provided.")
