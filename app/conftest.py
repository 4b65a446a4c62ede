"""
Pytest configuration for the app test suites.

Tests never reach Stripe: adapter tests patch the SDK resource classes and
service/view tests use mocked adapters or SDK classes.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_*_service.py, test_transaction_history.py → integration
    - test_serializers.py, test_exceptions.py, test_stripe_adapter.py → unit
    - Unmatched files → unit (no test touches the database)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_settlement_service.py",
        "test_account_service.py",
        "test_transaction_history.py",
    ]

    for item in items:
        # Skip if test already has unit/integration marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration"}:
            continue

        filename = item.path.name

        if filename in integration_patterns:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
