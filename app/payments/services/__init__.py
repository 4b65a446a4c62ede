"""
Payment services for coordinating payment operations.

This module provides:
- SettlementService: Booking payments and their reversal
- TransactionHistoryService: Renter and owner transaction histories
- AccountService: Best-effort deletion of Stripe accounts

Every service takes a StripeAdapter at construction.

Usage:
    from payments.adapters import get_stripe_adapter
    from payments.services import SettlementService

    service = SettlementService(get_stripe_adapter())
    result = service.reverse_settlement("pi_xxx")
"""

from payments.services.account_service import AccountService
from payments.services.settlement_service import (
    SettlementInitiation,
    SettlementReversal,
    SettlementService,
    generate_settlement_group,
)
from payments.services.transaction_history import (
    Direction,
    EntryType,
    TransactionEntry,
    TransactionHistoryService,
)

__all__ = [
    "AccountService",
    "Direction",
    "EntryType",
    "SettlementInitiation",
    "SettlementReversal",
    "SettlementService",
    "TransactionEntry",
    "TransactionHistoryService",
    "generate_settlement_group",
]
