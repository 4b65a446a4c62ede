"""
Payments app for Stripe integration.

This app handles:
- Renter customers and saved cards
- Owner Connect accounts and onboarding
- Booking settlement (destination charge tagged with a settlement group)
- Settlement reversal (refund plus transfer reversals)
- Transaction history for renters and owners

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
"""
