"""
Best-effort deletion of a user's Stripe accounts.

Used when a user closes their Rentify account. The Customer and the
Connect account are deleted independently: a failure on one side is logged
and reported as False without stopping the other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService

from payments.exceptions import PaymentValidationError, StripeError

if TYPE_CHECKING:
    from payments.adapters import StripeAdapter


class AccountService(BaseService):
    """Deletes Stripe Customers and Connect accounts."""

    def __init__(self, adapter: StripeAdapter):
        self.adapter = adapter

    def delete_accounts(
        self,
        customer_id: str | None = None,
        connect_account_id: str | None = None,
    ) -> dict[str, bool]:
        """
        Attempt to delete the given Customer and/or Connect account.

        Returns:
            ``customerDeleted`` (only when a customer id was given) and
            ``connectAccountDeleted``. A missing Connect account counts as
            deleted since there is nothing to remove.

        Raises:
            PaymentValidationError: Neither id was given
        """
        if not customer_id and not connect_account_id:
            raise PaymentValidationError("No Stripe IDs provided.")

        logger = self.get_logger()
        results: dict[str, bool] = {}

        if customer_id:
            try:
                self.adapter.delete_customer(customer_id)
                results["customerDeleted"] = True
            except StripeError as e:
                logger.warning(
                    f"Customer delete failed: {e.message}",
                    extra={"customer_id": customer_id},
                )
                results["customerDeleted"] = False

        if connect_account_id:
            try:
                self.adapter.delete_connected_account(connect_account_id)
                results["connectAccountDeleted"] = True
            except StripeError as e:
                logger.warning(
                    f"Connect account delete failed: {e.message}",
                    extra={"account_id": connect_account_id},
                )
                results["connectAccountDeleted"] = False
        else:
            results["connectAccountDeleted"] = True

        return results
