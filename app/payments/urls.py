"""
URL configuration for the payments app.

Payments - Accounts:
    POST   /create-stripe-customer          - Create renter customer
    POST   /create-connect-account          - Create owner Connect account
    POST   /create-connect-account-link     - Create onboarding link
    DELETE /stripe/delete-accounts          - Delete customer/Connect account

Payments - Settlement:
    POST /create-payment-intent             - Create booking payment
    POST /refund                            - Refund and reverse transfers

Payments - Payment Methods:
    POST /create-setup-intent               - Save a card
    POST /create-ephemeral-key              - Mobile SDK key
    GET  /list-payment-methods/<customerId> - List saved cards
    POST /detach-payment-method             - Remove saved card
    GET  /config                            - Publishable key

Payments - History:
    POST /transactions/renter               - Renter history
    POST /transactions/owner                - Owner history

Paths have no trailing slash; they are mounted at the site root.
"""

from django.urls import path

from payments import views

app_name = "payments"

urlpatterns = [
    # Accounts
    path(
        "create-stripe-customer",
        views.CreateStripeCustomerView.as_view(),
        name="create_stripe_customer",
    ),
    path(
        "create-connect-account",
        views.CreateConnectAccountView.as_view(),
        name="create_connect_account",
    ),
    path(
        "create-connect-account-link",
        views.CreateConnectAccountLinkView.as_view(),
        name="create_connect_account_link",
    ),
    path(
        "stripe/delete-accounts",
        views.DeleteAccountsView.as_view(),
        name="delete_accounts",
    ),
    # Settlement
    path(
        "create-payment-intent",
        views.CreatePaymentIntentView.as_view(),
        name="create_payment_intent",
    ),
    path("refund", views.RefundView.as_view(), name="refund"),
    # Payment methods
    path(
        "create-setup-intent",
        views.CreateSetupIntentView.as_view(),
        name="create_setup_intent",
    ),
    path(
        "create-ephemeral-key",
        views.CreateEphemeralKeyView.as_view(),
        name="create_ephemeral_key",
    ),
    path(
        "list-payment-methods/<str:customer_id>",
        views.ListPaymentMethodsView.as_view(),
        name="list_payment_methods",
    ),
    path(
        "detach-payment-method",
        views.DetachPaymentMethodView.as_view(),
        name="detach_payment_method",
    ),
    path("config", views.PublishableKeyView.as_view(), name="config"),
    # History
    path(
        "transactions/renter",
        views.RenterTransactionsView.as_view(),
        name="renter_transactions",
    ),
    path(
        "transactions/owner",
        views.OwnerTransactionsView.as_view(),
        name="owner_transactions",
    ),
]
