"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - Health check (load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /docs/                         - ReDoc API documentation
    /create-stripe-customer        - Payment endpoints (see payments.urls),
    /create-payment-intent           mounted at the root because the mobile
    /refund                          client calls these paths directly
    ...

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

urlpatterns = [
    # Health check
    path("", health_check, name="health_check"),
    # Documentation
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # Payments
    path("", include("payments.urls")),
]
