"""
Tests for payments app.

This package contains test modules for:
- test_views.py: API endpoint tests (SDK classes patched)
- test_serializers.py: Request/response serializer tests

Adapter and service tests live beside their packages
(adapters/tests/, services/tests/).

Usage:
    pytest app/payments/
    pytest app/payments/tests/test_views.py
"""
