"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides test environment
defaults. App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django

# Settings read these at import time; real values from the shell win
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_rentify")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_rentify")
os.environ.setdefault("DEBUG", "False")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("ENV_FILE", os.devnull)


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()
