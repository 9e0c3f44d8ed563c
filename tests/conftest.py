# ===============================================================================
# PYTEST CONFIGURATION FOR RESELLERHUB
# ===============================================================================
"""
Global test configuration for ResellerHub.

Test Structure:
- tests/ mirrors apps/ structure for app-specific tests
- tests/factories/ holds plain helper functions that build model rows
- Naming convention: test_{app}_{feature}.py

Test Discovery:
- Run specific app tests: pytest tests/provisioning/
- Run all tests: pytest tests/
"""

import os

import django


def pytest_configure():
    """Configure Django settings for pytest"""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.test')

    # Configure Django
    django.setup()

# ===============================================================================
# PYTEST FIXTURES
# ===============================================================================

import pytest  # noqa: E402
from django.core.cache import cache  # noqa: E402

from tests.factories.resellerhub import create_customer, create_reseller  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """SettingsService caches lookups; keep every test isolated"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def reseller():
    """Reseller with a small credit balance"""
    return create_reseller(username='reseller', credits=10)


@pytest.fixture
def customer(reseller):
    """Active customer owned by the reseller fixture"""
    return create_customer(reseller, name='Maria Silva', phone='11987654321', username='maria01')
