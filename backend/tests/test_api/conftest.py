"""
API test fixtures: TestClient with service dependencies replaced by mocks

Author: TM3
Date: 2025-10-17
"""
import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from app.main import app
from app.api import deps


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def override():
    """Install a MagicMock for a dependency provider and return it"""
    def _override(provider):
        mock = MagicMock()
        app.dependency_overrides[provider] = lambda: mock
        return mock
    return _override


@pytest.fixture
def product_repo(override):
    return override(deps.get_product_repository)


@pytest.fixture
def category_repo(override):
    return override(deps.get_category_repository)


@pytest.fixture
def order_repo(override):
    return override(deps.get_order_repository)


@pytest.fixture
def cart_service(override):
    return override(deps.get_cart_service)


@pytest.fixture
def whatsapp_service(override):
    return override(deps.get_whatsapp_service)


@pytest.fixture
def pagadito_service(override):
    return override(deps.get_pagadito_service)


@pytest.fixture
def receipt_service(override):
    return override(deps.get_receipt_service)


@pytest.fixture
def checkout_service(override):
    return override(deps.get_checkout_service)
