"""
Pytest fixtures and configuration for Storefront Backend tests

This file provides shared fixtures that can be used across all test modules.

Author: TM3
Date: 2025-10-17
"""
import pytest
import os
from datetime import datetime
from decimal import Decimal
from dotenv import load_dotenv

from app.core.auth import create_access_token
from app.domain.cart import Cart, CartItem
from app.domain.product import Product

# Load environment variables for tests
load_dotenv()


@pytest.fixture(scope="session")
def database_url():
    """
    Provides the database URL for tests

    Scope: session (created once per test session)
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not configured")
    return url


@pytest.fixture
def product_row():
    """A products row as returned by RealDictCursor"""
    return {
        'id': 'a1b2c3d4-0000-0000-0000-000000000001',
        'name': 'Vestido Floral',
        'description': 'Vestido de verano con estampado floral',
        'price': Decimal('45.00'),
        'original_price': Decimal('60.00'),
        'image_url': 'https://cdn.example.com/vestido.jpg',
        'category_id': 'c0000000-0000-0000-0000-000000000001',
        'in_stock': True,
        'featured': True,
        'rating': Decimal('4.5'),
        'stock_quantity': 3,
        'payment_link': None,
        'size': 'M',
        'created_at': datetime(2025, 10, 1, 12, 0, 0),
        'updated_at': None
    }


@pytest.fixture
def sample_product(product_row):
    """Product domain model built from product_row"""
    return Product(**product_row)


@pytest.fixture
def make_product():
    """Factory for products with custom stock"""
    def _make(product_id='p-1', name='Blusa', price='20.00', stock=5, in_stock=True):
        return Product(
            id=product_id,
            name=name,
            description='Blusa de algodón',
            price=Decimal(price),
            stock_quantity=stock,
            in_stock=in_stock
        )
    return _make


@pytest.fixture
def make_cart():
    """Factory for carts with (product_id, quantity, price, stock) lines"""
    def _make(lines=(), cart_id='cart-1', user_id=None, session_id='session-1'):
        items = [
            CartItem(
                product_id=product_id,
                name=f'Producto {product_id}',
                price=Decimal(price),
                quantity=quantity,
                stock_quantity=stock,
                in_stock=True
            )
            for product_id, quantity, price, stock in lines
        ]
        return Cart(id=cart_id, user_id=user_id, session_id=session_id, items=items)
    return _make


@pytest.fixture
def admin_headers():
    """Authorization header carrying an admin token"""
    token = create_access_token("admin", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    """Authorization header carrying a shopper token"""
    token = create_access_token("user-123", role="user")
    return {"Authorization": f"Bearer {token}"}
