"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.

Author: TM3
Date: 2025-10-17
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.settings_repository import SettingsRepository
from app.repositories.receipt_repository import ReceiptRepository

__all__ = [
    'ProductRepository',
    'CategoryRepository',
    'CartRepository',
    'OrderRepository',
    'SettingsRepository',
    'ReceiptRepository'
]
