"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: TM3
Date: 2025-10-17
"""
from app.domain.product import Product
from app.domain.category import Category
from app.domain.cart import Cart, CartItem
from app.domain.order import Order, OrderItem, CheckoutRequest
from app.domain.receipt import Receipt, ReceiptItem
from app.domain.settings import WhatsAppSettings, PagaditoSettings, PaymentSettings, StoreSettings

__all__ = [
    'Product', 'Category', 'Cart', 'CartItem', 'Order', 'OrderItem', 'CheckoutRequest',
    'Receipt', 'ReceiptItem', 'WhatsAppSettings', 'PagaditoSettings', 'PaymentSettings',
    'StoreSettings'
]
