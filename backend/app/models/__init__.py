"""
Modelos de base de datos
"""
from .catalog import Category, Product
from .cart import UserCart, CartItem
from .order import Order, OrderItem
from .settings import WhatsAppSetting, PaymentSetting, StoreSetting
from .receipt import Receipt, ReceiptItem

__all__ = [
    "Category",
    "Product",
    "UserCart",
    "CartItem",
    "Order",
    "OrderItem",
    "WhatsAppSetting",
    "PaymentSetting",
    "StoreSetting",
    "Receipt",
    "ReceiptItem",
]
