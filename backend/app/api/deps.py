"""
Shared API dependencies

Service factories are injected with Depends so tests can swap them through
app.dependency_overrides.

Author: TM3
Date: 2025-10-17
"""
import uuid
from typing import Optional

from fastapi import Header, Response

from app.repositories.category_repository import CategoryRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.cart_service import CartService
from app.services.checkout_service import CheckoutService
from app.services.pagadito_service import PagaditoService
from app.services.receipt_service import ReceiptService
from app.services.whatsapp_service import WhatsAppService

CART_SESSION_HEADER = "X-Cart-Session"


def get_product_repository() -> ProductRepository:
    return ProductRepository()


def get_category_repository() -> CategoryRepository:
    return CategoryRepository()


def get_order_repository() -> OrderRepository:
    return OrderRepository()


def get_cart_service() -> CartService:
    return CartService()


def get_whatsapp_service() -> WhatsAppService:
    return WhatsAppService()


def get_pagadito_service() -> PagaditoService:
    return PagaditoService()


def get_receipt_service() -> ReceiptService:
    return ReceiptService()


def get_checkout_service() -> CheckoutService:
    return CheckoutService()


def get_cart_session(
    response: Response,
    x_cart_session: Optional[str] = Header(None, alias=CART_SESSION_HEADER)
) -> str:
    """Client cart session, minted when missing and echoed back in the response"""
    session_id = x_cart_session or str(uuid.uuid4())
    response.headers[CART_SESSION_HEADER] = session_id
    return session_id

