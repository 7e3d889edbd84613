"""
Checkout Service - orders and payment outcomes

Flow:
1. Validate the cart (not empty, every line still within stock)
2. Create the Pagadito payment (a refused payment stores nothing)
3. Create the order with its items and payment token (payment_status = pending)
4. Verify the payment (simulated) and apply the result
5. Clear the cart when the payment succeeded

Payment results (from verification or from the webhook) are applied once:
a paid order is never re-processed, so stock is decremented only once.

Author: TM3
Date: 2025-10-17
"""
import json
import logging
import uuid
from typing import Dict, Optional

from app.connectors.pagadito_connector import (
    PagaditoConnector,
    PAYMENT_COMPLETED,
)
from app.domain.cart import Cart
from app.domain.order import (
    CheckoutRequest,
    Order,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_FAILED,
    ORDER_STATUS_PROCESSING,
)
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.cart_service import CartService, EmptyCartError, OutOfStockError
from app.services.pagadito_service import PagaditoService

logger = logging.getLogger(__name__)

EVENT_PAYMENT_SUCCESS = "payment.success"
EVENT_PAYMENT_FAILED = "payment.failed"


class CheckoutService:
    """Places orders and applies payment results"""

    def __init__(
        self,
        order_repo: OrderRepository = None,
        product_repo: ProductRepository = None,
        cart_service: CartService = None,
        pagadito_service: PagaditoService = None
    ):
        self.order_repo = order_repo or OrderRepository()
        self.product_repo = product_repo or ProductRepository()
        self.cart_service = cart_service or CartService(product_repo=self.product_repo)
        self.pagadito_service = pagadito_service or PagaditoService()

    @staticmethod
    def _check_stock(cart: Cart) -> None:
        for item in cart.items:
            if not item.in_stock or item.quantity > item.stock_quantity:
                raise OutOfStockError(
                    f"Only {item.stock_quantity} units of {item.name} are available"
                )

    def checkout(self, cart: Cart, request: CheckoutRequest) -> Dict:
        """
        Place an order for the cart and run the payment

        The order belongs to the cart's owner, so a token that did not
        resolve to a user cart places a guest order.

        Returns:
            Dict with order, payment_id, payment_url and success flag

        Raises:
            EmptyCartError: cart has no lines
            OutOfStockError: a line exceeds current stock
            PagaditoError: the gateway refused the payment (nothing is stored)
        """
        if cart.is_empty:
            raise EmptyCartError('Your cart is empty')

        self._check_stock(cart)

        order_id = str(uuid.uuid4())
        connector = self.pagadito_service.build_connector()
        payment = connector.create_payment(
            amount=cart.total,
            description=f"Order {order_id} - {len(cart.items)} items",
            order_id=order_id,
            customer={'name': request.name, 'email': request.email, 'phone': request.phone}
        )
        payment_id = payment['payment_id']

        order = self.order_repo.create_with_items(
            order_id=order_id,
            customer_name=request.name,
            customer_email=request.email,
            customer_phone=request.phone,
            shipping_address=request.address,
            total_amount=cart.total,
            items=[
                {
                    'product_id': item.product_id,
                    'product_name': item.name,
                    'quantity': item.quantity,
                    'price': item.price,
                }
                for item in cart.items
            ],
            user_id=cart.user_id,
            transaction_id=payment_id
        )
        logger.info(f"Order {order_id} created: {cart.item_count} units, total {cart.total}")

        updated = self.verify_payment(payment_id, connector)
        success = updated is not None and updated.is_paid

        if success:
            self.cart_service.clear(cart)

        return {
            'success': success,
            'order': (updated or order).to_dict(),
            'payment_id': payment_id,
            'payment_url': payment['payment_url'],
            'error': None if success else 'Payment failed or was cancelled',
        }

    def verify_payment(self, payment_id: str, connector: PagaditoConnector = None) -> Optional[Order]:
        """Ask the gateway for the payment status and apply it"""
        connector = connector or self.pagadito_service.build_connector()
        status = connector.verify_payment(payment_id)
        return self.apply_payment_result(payment_id, status == PAYMENT_COMPLETED)

    def apply_payment_result(self, transaction_id: str, succeeded: bool) -> Optional[Order]:
        """
        Record a payment outcome on its order

        Success: paid/processing and stock decremented (clamped at zero).
        Failure: payment_status = failed.

        The status update only matches unpaid orders, so when two results
        for the same payment race, only the one that flips the order to paid
        decrements stock.

        Returns:
            Updated order, or None if no order has this transaction ID
        """
        existing = self.order_repo.find_by_transaction_id(transaction_id)
        if not existing:
            logger.warning(f"No order found for transaction {transaction_id}")
            return None

        if existing.is_paid:
            logger.info(f"Order {existing.id} already paid, ignoring duplicate result")
            return existing

        if succeeded:
            updated = self.order_repo.update_payment_status(
                transaction_id, PAYMENT_STATUS_PAID, ORDER_STATUS_PROCESSING
            )
        else:
            updated = self.order_repo.update_payment_status(transaction_id, PAYMENT_STATUS_FAILED)

        if updated is None:
            logger.info(f"Order {existing.id} was paid concurrently, ignoring duplicate result")
            return self.order_repo.find_by_transaction_id(transaction_id)

        if succeeded:
            for item in existing.items:
                self.product_repo.decrement_stock(item.product_id, item.quantity)
            logger.info(f"Payment {transaction_id} completed for order {existing.id}")
        else:
            logger.info(f"Payment {transaction_id} failed for order {existing.id}")

        updated.items = existing.items
        return updated

    def handle_webhook(self, signature: Optional[str], body: bytes) -> Dict:
        """
        Process a Pagadito webhook

        Raises:
            InvalidSignatureError: signature does not match the webhook key
            ValueError: body is not a JSON object
        """
        PagaditoConnector.validate_webhook(signature, body, self.pagadito_service.get_webhook_key())

        try:
            payload = json.loads(body or b"{}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid webhook payload: {e}")

        if not isinstance(payload, dict):
            raise ValueError("Invalid webhook payload: expected a JSON object")

        event_type = payload.get('event_type')
        transaction_id = payload.get('transaction_id')

        if event_type in (EVENT_PAYMENT_SUCCESS, EVENT_PAYMENT_FAILED):
            if not transaction_id:
                raise ValueError("transaction_id is required")
            order = self.apply_payment_result(transaction_id, event_type == EVENT_PAYMENT_SUCCESS)
            return {
                'success': True,
                'event_type': event_type,
                'order_id': order.id if order else None,
            }

        logger.info(f"Unhandled Pagadito event type: {event_type}")
        return {'success': True, 'event_type': event_type, 'order_id': None}
