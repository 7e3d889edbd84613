"""
Cart Service - cart rules and cart/session reconciliation

Rules:
- An authenticated user's DB cart is preferred; if it cannot be loaded the
  anonymous session cart is used instead.
- A session cart that still holds items when its owner authenticates is
  merged into the user's cart and marked "merged".
- Adding a product is blocked once the cart holds all available stock.
- Quantities are clamped to stock; a quantity <= 0 removes the line.
- Every change is persisted by replacing the stored lines (last write wins).

Author: TM3
Date: 2025-10-17
"""
import logging
from decimal import Decimal
from typing import List, Optional, Dict

from app.domain.cart import Cart, CartItem, CartLineInput, CART_STATUS_MERGED
from app.domain.product import Product
from app.repositories.cart_repository import CartRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CartError(Exception):
    """Base class for cart rule violations"""


class OutOfStockError(CartError):
    """No more stock available for the product"""


class ProductNotFoundError(CartError, LookupError):
    """Product does not exist"""


class CartItemNotFoundError(CartError, LookupError):
    """Product is not in the cart"""


class EmptyCartError(CartError):
    """Operation needs at least one cart line"""


# ============================================================================
# Pure cart rules (no I/O)
# ============================================================================

def available_stock(product: Product, quantity_in_cart: int) -> int:
    """Units that can still be added, never below zero"""
    stock = product.stock_quantity if product.in_stock else 0
    return max(stock - quantity_in_cart, 0)


def clamp_quantity(quantity: int, stock_quantity: int) -> int:
    """Clamp a requested quantity into [0, stock_quantity]"""
    return max(min(quantity, stock_quantity), 0)


def item_from_product(product: Product, quantity: int) -> CartItem:
    return CartItem(
        product_id=product.id,
        name=product.name,
        price=product.price,
        image_url=product.image_url,
        quantity=quantity,
        stock_quantity=product.stock_quantity,
        in_stock=product.in_stock
    )


def add_product(cart: Cart, product: Product) -> CartItem:
    """
    Add one unit of a product to the cart

    Raises:
        OutOfStockError: the cart already holds every available unit
    """
    if available_stock(product, cart.quantity_of(product.id)) <= 0:
        raise OutOfStockError('No more stock available for this product')

    existing = cart.find_item(product.id)
    if existing:
        existing.quantity += 1
        existing.price = product.price
        existing.stock_quantity = product.stock_quantity
        existing.in_stock = product.in_stock
        return existing

    item = item_from_product(product, 1)
    cart.items.append(item)
    return item


def set_quantity(cart: Cart, product: Product, quantity: int) -> Optional[CartItem]:
    """
    Set a line's quantity, clamped to stock

    Returns the updated line, or None if the line was removed.

    Raises:
        CartItemNotFoundError: product is not in the cart
    """
    existing = cart.find_item(product.id)
    if not existing:
        raise CartItemNotFoundError(f"Product {product.id} is not in the cart")

    stock = product.stock_quantity if product.in_stock else 0
    clamped = clamp_quantity(quantity, stock)
    if clamped <= 0:
        remove_product(cart, product.id)
        return None

    if clamped < quantity:
        logger.info(f"Quantity for product {product.id} clamped from {quantity} to {clamped}")

    existing.quantity = clamped
    existing.price = product.price
    existing.stock_quantity = product.stock_quantity
    return existing


def remove_product(cart: Cart, product_id: str) -> bool:
    """Remove a product line. Returns False when it was not in the cart."""
    before = len(cart.items)
    cart.items = [item for item in cart.items if item.product_id != product_id]
    return len(cart.items) != before


def build_items_from_snapshot(lines: List[CartLineInput], products: Dict[str, Product]) -> List[CartItem]:
    """
    Turn a client-held cart snapshot into clamped cart lines

    Duplicate product lines are summed; unknown or unavailable products and
    zero quantities are dropped.
    """
    requested: Dict[str, int] = {}
    for line in lines:
        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

    items = []
    for product_id, quantity in requested.items():
        product = products.get(product_id)
        if not product:
            logger.warning(f"Dropping unknown product {product_id} from cart snapshot")
            continue

        clamped = clamp_quantity(quantity, available_stock(product, 0))
        if clamped > 0:
            items.append(item_from_product(product, clamped))

    return items


def merge_items(user_items: List[CartItem], session_items: List[CartItem]) -> List[CartItem]:
    """
    Merge session lines into the user's lines

    Products already in the user cart keep the user's quantity; new products
    are appended clamped to stock.
    """
    merged = list(user_items)
    present = {item.product_id for item in user_items}

    for item in session_items:
        if item.product_id in present:
            continue
        stock = item.stock_quantity if item.in_stock else 0
        quantity = clamp_quantity(item.quantity, stock)
        if quantity > 0:
            merged.append(item.model_copy(update={'id': None, 'quantity': quantity}))
            present.add(item.product_id)

    return merged


def summarize_carts(carts: List[Cart], search: Optional[str] = None) -> Dict:
    """
    Admin overview of active carts

    Returns carts (optionally filtered by owner, session or product name)
    and totals over the unfiltered set.
    """
    rows = []
    for cart in carts:
        data = cart.to_dict()
        data['user_name'] = 'Authenticated User' if cart.user_id else 'Anonymous'
        rows.append(data)

    if search:
        term = search.lower()
        rows = [
            row for row in rows
            if term in row['user_name'].lower()
            or term in (row['session_id'] or '').lower()
            or any(term in item['name'].lower() for item in row['items'])
        ]

    total_value = sum((cart.total for cart in carts), Decimal("0"))

    return {
        'carts': rows,
        'summary': {
            'total_carts': len(carts),
            'total_items': sum(cart.item_count for cart in carts),
            'total_value': float(total_value),
        }
    }


# ============================================================================
# Service (persistence)
# ============================================================================

class CartService:
    """Loads, changes and persists carts"""

    def __init__(self, cart_repo: CartRepository = None, product_repo: ProductRepository = None):
        self.cart_repo = cart_repo or CartRepository()
        self.product_repo = product_repo or ProductRepository()

    def _session_cart(self, session_id: str) -> Cart:
        return (
            self.cart_repo.find_active_by_session(session_id)
            or self.cart_repo.create(session_id=session_id)
        )

    def resolve_cart(self, user_id: Optional[str], session_id: Optional[str]) -> Cart:
        """
        Find the cart for the caller

        Authenticated users get their DB cart (merging any leftover session
        cart into it). If that fails, or for anonymous callers, the session
        cart is used.
        """
        if user_id:
            try:
                cart = (
                    self.cart_repo.find_active_by_user(user_id)
                    or self.cart_repo.create(user_id=user_id)
                )
                if session_id:
                    session_cart = self.cart_repo.find_active_by_session(session_id)
                    if session_cart and session_cart.id != cart.id and not session_cart.is_empty:
                        cart = self.merge_session_cart(cart, session_cart)
                return cart
            except Exception as e:
                logger.error(f"Error loading cart for user {user_id}: {e}")
                if not session_id:
                    raise
                logger.info(f"Falling back to session cart {session_id}")

        if not session_id:
            raise ValueError("A cart session ID is required")

        return self._session_cart(session_id)

    def merge_session_cart(self, user_cart: Cart, session_cart: Cart) -> Cart:
        """Move a session cart's lines into the user cart"""
        user_cart.items = merge_items(user_cart.items, session_cart.items)
        self.cart_repo.save_items(user_cart.id, user_cart.items)
        self.cart_repo.set_status(session_cart.id, CART_STATUS_MERGED)
        logger.info(f"Merged session cart {session_cart.id} into user cart {user_cart.id}")
        return user_cart

    def _get_product(self, product_id: str) -> Product:
        product = self.product_repo.find_by_id(product_id)
        if not product:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    def add_item(self, cart: Cart, product_id: str) -> Cart:
        product = self._get_product(product_id)
        add_product(cart, product)
        self.cart_repo.save_items(cart.id, cart.items)
        return cart

    def update_quantity(self, cart: Cart, product_id: str, quantity: int) -> Cart:
        if quantity <= 0:
            return self.remove_item(cart, product_id)

        product = self._get_product(product_id)
        set_quantity(cart, product, quantity)
        self.cart_repo.save_items(cart.id, cart.items)
        return cart

    def remove_item(self, cart: Cart, product_id: str) -> Cart:
        if not remove_product(cart, product_id):
            raise CartItemNotFoundError(f"Product {product_id} is not in the cart")
        self.cart_repo.save_items(cart.id, cart.items)
        return cart

    def clear(self, cart: Cart) -> Cart:
        cart.items = []
        self.cart_repo.save_items(cart.id, cart.items)
        return cart

    def replace_items(self, cart: Cart, lines: List[CartLineInput]) -> Cart:
        """Store the client's cart snapshot (clamped to stock)"""
        product_ids = list({line.product_id for line in lines})
        products = {product.id: product for product in self.product_repo.find_by_ids(product_ids)}
        cart.items = build_items_from_snapshot(lines, products)
        self.cart_repo.save_items(cart.id, cart.items)
        return cart

    # Admin operations

    def list_active_carts(self, search: Optional[str] = None) -> Dict:
        return summarize_carts(self.cart_repo.find_all_active(), search)

    def remove_cart_line(self, item_id: str) -> bool:
        return self.cart_repo.delete_item(item_id)

    def clear_cart_by_id(self, cart_id: str) -> int:
        return self.cart_repo.delete_items(cart_id)
