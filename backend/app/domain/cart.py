"""
Cart Domain Models

A cart belongs either to an authenticated user (user_id) or to an
anonymous cart session (session_id). Only one cart per owner is "active".

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


CART_STATUS_ACTIVE = "active"
CART_STATUS_MERGED = "merged"
CART_STATUS_CONVERTED = "converted"


class CartItem(BaseModel):
    """
    Cart line - a product reference plus quantity

    name, price, image_url and stock_quantity come from the products table
    (JOIN) so the line always reflects current catalog data.
    """

    id: Optional[str] = Field(None, description="cart_items row ID")
    product_id: str = Field(..., description="Product ID")
    name: str = Field("", description="Product name")
    price: Decimal = Field(Decimal("0"), description="Unit price", ge=0)
    image_url: Optional[str] = Field(None, description="Product image URL")
    quantity: int = Field(..., description="Quantity in cart", ge=1)
    stock_quantity: int = Field(0, description="Units in stock", ge=0)
    in_stock: bool = Field(True, description="Product availability flag")

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['price'] = float(self.price)
        data['line_total'] = float(self.line_total)
        return data


class Cart(BaseModel):
    """Shopping cart owned by a user or an anonymous session"""

    id: Optional[str] = Field(None, description="user_carts row ID")
    user_id: Optional[str] = Field(None, description="Owning user")
    session_id: Optional[str] = Field(None, description="Anonymous cart session")
    status: str = Field(CART_STATUS_ACTIVE, description="active, merged or converted")
    items: List[CartItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        """Total units across all lines"""
        return sum(item.quantity for item in self.items)

    @property
    def total(self) -> Decimal:
        """Sum of price x quantity"""
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def quantity_of(self, product_id: str) -> int:
        """Quantity of a product already in the cart (0 if absent)"""
        item = self.find_item(product_id)
        return item.quantity if item else 0

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'session_id': self.session_id,
            'status': self.status,
            'items': [item.to_dict() for item in self.items],
            'item_count': self.item_count,
            'total': float(self.total),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }


# Request models
class AddCartItem(BaseModel):
    product_id: str


class UpdateCartItem(BaseModel):
    quantity: int


class CartLineInput(BaseModel):
    """A line of the client-held cart snapshot"""
    product_id: str
    quantity: int = Field(..., ge=0)


class ReplaceCart(BaseModel):
    items: List[CartLineInput] = Field(default_factory=list)
