"""
Order Domain Models

Represents checkout orders placed through the storefront and paid
through the (simulated) Pagadito gateway.

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_PAID = "paid"
PAYMENT_STATUS_FAILED = "failed"

ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_PROCESSING = "processing"


class OrderItem(BaseModel):
    """
    Order Item domain model - represents a line item in an order

    Fields:
        id: Order item ID
        order_id: Parent order ID
        product_id: Reference to products.id
        quantity: Number of units ordered
        price: Unit price at order time
        product_name: Current product name (optional, from JOIN)
    """

    id: Optional[str] = Field(None, description="Order item ID")
    order_id: str = Field(..., description="Parent order ID")
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    price: Decimal = Field(..., description="Price per unit", ge=0)
    product_name: Optional[str] = Field(None, description="Product name from catalog")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(self.price)
        data['line_total'] = float(self.line_total)
        return data


class Order(BaseModel):
    """
    Order domain model - represents a customer order

    Fields:
        id: Order ID (UUID)
        user_id: Authenticated user that placed the order (optional)

        # Customer information
        customer_name, customer_email, customer_phone, shipping_address

        # Financial information
        total_amount: Final order total

        # Status tracking
        payment_method: Always "pagadito" for storefront checkouts
        payment_status: pending, paid or failed
        status: pending, processing, ...
        transaction_id: Gateway payment token
    """

    id: str = Field(..., description="Order ID")
    user_id: Optional[str] = Field(None, description="Owning user")

    customer_name: str = Field(..., description="Customer name")
    customer_email: str = Field(..., description="Customer email")
    customer_phone: Optional[str] = Field(None, description="Customer phone")
    shipping_address: Optional[str] = Field(None, description="Shipping address")

    total_amount: Decimal = Field(..., description="Order total", ge=0)

    payment_method: str = Field("pagadito", description="Payment method")
    payment_status: str = Field(PAYMENT_STATUS_PENDING, description="Payment status")
    status: str = Field(ORDER_STATUS_PENDING, description="Order status")
    transaction_id: Optional[str] = Field(None, description="Gateway transaction ID")

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PAYMENT_STATUS_PAID

    def to_dict(self) -> dict:
        data = self.model_dump(exclude={'items'})
        data['total_amount'] = float(self.total_amount)
        data['items'] = [item.to_dict() for item in self.items]
        data['item_count'] = self.item_count
        return data


class CheckoutRequest(BaseModel):
    """Shipping information captured at checkout"""
    name: str
    email: EmailStr
    phone: str
    address: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must be at least 2 characters.')
        return v

    @field_validator('email', mode='before')
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 8:
            raise ValueError('Phone number must be at least 8 digits.')
        return v

    @field_validator('address')
    @classmethod
    def validate_address(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError('Address must be at least 10 characters.')
        return v
