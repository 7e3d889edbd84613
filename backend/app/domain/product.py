"""
Product Domain Model

Represents a product in the storefront catalog.
This is the single source of truth for product data structure.

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product ID (UUID)
        name: Product name
        description: Product description
        price: Current selling price
        original_price: Price before discount (set when the product is on sale)
        image_url: Public image URL
        category_id: Reference to categories.id (optional)

        # Flags
        in_stock: Manual availability flag
        featured: Shown in the featured products section
        rating: Average rating (0-5)

        # Inventory
        stock_quantity: Units available for sale (never negative)

        # Extras
        payment_link: Direct "Pay Now" link for the product
        size: Free-form size label
    """

    # Primary identification
    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")

    # Pricing
    price: Decimal = Field(..., description="Sale price", ge=0)
    original_price: Optional[Decimal] = Field(None, description="Price before discount", ge=0)

    # Details
    image_url: str = Field("/placeholder.svg", description="Product image URL")
    category_id: Optional[str] = Field(None, description="Category ID")
    size: Optional[str] = Field(None, description="Size label")
    payment_link: Optional[str] = Field(None, description="Direct payment link")

    # Flags
    in_stock: bool = Field(True, description="Availability flag")
    featured: bool = Field(False, description="Featured product")
    rating: Decimal = Field(Decimal("0"), description="Average rating", ge=0, le=5)

    # Inventory
    stock_quantity: int = Field(0, description="Units available", ge=0)

    # Metadata
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    # Computed properties
    @property
    def is_out_of_stock(self) -> bool:
        """No units left to sell"""
        return self.stock_quantity <= 0

    @property
    def is_available(self) -> bool:
        """Product can be added to a cart"""
        return self.in_stock and not self.is_out_of_stock

    @property
    def is_on_sale(self) -> bool:
        """Product has a higher original price"""
        return self.original_price is not None and self.original_price > self.price

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump()

        data['is_out_of_stock'] = self.is_out_of_stock
        data['is_available'] = self.is_available
        data['is_on_sale'] = self.is_on_sale

        # Convert Decimal to float for JSON compatibility
        for field in ['price', 'original_price', 'rating']:
            if data.get(field) is not None:
                data[field] = float(data[field])

        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    image_url: str = "/placeholder.svg"
    category_id: Optional[str] = None
    in_stock: bool = True
    featured: bool = False
    rating: Decimal = Field(Decimal("0"), ge=0, le=5)
    stock_quantity: int = Field(0, ge=0)
    payment_link: Optional[str] = None
    size: Optional[str] = None


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    category_id: Optional[str] = None
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None
    rating: Optional[Decimal] = Field(None, ge=0, le=5)
    stock_quantity: Optional[int] = Field(None, ge=0)
    payment_link: Optional[str] = None
    size: Optional[str] = None
