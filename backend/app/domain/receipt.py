"""
Receipt Domain Models

Manual sales receipts issued from the back office and sent to the
customer over WhatsApp.

Author: TM3
Date: 2025-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class ReceiptItem(BaseModel):
    id: Optional[str] = None
    receipt_id: Optional[str] = None
    product_name: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., gt=0)
    total_price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['unit_price'] = float(self.unit_price)
        data['total_price'] = float(self.total_price)
        return data


class Receipt(BaseModel):
    """
    Receipt domain model

    Fields:
        receipt_number: REC-YYYYMMDD-NNNN
        subtotal: Sum of line totals
        tax_amount: Tax over subtotal
        total_amount: subtotal + tax_amount
    """
    id: Optional[str] = None
    receipt_number: str
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[ReceiptItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump(exclude={'items'})
        for field in ['subtotal', 'tax_amount', 'total_amount']:
            data[field] = float(data[field])
        data['items'] = [item.to_dict() for item in self.items]
        return data


class ReceiptLineInput(BaseModel):
    product_name: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., gt=0, decimal_places=2)


class ReceiptCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    notes: Optional[str] = None
    items: List[ReceiptLineInput] = Field(..., min_length=1)
