"""
Store configuration models: WhatsApp contact settings, Pagadito payment
settings and the store identity printed on receipts.

Author: TM3
Date: 2025-10-17
"""
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional


PHONE_PATTERN = re.compile(r"^\+?[0-9]+$")

DEFAULT_WHATSAPP_PHONE = "1234567890"
DEFAULT_WHATSAPP_MESSAGE = "Hello! I am interested in your products."
DEFAULT_PRODUCT_MESSAGE = "Hello! I am interested in {productName} priced at ${productPrice}."


class WhatsAppSettings(BaseModel):
    """
    WhatsApp contact configuration

    product_message supports the {productName} and {productPrice}
    placeholders.
    """
    phone_number: str = DEFAULT_WHATSAPP_PHONE
    default_message: str = DEFAULT_WHATSAPP_MESSAGE
    product_message: str = DEFAULT_PRODUCT_MESSAGE

    @field_validator('phone_number')
    @classmethod
    def validate_phone_number(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError('Phone number must be at least 10 digits')
        if not PHONE_PATTERN.match(v):
            raise ValueError('Phone number must contain only digits, optionally starting with +')
        return v

    @field_validator('default_message', 'product_message')
    @classmethod
    def validate_message(cls, v: str) -> str:
        if len(v.strip()) < 10:
            raise ValueError('Message must be at least 10 characters')
        return v


class PagaditoSettings(BaseModel):
    """Pagadito merchant credentials (stored as JSON in payment_settings)"""
    uid: str = Field(..., min_length=1)
    wsk: str = Field(..., min_length=1)
    sandbox: bool = True
    return_url: Optional[str] = None
    webhook_url: Optional[str] = None

    @field_validator('return_url', 'webhook_url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        if not re.match(r"^https?://\S+$", v):
            raise ValueError('Must be a valid URL')
        return v


class PaymentSettings(BaseModel):
    """payment_settings row for one provider"""
    id: Optional[str] = None
    provider: str = "pagadito"
    settings: Optional[PagaditoSettings] = None
    webhook_key: Optional[str] = None

    def to_dict(self, include_secrets: bool = False) -> dict:
        data = self.model_dump()
        if data.get('settings') and not include_secrets:
            # Never echo the web service key back in full
            wsk = data['settings'].get('wsk') or ""
            data['settings']['wsk'] = f"{wsk[:4]}..." if wsk else ""
        return data


class PagaditoConnectionTest(BaseModel):
    uid: Optional[str] = None
    wsk: Optional[str] = None
    sandbox: bool = True


class StoreSettings(BaseModel):
    """Store identity printed on receipts"""
    id: Optional[str] = None
    store_name: str
    logo_url: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    tax_id: Optional[str] = None
