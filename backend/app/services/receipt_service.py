"""
Receipt Service - manual receipts issued from the back office

Totals:
- line total = quantity x unit price
- subtotal = sum of line totals
- tax = subtotal x RECEIPT_TAX_RATE (15% by default)
- total = subtotal + tax
All amounts rounded to cents, half up.

Receipt numbers follow REC-YYYYMMDD-NNNN, sequential per day.

Author: TM3
Date: 2025-10-17
"""
import logging
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from app.core.config import settings
from app.domain.receipt import Receipt, ReceiptItem, ReceiptCreate, ReceiptLineInput
from app.domain.settings import StoreSettings
from app.repositories.receipt_repository import ReceiptRepository
from app.repositories.settings_repository import SettingsRepository
from app.services.whatsapp_service import build_whatsapp_url, format_receipt_message

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_totals(
    lines: List[ReceiptLineInput],
    tax_rate: float
) -> Tuple[List[ReceiptItem], Decimal, Decimal, Decimal]:
    """
    Returns:
        Tuple of (items, subtotal, tax_amount, total_amount)
    """
    items = [
        ReceiptItem(
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=to_money(line.unit_price),
            total_price=to_money(line.unit_price * line.quantity)
        )
        for line in lines
    ]
    subtotal = to_money(sum((item.total_price for item in items), Decimal("0")))
    tax_amount = to_money(subtotal * Decimal(str(tax_rate)))
    return items, subtotal, tax_amount, to_money(subtotal + tax_amount)


def format_receipt_number(day: date, sequence: int) -> str:
    return f"REC-{day:%Y%m%d}-{sequence:04d}"


class ReceiptService:
    """Issues, stores and lists receipts"""

    def __init__(self, receipt_repo: ReceiptRepository = None, settings_repo: SettingsRepository = None):
        self.receipt_repo = receipt_repo or ReceiptRepository()
        self.settings_repo = settings_repo or SettingsRepository()
        self.tax_rate = settings.RECEIPT_TAX_RATE

    def get_store_settings(self) -> StoreSettings:
        """Store identity for the receipt header, defaulting to STORE_NAME"""
        try:
            stored = self.settings_repo.get_store_settings()
        except Exception as e:
            logger.error(f"Error loading store settings: {e}")
            stored = None
        return stored or StoreSettings(store_name=settings.STORE_NAME)

    def next_receipt_number(self, today: Optional[date] = None) -> str:
        today = today or date.today()
        issued = self.receipt_repo.count_for_day(today)
        return format_receipt_number(today, issued + 1)

    def issue(self, data: ReceiptCreate) -> Dict:
        """
        Create and persist a receipt

        Returns:
            Dict with the stored receipt and, when the customer has a phone,
            a WhatsApp link carrying the receipt text
        """
        items, subtotal, tax_amount, total_amount = calculate_totals(data.items, self.tax_rate)

        receipt = Receipt(
            receipt_number=self.next_receipt_number(),
            customer_name=data.customer_name,
            customer_phone=data.customer_phone or None,
            customer_email=data.customer_email or None,
            subtotal=subtotal,
            tax_amount=tax_amount,
            total_amount=total_amount,
            notes=data.notes or None,
            items=items
        )
        stored = self.receipt_repo.create(receipt)
        if stored.created_at is None:
            stored.created_at = datetime.now()
        logger.info(f"Receipt {stored.receipt_number} issued for {stored.customer_name}: {stored.total_amount}")

        whatsapp_url = None
        if stored.customer_phone:
            message = format_receipt_message(stored, self.get_store_settings(), self.tax_rate)
            whatsapp_url = build_whatsapp_url(stored.customer_phone, message)

        return {
            'receipt': stored,
            'whatsapp_url': whatsapp_url,
        }

    def list_receipts(self, limit: int = 50, offset: int = 0) -> Tuple[List[Receipt], int]:
        return self.receipt_repo.find_all(limit=limit, offset=offset)

    def get_receipt(self, receipt_id: str) -> Optional[Receipt]:
        return self.receipt_repo.find_by_id(receipt_id)
