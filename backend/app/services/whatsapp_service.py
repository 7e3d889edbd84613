"""
WhatsApp Service - contact-to-purchase links

Builds https://wa.me/<phone>?text=<message> links for general contact,
single products, the current cart and issued receipts.

Author: TM3
Date: 2025-10-17
"""
import logging
from decimal import Decimal
from typing import Optional
from urllib.parse import quote

from app.domain.cart import Cart
from app.domain.product import Product
from app.domain.receipt import Receipt
from app.domain.settings import WhatsAppSettings, StoreSettings
from app.repositories.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me/"


def format_money(amount) -> str:
    return f"${Decimal(str(amount)):.2f}"


def build_whatsapp_url(phone_number: str, message: str) -> str:
    """wa.me wants digits only; the message is URL encoded"""
    digits = "".join(ch for ch in phone_number if ch.isdigit())
    return f"{WHATSAPP_BASE_URL}{digits}?text={quote(message, safe='')}"


def render_product_message(template: str, product: Product) -> str:
    """Fill {productName} and {productPrice} (2 decimals) into the template"""
    return (
        template
        .replace("{productName}", product.name)
        .replace("{productPrice}", f"{product.price:.2f}")
    )


def format_cart_message(cart: Cart) -> str:
    lines = ["Hello! I would like to order:", ""]
    for item in cart.items:
        lines.append(f"• {item.quantity} x {item.name} ({format_money(item.line_total)})")
    lines.append("")
    lines.append(f"Total: {format_money(cart.total)}")
    return "\n".join(lines)


def format_receipt_message(receipt: Receipt, store: StoreSettings, tax_rate: float) -> str:
    """Receipt text sent to the customer"""
    message = "🧾 *RECIBO DE COMPRA*\n\n"
    message += f"🏪 *{store.store_name}*\n"
    if store.address:
        message += f"📍 {store.address}\n"
    if store.phone:
        message += f"📞 {store.phone}\n"
    if store.email:
        message += f"📧 {store.email}\n"

    message += f"\n📄 *Recibo #:* {receipt.receipt_number}\n"
    message += f"👤 *Cliente:* {receipt.customer_name}\n"
    if receipt.created_at:
        message += f"📅 *Fecha:* {receipt.created_at.strftime('%d/%m/%Y')}\n"
    message += "\n📦 *PRODUCTOS:*\n"

    for item in receipt.items:
        message += f"• {item.product_name}\n"
        message += (
            f"  Cant: {item.quantity} x {format_money(item.unit_price)}"
            f" = {format_money(item.total_price)}\n"
        )

    tax_percent = f"{tax_rate * 100:g}"
    message += "\n💰 *RESUMEN:*\n"
    message += f"Subtotal: {format_money(receipt.subtotal)}\n"
    message += f"Impuesto ({tax_percent}%): {format_money(receipt.tax_amount)}\n"
    message += f"*TOTAL: {format_money(receipt.total_amount)}*\n\n"

    if receipt.notes:
        message += f"📝 *Notas:* {receipt.notes}\n\n"

    message += "¡Gracias por su compra! 🛍️"
    return message


class WhatsAppService:
    """WhatsApp settings and link generation"""

    def __init__(self, settings_repo: SettingsRepository = None):
        self.settings_repo = settings_repo or SettingsRepository()

    def get_settings(self) -> WhatsAppSettings:
        """Stored settings, or the defaults when missing or unreadable"""
        try:
            stored = self.settings_repo.get_whatsapp_settings()
        except Exception as e:
            logger.error(f"Error loading WhatsApp settings, using defaults: {e}")
            return WhatsAppSettings()

        return stored or WhatsAppSettings()

    def save_settings(self, data: WhatsAppSettings) -> WhatsAppSettings:
        saved = self.settings_repo.save_whatsapp_settings(data)
        logger.info("WhatsApp settings saved")
        return saved

    def contact_link(self, message: Optional[str] = None) -> str:
        wa = self.get_settings()
        return build_whatsapp_url(wa.phone_number, message or wa.default_message)

    def product_link(self, product: Product) -> str:
        wa = self.get_settings()
        return build_whatsapp_url(wa.phone_number, render_product_message(wa.product_message, product))

    def cart_link(self, cart: Cart) -> str:
        wa = self.get_settings()
        if cart.is_empty:
            return build_whatsapp_url(wa.phone_number, wa.default_message)
        return build_whatsapp_url(wa.phone_number, format_cart_message(cart))
