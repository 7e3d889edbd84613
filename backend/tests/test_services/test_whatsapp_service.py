"""
Tests for WhatsApp link generation

Author: TM3
Date: 2025-10-17
"""
from unittest.mock import MagicMock
from urllib.parse import unquote

from app.domain.settings import WhatsAppSettings, DEFAULT_WHATSAPP_MESSAGE
from app.services.whatsapp_service import (
    WhatsAppService,
    build_whatsapp_url,
    format_cart_message,
    render_product_message,
)


class TestLinkBuilding:

    def test_url_uses_digits_only_and_encodes_message(self):
        url = build_whatsapp_url('+503 7777-8888', 'Hola! ¿Tienen talla M?')

        assert url.startswith('https://wa.me/50377778888?text=')
        assert ' ' not in url
        assert unquote(url.split('?text=')[1]) == 'Hola! ¿Tienen talla M?'

    def test_ampersand_and_newlines_are_encoded(self):
        url = build_whatsapp_url('1234567890', 'A & B\nC')

        assert '%26' in url
        assert '%0A' in url

    def test_product_template_rendering(self, sample_product):
        message = render_product_message(
            'Hello! I am interested in {productName} priced at ${productPrice}.',
            sample_product
        )

        assert message == 'Hello! I am interested in Vestido Floral priced at $45.00.'

    def test_cart_message_lists_lines_and_total(self, make_cart):
        cart = make_cart([('p-1', 2, '10.00', 5), ('p-2', 1, '5.50', 5)])

        message = format_cart_message(cart)

        assert '2 x Producto p-1 ($20.00)' in message
        assert '1 x Producto p-2 ($5.50)' in message
        assert message.endswith('Total: $25.50')


class TestWhatsAppService:

    def test_defaults_when_not_configured(self):
        repo = MagicMock()
        repo.get_whatsapp_settings.return_value = None

        settings = WhatsAppService(settings_repo=repo).get_settings()

        assert settings.phone_number == '1234567890'
        assert settings.default_message == DEFAULT_WHATSAPP_MESSAGE

    def test_defaults_when_read_fails(self):
        repo = MagicMock()
        repo.get_whatsapp_settings.side_effect = Exception("timeout")

        settings = WhatsAppService(settings_repo=repo).get_settings()

        assert settings == WhatsAppSettings()

    def test_contact_link_uses_stored_settings(self):
        repo = MagicMock()
        repo.get_whatsapp_settings.return_value = WhatsAppSettings(
            phone_number='+50312345678',
            default_message='Buenas! Quisiera información.'
        )

        url = WhatsAppService(settings_repo=repo).contact_link()

        assert url.startswith('https://wa.me/50312345678?text=')
        assert unquote(url.split('?text=')[1]) == 'Buenas! Quisiera información.'

    def test_empty_cart_link_falls_back_to_default_message(self, make_cart):
        repo = MagicMock()
        repo.get_whatsapp_settings.return_value = None

        url = WhatsAppService(settings_repo=repo).cart_link(make_cart())

        assert unquote(url.split('?text=')[1]) == DEFAULT_WHATSAPP_MESSAGE
