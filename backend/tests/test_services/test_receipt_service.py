"""
Tests for receipt totals, numbering and issuing

Author: TM3
Date: 2025-10-17
"""
from unittest.mock import MagicMock, patch
from datetime import date
from decimal import Decimal
from urllib.parse import unquote

from app.domain.receipt import ReceiptCreate, ReceiptLineInput
from app.domain.settings import StoreSettings
from app.services.receipt_service import (
    ReceiptService,
    calculate_totals,
    format_receipt_number,
    to_money,
)


class TestReceiptMath:

    def test_totals_with_15_percent_tax(self):
        lines = [
            ReceiptLineInput(product_name='Blusa', quantity=2, unit_price=Decimal('10.00')),
            ReceiptLineInput(product_name='Falda', quantity=1, unit_price=Decimal('15.50')),
        ]

        items, subtotal, tax, total = calculate_totals(lines, 0.15)

        assert [item.total_price for item in items] == [Decimal('20.00'), Decimal('15.50')]
        assert subtotal == Decimal('35.50')
        assert tax == Decimal('5.33')  # 5.325 rounds half up
        assert total == Decimal('40.83')

    def test_money_rounds_half_up(self):
        assert to_money('0.125') == Decimal('0.13')
        assert to_money(2) == Decimal('2.00')

    def test_receipt_number_format(self):
        assert format_receipt_number(date(2025, 10, 17), 1) == 'REC-20251017-0001'
        assert format_receipt_number(date(2025, 1, 2), 123) == 'REC-20250102-0123'


class TestReceiptService:

    def _service(self):
        receipt_repo = MagicMock()
        settings_repo = MagicMock()
        receipt_repo.create.side_effect = lambda receipt: receipt.model_copy(update={'id': 'r-1'})
        return ReceiptService(receipt_repo=receipt_repo, settings_repo=settings_repo), receipt_repo, settings_repo

    def test_next_number_counts_todays_receipts(self):
        service, receipt_repo, _ = self._service()
        receipt_repo.count_for_day.return_value = 4

        assert service.next_receipt_number(date(2025, 10, 17)) == 'REC-20251017-0005'

    @patch('app.services.receipt_service.settings')
    def test_issue_with_phone_returns_whatsapp_link(self, mock_settings):
        # Arrange
        mock_settings.RECEIPT_TAX_RATE = 0.15
        mock_settings.STORE_NAME = 'BoutiqueMG Whatsapp Shop'
        service, receipt_repo, settings_repo = self._service()
        receipt_repo.count_for_day.return_value = 0
        settings_repo.get_store_settings.return_value = StoreSettings(
            store_name='Boutique MG', address='San Salvador'
        )
        data = ReceiptCreate(
            customer_name='Ana',
            customer_phone='+503 7777 8888',
            items=[ReceiptLineInput(product_name='Blusa', quantity=2, unit_price=Decimal('10.00'))]
        )

        # Act
        result = service.issue(data)

        # Assert
        receipt = result['receipt']
        assert receipt.id == 'r-1'
        assert receipt.receipt_number.startswith('REC-')
        assert receipt.total_amount == Decimal('23.00')
        assert result['whatsapp_url'].startswith('https://wa.me/50377778888?text=')

        text = unquote(result['whatsapp_url'].split('?text=')[1])
        assert 'Boutique MG' in text
        assert 'Impuesto (15%): $3.00' in text
        assert '*TOTAL: $23.00*' in text

    def test_issue_without_phone_has_no_link(self):
        service, receipt_repo, settings_repo = self._service()
        receipt_repo.count_for_day.return_value = 0

        result = service.issue(ReceiptCreate(
            customer_name='Ana',
            items=[ReceiptLineInput(product_name='Blusa', quantity=1, unit_price=Decimal('10.00'))]
        ))

        assert result['whatsapp_url'] is None
        settings_repo.get_store_settings.assert_not_called()

    def test_store_settings_fallback(self):
        service, _, settings_repo = self._service()
        settings_repo.get_store_settings.side_effect = Exception("missing table")

        store = service.get_store_settings()

        assert store.store_name
