"""
Unit tests for OrderRepository

Author: TM3
Date: 2025-10-17
"""
import pytest
from unittest.mock import patch, MagicMock
from decimal import Decimal

from app.repositories.order_repository import OrderRepository


ORDER_ROW = {
    'id': 'order-1',
    'user_id': None,
    'customer_name': 'Ana López',
    'customer_email': 'ana@example.com',
    'customer_phone': '50377778888',
    'shipping_address': 'Colonia Escalón, San Salvador',
    'total_amount': Decimal('90.00'),
    'payment_method': 'pagadito',
    'payment_status': 'pending',
    'status': 'pending',
    'transaction_id': None,
    'created_at': None,
    'updated_at': None
}


def _mock_connection(mock_get_conn):
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


class TestOrderRepository:

    @patch('app.repositories.order_repository.get_db_connection_dict_with_retry')
    def test_create_with_items_inserts_order_and_lines(self, mock_get_conn):
        """Order and items are written in one transaction"""
        # Arrange
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.side_effect = [
            ORDER_ROW,
            {'id': 'oi-1', 'order_id': 'order-1', 'product_id': 'p-1', 'quantity': 2,
             'price': Decimal('45.00'), 'created_at': None},
        ]

        # Act
        order = OrderRepository().create_with_items(
            order_id='order-1',
            customer_name='Ana López',
            customer_email='ana@example.com',
            customer_phone='50377778888',
            shipping_address='Colonia Escalón, San Salvador',
            total_amount=Decimal('90.00'),
            items=[{'product_id': 'p-1', 'product_name': 'Vestido', 'quantity': 2, 'price': Decimal('45.00')}],
            transaction_id='pgto-abc12345'
        )

        # Assert
        assert order.id == 'order-1'
        assert order.payment_method == 'pagadito'
        assert len(order.items) == 1
        assert order.items[0].product_name == 'Vestido'
        assert order.item_count == 2
        assert mock_cursor.execute.call_count == 2
        assert mock_cursor.execute.call_args_list[0][0][1][-1] == 'pgto-abc12345'
        mock_conn.commit.assert_called_once()

    @patch('app.repositories.order_repository.get_db_connection_dict_with_retry')
    def test_create_with_items_rolls_back_on_error(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = Exception("insert failed")

        # Act / Assert
        with pytest.raises(Exception):
            OrderRepository().create_with_items(
                order_id='order-1', customer_name='Ana', customer_email='ana@example.com',
                customer_phone=None, shipping_address=None, total_amount=Decimal('1.00'), items=[]
            )

        mock_conn.rollback.assert_called_once()
        mock_cursor.close.assert_called_once()

    @patch('app.repositories.order_repository.get_db_connection_dict_with_retry')
    def test_find_by_transaction_id_returns_order_with_items(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {**ORDER_ROW, 'transaction_id': 'pgto-abc12345'}
        mock_cursor.fetchall.return_value = [
            {'id': 'oi-1', 'order_id': 'order-1', 'product_id': 'p-1', 'quantity': 1,
             'price': Decimal('90.00'), 'created_at': None, 'product_name': 'Abrigo'}
        ]

        # Act
        order = OrderRepository().find_by_transaction_id('pgto-abc12345')

        # Assert
        assert order.transaction_id == 'pgto-abc12345'
        assert order.items[0].product_name == 'Abrigo'
        assert mock_cursor.execute.call_args_list[0][0][1] == ('pgto-abc12345',)

    @patch('app.repositories.order_repository.get_db_connection_dict_with_retry')
    def test_find_all_filters_and_batches_items(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.side_effect = [
            [ORDER_ROW],
            [{'id': 'oi-1', 'order_id': 'order-1', 'product_id': 'p-1', 'quantity': 2,
              'price': Decimal('45.00'), 'created_at': None, 'product_name': 'Vestido'}]
        ]

        # Act
        orders, total = OrderRepository().find_all(payment_status='paid', search='ana')

        # Assert
        assert total == 1
        assert orders[0].items[0].quantity == 2
        count_sql, count_params = mock_cursor.execute.call_args_list[0][0]
        assert "payment_status = %s" in count_sql
        assert count_params == ['paid', '%ana%', '%ana%', '%ana%']
        assert mock_cursor.execute.call_count == 3

    @patch('app.repositories.order_repository.get_db_connection_dict_with_retry')
    def test_update_payment_status_with_order_status(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {**ORDER_ROW, 'payment_status': 'paid', 'status': 'processing'}

        # Act
        order = OrderRepository().update_payment_status('pgto-1', 'paid', 'processing')

        # Assert
        assert order.is_paid
        assert mock_cursor.execute.call_args[0][1] == ('paid', 'processing', 'pgto-1')
        assert "payment_status <> 'paid'" in mock_cursor.execute.call_args[0][0]
        mock_conn.commit.assert_called_once()

    @patch('app.repositories.order_repository.get_db_connection_dict_with_retry')
    def test_update_payment_status_unknown_transaction(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act / Assert
        assert OrderRepository().update_payment_status('pgto-x', 'failed') is None
        assert mock_cursor.execute.call_args[0][1] == ('failed', 'pgto-x')
