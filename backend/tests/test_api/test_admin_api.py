"""
Admin API tests: login, guards and back office endpoints

Author: TM3
Date: 2025-10-17
"""
import pytest
from unittest.mock import patch
from decimal import Decimal

from app.core.auth import hash_password
from app.core.config import settings
from app.domain.order import Order
from app.domain.product import Product
from app.domain.receipt import Receipt
from app.domain.settings import PagaditoSettings, PaymentSettings, WhatsAppSettings


class TestAdminLogin:

    @pytest.fixture(autouse=True)
    def admin_credentials(self, monkeypatch):
        monkeypatch.setattr(settings, 'ADMIN_USERNAME', 'admin')
        monkeypatch.setattr(settings, 'ADMIN_PASSWORD_HASH', hash_password('s3cret-pass'))

    def test_login_returns_admin_token(self, client, product_repo):
        response = client.post('/api/v1/admin/login', json={'username': 'admin', 'password': 's3cret-pass'})

        assert response.status_code == 200
        token = response.json()['access_token']
        assert response.json()['token_type'] == 'bearer'

        # The token opens admin routes
        product_repo.find_all.return_value = ([], 0)
        guarded = client.get('/api/v1/admin/products', headers={'Authorization': f'Bearer {token}'})
        assert guarded.status_code == 200

    def test_wrong_password(self, client):
        response = client.post('/api/v1/admin/login', json={'username': 'admin', 'password': 'nope'})

        assert response.status_code == 401

    def test_no_hash_configured_rejects_login(self, client, monkeypatch):
        monkeypatch.setattr(settings, 'ADMIN_PASSWORD_HASH', '')

        response = client.post('/api/v1/admin/login', json={'username': 'admin', 'password': 's3cret-pass'})

        assert response.status_code == 401


class TestAdminGuard:

    def test_requires_token(self, client):
        assert client.get('/api/v1/admin/orders').status_code == 401

    def test_rejects_shopper_token(self, client, user_headers):
        assert client.get('/api/v1/admin/orders', headers=user_headers).status_code == 403


class TestAdminProducts:

    def test_create_product(self, client, admin_headers, product_repo):
        product_repo.create.return_value = Product(id='p-1', name='Bolso', price=Decimal('30.00'), stock_quantity=4)

        response = client.post('/api/v1/admin/products', headers=admin_headers, json={
            'name': 'Bolso', 'description': 'Bolso de cuero', 'price': 30, 'stock_quantity': 4
        })

        assert response.status_code == 201
        assert response.json()['data']['id'] == 'p-1'

    def test_create_product_validation(self, client, admin_headers, product_repo):
        response = client.post('/api/v1/admin/products', headers=admin_headers, json={
            'name': 'Bolso', 'description': 'Bolso de cuero', 'price': -1
        })

        assert response.status_code == 422
        product_repo.create.assert_not_called()

    def test_update_missing_product(self, client, admin_headers, product_repo):
        product_repo.update.return_value = None

        response = client.put('/api/v1/admin/products/p-9', headers=admin_headers, json={'price': 10})

        assert response.status_code == 404

    def test_delete_product(self, client, admin_headers, product_repo):
        product_repo.delete.return_value = True

        response = client.delete('/api/v1/admin/products/p-1', headers=admin_headers)

        assert response.status_code == 200
        product_repo.delete.assert_called_once_with('p-1')

    @patch('app.api.admin.upload_product_image')
    def test_upload_image(self, mock_upload, client, admin_headers):
        mock_upload.return_value = 'https://cdn.example.com/products/x.png'

        response = client.post(
            '/api/v1/admin/products/images',
            headers=admin_headers,
            files={'file': ('x.png', b'\x89PNGdata', 'image/png')}
        )

        assert response.status_code == 200
        assert response.json()['url'] == 'https://cdn.example.com/products/x.png'
        mock_upload.assert_called_once_with('x.png', 'image/png', b'\x89PNGdata')

    @patch('app.api.admin.upload_product_image')
    def test_upload_rejected_type_is_400(self, mock_upload, client, admin_headers):
        mock_upload.side_effect = ValueError('Unsupported image type: text/plain')

        response = client.post(
            '/api/v1/admin/products/images',
            headers=admin_headers,
            files={'file': ('x.txt', b'hello', 'text/plain')}
        )

        assert response.status_code == 400


class TestAdminCartsAndOrders:

    def test_list_carts(self, client, admin_headers, cart_service):
        cart_service.list_active_carts.return_value = {
            'carts': [], 'summary': {'total_carts': 0, 'total_items': 0, 'total_value': 0.0}
        }

        response = client.get('/api/v1/admin/carts?search=anon', headers=admin_headers)

        assert response.status_code == 200
        cart_service.list_active_carts.assert_called_once_with('anon')

    def test_delete_missing_cart_item(self, client, admin_headers, cart_service):
        cart_service.remove_cart_line.return_value = False

        response = client.delete('/api/v1/admin/carts/items/i-1', headers=admin_headers)

        assert response.status_code == 404

    def test_clear_cart(self, client, admin_headers, cart_service):
        cart_service.clear_cart_by_id.return_value = 3

        response = client.delete('/api/v1/admin/carts/cart-1', headers=admin_headers)

        assert response.json()['removed_items'] == 3

    def test_list_orders_with_filters(self, client, admin_headers, order_repo):
        order_repo.find_all.return_value = ([
            Order(id='o-1', customer_name='Ana', customer_email='ana@example.com',
                  total_amount=Decimal('10.00'), payment_status='paid')
        ], 1)

        response = client.get('/api/v1/admin/orders?payment_status=paid&status=processing', headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['data'][0]['total_amount'] == 10.0
        kwargs = order_repo.find_all.call_args.kwargs
        assert kwargs['payment_status'] == 'paid'
        assert kwargs['status'] == 'processing'


class TestAdminSettings:

    def test_update_whatsapp_validation(self, client, admin_headers, whatsapp_service):
        response = client.put('/api/v1/admin/whatsapp', headers=admin_headers, json={
            'phone_number': '123', 'default_message': 'Hello there friend', 'product_message': 'About {productName}!'
        })

        assert response.status_code == 422
        whatsapp_service.save_settings.assert_not_called()

    def test_update_whatsapp(self, client, admin_headers, whatsapp_service):
        saved = WhatsAppSettings(phone_number='+50377778888')
        whatsapp_service.save_settings.return_value = saved

        response = client.put('/api/v1/admin/whatsapp', headers=admin_headers, json=saved.model_dump())

        assert response.status_code == 200
        assert response.json()['data']['phone_number'] == '+50377778888'

    def test_pagadito_settings_hide_wsk(self, client, admin_headers, pagadito_service):
        pagadito_service.get_settings.return_value = PaymentSettings(
            settings=PagaditoSettings(uid='merchant', wsk='very-secret'), webhook_key='k'
        )

        response = client.get('/api/v1/admin/pagadito', headers=admin_headers)

        assert response.json()['data']['settings']['wsk'] == 'very...'

    def test_regenerate_webhook_key(self, client, admin_headers, pagadito_service):
        pagadito_service.rotate_webhook_key.return_value = 'a' * 64

        response = client.post('/api/v1/admin/pagadito/webhook-key', headers=admin_headers)

        assert response.json()['webhook_key'] == 'a' * 64

    def test_connection_missing_credentials_is_400(self, client, admin_headers):
        response = client.post('/api/v1/admin/pagadito/test-connection', headers=admin_headers,
                               json={'uid': 'merchant'})

        assert response.status_code == 400

    def test_connection_success(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, 'PAGADITO_SUCCESS_RATE', 1.0)

        response = client.post('/api/v1/admin/pagadito/test-connection', headers=admin_headers,
                               json={'uid': 'merchant', 'wsk': 'key', 'sandbox': True})

        assert response.status_code == 200
        assert response.json()['data'] == {'merchant_name': 'Test Shop', 'environment': 'sandbox'}

    def test_connection_failure_is_401(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, 'PAGADITO_SUCCESS_RATE', 0.0)

        response = client.post('/api/v1/admin/pagadito/test-connection', headers=admin_headers,
                               json={'uid': 'merchant', 'wsk': 'key'})

        assert response.status_code == 401


class TestAdminReceipts:

    def test_create_receipt(self, client, admin_headers, receipt_service):
        receipt_service.issue.return_value = {
            'receipt': Receipt(
                id='r-1', receipt_number='REC-20251017-0001', customer_name='Ana',
                subtotal=Decimal('20.00'), tax_amount=Decimal('3.00'), total_amount=Decimal('23.00')
            ),
            'whatsapp_url': 'https://wa.me/50377778888?text=x'
        }

        response = client.post('/api/v1/admin/receipts', headers=admin_headers, json={
            'customer_name': 'Ana', 'customer_phone': '50377778888',
            'items': [{'product_name': 'Blusa', 'quantity': 2, 'unit_price': 10}]
        })

        assert response.status_code == 201
        assert response.json()['data']['total_amount'] == 23.0
        assert response.json()['whatsapp_url'].startswith('https://wa.me/')

    def test_create_receipt_without_items(self, client, admin_headers, receipt_service):
        response = client.post('/api/v1/admin/receipts', headers=admin_headers, json={
            'customer_name': 'Ana', 'items': []
        })

        assert response.status_code == 422
        receipt_service.issue.assert_not_called()

    def test_create_receipt_sub_cent_price_is_422(self, client, admin_headers, receipt_service):
        response = client.post('/api/v1/admin/receipts', headers=admin_headers, json={
            'customer_name': 'Ana',
            'items': [{'product_name': 'Botón', 'quantity': 1, 'unit_price': '0.004'}]
        })

        assert response.status_code == 422
        receipt_service.issue.assert_not_called()

    def test_receipt_not_found(self, client, admin_headers, receipt_service):
        receipt_service.get_receipt.return_value = None

        response = client.get('/api/v1/admin/receipts/r-9', headers=admin_headers)

        assert response.status_code == 404
