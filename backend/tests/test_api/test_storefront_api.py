"""
Storefront API tests: catalog, cart, WhatsApp links, checkout, webhook

Author: TM3
Date: 2025-10-17
"""
import uuid
from decimal import Decimal
from unittest.mock import MagicMock

from app.api import deps
from app.connectors.pagadito_connector import InvalidSignatureError, PagaditoConnector
from app.domain.category import Category
from app.services.cart_service import EmptyCartError, OutOfStockError, ProductNotFoundError
from app.services.checkout_service import CheckoutService


CHECKOUT_BODY = {
    'name': 'Ana López',
    'email': 'ana@example.com',
    'phone': '50377778888',
    'address': 'Colonia Escalón, San Salvador',
}


class TestRoot:

    def test_root(self, client):
        response = client.get('/')

        assert response.status_code == 200
        assert response.json()['status'] == 'online'


class TestCatalog:

    def test_list_products(self, client, product_repo, sample_product):
        product_repo.find_all.return_value = ([sample_product], 1)

        response = client.get('/api/v1/products/?search=vestido&limit=10')

        assert response.status_code == 200
        body = response.json()
        assert body['total'] == 1
        assert body['data'][0]['name'] == 'Vestido Floral'
        assert body['data'][0]['is_on_sale'] is True
        assert product_repo.find_all.call_args.kwargs['search'] == 'vestido'

    def test_featured_products(self, client, product_repo, sample_product):
        product_repo.find_featured.return_value = [sample_product]

        response = client.get('/api/v1/products/featured')

        assert response.status_code == 200
        assert response.json()['count'] == 1

    def test_product_not_found(self, client, product_repo):
        product_repo.find_by_id.return_value = None

        response = client.get('/api/v1/products/missing')

        assert response.status_code == 404

    def test_product_db_error_is_500(self, client, product_repo):
        product_repo.find_by_id.side_effect = Exception("connection refused")

        response = client.get('/api/v1/products/p-1')

        assert response.status_code == 500
        assert 'connection refused' in response.json()['detail']

    def test_category_products(self, client, category_repo, product_repo, sample_product):
        category_repo.find_by_id.return_value = Category(id='c-1', name='Vestidos')
        product_repo.find_by_category.return_value = [sample_product]

        response = client.get('/api/v1/categories/c-1/products')

        assert response.status_code == 200
        assert response.json()['category']['name'] == 'Vestidos'
        product_repo.find_by_category.assert_called_once_with('c-1')


class TestCart:

    def test_missing_session_is_minted_and_returned(self, client, cart_service, make_cart):
        cart_service.resolve_cart.return_value = make_cart()

        response = client.get('/api/v1/cart/')

        assert response.status_code == 200
        session_id = response.headers['X-Cart-Session']
        uuid.UUID(session_id)
        assert response.json()['session_id'] == session_id
        cart_service.resolve_cart.assert_called_once_with(None, session_id)

    def test_token_selects_user_cart(self, client, cart_service, make_cart, user_headers):
        cart_service.resolve_cart.return_value = make_cart(user_id='user-123')

        response = client.get('/api/v1/cart/', headers={**user_headers, 'X-Cart-Session': 's-1'})

        assert response.status_code == 200
        cart_service.resolve_cart.assert_called_once_with('user-123', 's-1')

    def test_invalid_token_falls_back_to_session(self, client, cart_service, make_cart):
        cart_service.resolve_cart.return_value = make_cart()

        response = client.get('/api/v1/cart/', headers={
            'Authorization': 'Bearer not-a-jwt', 'X-Cart-Session': 's-1'
        })

        assert response.status_code == 200
        cart_service.resolve_cart.assert_called_once_with(None, 's-1')

    def test_add_item(self, client, cart_service, make_cart):
        cart = make_cart([('p-1', 1, '20.00', 3)])
        cart_service.resolve_cart.return_value = cart
        cart_service.add_item.return_value = cart

        response = client.post('/api/v1/cart/items', json={'product_id': 'p-1'},
                               headers={'X-Cart-Session': 's-1'})

        assert response.status_code == 200
        assert response.json()['data']['item_count'] == 1
        assert response.json()['data']['total'] == 20.0

    def test_add_item_out_of_stock_is_409(self, client, cart_service, make_cart):
        cart_service.resolve_cart.return_value = make_cart()
        cart_service.add_item.side_effect = OutOfStockError('No more stock available for this product')

        response = client.post('/api/v1/cart/items', json={'product_id': 'p-1'})

        assert response.status_code == 409
        assert response.json()['detail'] == 'No more stock available for this product'

    def test_add_unknown_product_is_404(self, client, cart_service, make_cart):
        cart_service.resolve_cart.return_value = make_cart()
        cart_service.add_item.side_effect = ProductNotFoundError('Product ghost not found')

        response = client.post('/api/v1/cart/items', json={'product_id': 'ghost'})

        assert response.status_code == 404

    def test_update_quantity(self, client, cart_service, make_cart):
        cart = make_cart()
        cart_service.resolve_cart.return_value = cart
        cart_service.update_quantity.return_value = cart

        response = client.patch('/api/v1/cart/items/p-1', json={'quantity': 0})

        assert response.status_code == 200
        cart_service.update_quantity.assert_called_once_with(cart, 'p-1', 0)

    def test_replace_cart_snapshot(self, client, cart_service, make_cart):
        cart = make_cart()
        cart_service.resolve_cart.return_value = cart
        cart_service.replace_items.return_value = cart

        response = client.put('/api/v1/cart/', json={'items': [{'product_id': 'p-1', 'quantity': 2}]})

        assert response.status_code == 200
        lines = cart_service.replace_items.call_args[0][1]
        assert lines[0].quantity == 2

    def test_replace_cart_rejects_negative_quantity(self, client, cart_service):
        response = client.put('/api/v1/cart/', json={'items': [{'product_id': 'p-1', 'quantity': -1}]})

        assert response.status_code == 422
        cart_service.replace_items.assert_not_called()


class TestWhatsApp:

    def test_contact_link(self, client, whatsapp_service):
        whatsapp_service.contact_link.return_value = 'https://wa.me/1234567890?text=Hello'

        response = client.get('/api/v1/whatsapp/contact')

        assert response.json()['url'] == 'https://wa.me/1234567890?text=Hello'
        whatsapp_service.contact_link.assert_called_once_with(None)

    def test_product_link_unknown_product(self, client, whatsapp_service, product_repo):
        product_repo.find_by_id.return_value = None

        response = client.get('/api/v1/whatsapp/product/missing')

        assert response.status_code == 404
        whatsapp_service.product_link.assert_not_called()


class TestCheckout:

    def test_checkout_success(self, client, cart_service, checkout_service, make_cart):
        cart = make_cart([('p-1', 1, '20.00', 3)])
        cart_service.resolve_cart.return_value = cart
        checkout_service.checkout.return_value = {
            'success': True, 'order': {'id': 'order-1'}, 'payment_id': 'pgto-abc12345',
            'payment_url': 'https://sandbox.pagadito.com/comercios/?token=pgto-abc12345', 'error': None
        }

        response = client.post('/api/v1/checkout/', json=CHECKOUT_BODY, headers={'X-Cart-Session': 's-1'})

        assert response.status_code == 200
        assert response.json()['status'] == 'success'
        request = checkout_service.checkout.call_args[0][1]
        assert request.email == 'ana@example.com'

    def test_checkout_empty_cart_is_400(self, client, cart_service, checkout_service, make_cart):
        cart_service.resolve_cart.return_value = make_cart()
        checkout_service.checkout.side_effect = EmptyCartError('Your cart is empty')

        response = client.post('/api/v1/checkout/', json=CHECKOUT_BODY)

        assert response.status_code == 400

    def test_checkout_validation(self, client, cart_service, checkout_service):
        response = client.post('/api/v1/checkout/', json={**CHECKOUT_BODY, 'email': 'nope'})

        assert response.status_code == 422
        checkout_service.checkout.assert_not_called()

    def test_admin_token_checkout_uses_resolved_cart(self, client, cart_service, checkout_service,
                                                     make_cart, admin_headers):
        cart = make_cart([('p-1', 1, '20.00', 3)])
        cart_service.resolve_cart.return_value = cart
        checkout_service.checkout.return_value = {
            'success': False, 'order': {'id': 'order-1'}, 'payment_id': 'pgto-abc12345',
            'payment_url': 'https://sandbox.pagadito.com/comercios/?token=pgto-abc12345',
            'error': 'Payment failed or was cancelled'
        }

        response = client.post('/api/v1/checkout/', json=CHECKOUT_BODY,
                               headers={**admin_headers, 'X-Cart-Session': 's-1'})

        assert response.status_code == 200
        assert response.json()['status'] == 'failed'
        cart_service.resolve_cart.assert_called_once_with('admin', 's-1')
        args = checkout_service.checkout.call_args[0]
        assert len(args) == 2
        assert args[0] is cart


class TestPagaditoWebhook:

    def test_valid_webhook(self, client, checkout_service):
        checkout_service.handle_webhook.return_value = {
            'success': True, 'event_type': 'payment.success', 'order_id': 'order-1'
        }

        response = client.post(
            '/api/v1/webhooks/pagadito',
            content=b'{"event_type": "payment.success", "transaction_id": "pgto-1"}',
            headers={'X-Pagadito-Signature': 'abc'}
        )

        assert response.status_code == 200
        signature, body = checkout_service.handle_webhook.call_args[0]
        assert signature == 'abc'
        assert body == b'{"event_type": "payment.success", "transaction_id": "pgto-1"}'

    def test_bad_signature_is_401(self, client, checkout_service):
        checkout_service.handle_webhook.side_effect = InvalidSignatureError('Invalid signature')

        response = client.post('/api/v1/webhooks/pagadito', content=b'{}')

        assert response.status_code == 401

    def test_non_object_payload_is_400(self, client):
        # Arrange: real service so the payload is parsed
        from app.main import app
        pagadito_service = MagicMock()
        pagadito_service.get_webhook_key.return_value = 'whsec-test-key'
        order_repo = MagicMock()
        service = CheckoutService(
            order_repo=order_repo,
            product_repo=MagicMock(),
            cart_service=MagicMock(),
            pagadito_service=pagadito_service
        )
        app.dependency_overrides[deps.get_checkout_service] = lambda: service
        body = b'[]'

        # Act
        response = client.post(
            '/api/v1/webhooks/pagadito',
            content=body,
            headers={'X-Pagadito-Signature': PagaditoConnector.sign_payload('whsec-test-key', body)}
        )

        # Assert
        assert response.status_code == 400
        order_repo.find_by_transaction_id.assert_not_called()
