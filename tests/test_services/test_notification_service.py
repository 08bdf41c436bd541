"""
Unit tests for NotificationService

Outbound HTTP goes through httpx.MockTransport; integration settings
come from a mocked repository.
"""
import asyncio
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from app.domain.cart import Cart
from app.services.notification_service import NotificationService, pick_greeting


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served"""

    def __init__(self, responder):
        self.requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return responder(request)

        super().__init__(handler)


def chatwoot_responder(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith('/contacts/search'):
        return httpx.Response(200, json={'payload': []})
    if path.endswith('/contacts') and request.method == 'POST':
        return httpx.Response(200, json={'payload': {'contact': {'id': 5}}})
    if path.endswith('/contacts/5/conversations'):
        return httpx.Response(200, json={'payload': [{'id': 9, 'status': 'resolved'}]})
    if path.endswith('/conversations') and request.method == 'POST':
        return httpx.Response(200, json={'id': 11})
    return httpx.Response(200, json={})


def _service(settings, webhook_status=200):
    webhook = RecordingTransport(lambda request: httpx.Response(webhook_status))
    chatwoot = RecordingTransport(chatwoot_responder)
    service = NotificationService(webhook_transport=webhook, chatwoot_transport=chatwoot)
    service.integration_repo = MagicMock()
    service.integration_repo.get.return_value = settings
    service.category_repo = MagicMock()
    service.category_repo.find_types_by_ids.return_value = {10: 'supplement', 20: 'clothing'}
    return service, webhook, chatwoot


class TestOrderCreated:

    def test_posts_payload_with_headers(self, sample_order, integration_settings):
        service, webhook, _ = _service(integration_settings)

        assert asyncio.run(service.trigger_order_created(sample_order)) is True

        request = webhook.requests[0]
        body = json.loads(request.content)
        assert str(request.url) == "https://hooks.test/orders"
        assert request.headers['X-Source'] == "Ecommerce-Darkstore"
        assert request.headers['Authorization'] == "Bearer hook-token"
        assert body['event'] == "order_created"
        assert body['customer_id'] == "guest"
        assert body['customer_name'] == "Maria Souza"
        assert body['total'] == 369.7
        assert body['items'][0] == {'name': 'Whey Protein', 'quantity': 2, 'price': 149.9}

    def test_guest_name_placeholder(self, sample_order, integration_settings):
        service, webhook, _ = _service(integration_settings)
        order = sample_order.model_copy(update={'user_name': None})

        asyncio.run(service.trigger_order_created(order))

        assert json.loads(webhook.requests[0].content)['customer_name'] == "Cliente Convidado"

    def test_disabled_event_is_not_sent(self, sample_order, integration_settings):
        settings = integration_settings.model_copy(update={'status_order_created': False})
        service, webhook, _ = _service(settings)

        assert asyncio.run(service.trigger_order_created(sample_order)) is False
        assert webhook.requests == []

    def test_no_token_no_authorization_header(self, sample_order, integration_settings):
        settings = integration_settings.model_copy(update={'auth_token': None})
        service, webhook, _ = _service(settings)

        asyncio.run(service.trigger_order_created(sample_order))

        assert 'Authorization' not in webhook.requests[0].headers

    def test_webhook_error_status_returns_false(self, sample_order, integration_settings):
        service, _, _ = _service(integration_settings, webhook_status=500)
        assert asyncio.run(service.trigger_order_created(sample_order)) is False


class TestAbandonedCart:

    def test_payload_and_source(self, integration_settings):
        service, webhook, _ = _service(integration_settings)
        cart = Cart(id=3, session_id="abc", items=[{'name': 'Whey', 'quantity': 1}],
                    total=Decimal('149.90'), user_email="a@b.com")

        assert asyncio.run(service.trigger_abandoned_cart(cart)) is True

        request = webhook.requests[0]
        body = json.loads(request.content)
        assert str(request.url) == "https://hooks.test/carts"
        assert request.headers['X-Source'] == "Ecommerce-Darkstore-Cron"
        assert body['event'] == "abandoned_cart"
        assert body['cart_id'] == 3
        assert body['user_email'] == "a@b.com"


class TestStatusUpdate:

    @patch('app.services.notification_service.asyncio.sleep', new_callable=AsyncMock)
    def test_webhook_and_chatwoot(self, mock_sleep, sample_order, integration_settings):
        service, webhook, chatwoot = _service(integration_settings)

        outcome = asyncio.run(service.trigger_order_status_update(sample_order, "packing"))

        assert outcome['webhook'] is True
        assert outcome['chatwoot'] is True
        assert "seus suplementos e o tamanho das suas roupas" in outcome['message']

        body = json.loads(webhook.requests[0].content)
        assert body['event'] == "order_status_updated"
        assert body['status'] == "packing"
        assert body['whatsapp_message'] == outcome['message']

        paths = [(r.method, r.url.path) for r in chatwoot.requests]
        assert ('POST', '/api/v1/accounts/1/contacts') in paths
        assert ('POST', '/api/v1/accounts/1/conversations') in paths
        messages = [json.loads(r.content)['content'] for r in chatwoot.requests
                    if r.url.path.endswith('/conversations/11/messages')]
        assert len(messages) == 2
        assert messages[1] == outcome['message']
        mock_sleep.assert_awaited_once()

    def test_new_contact_gets_international_phone(self, sample_order, integration_settings):
        service, _, chatwoot = _service(integration_settings)

        with patch('app.services.notification_service.asyncio.sleep', new_callable=AsyncMock):
            asyncio.run(service.trigger_order_status_update(sample_order, "paid"))

        search = next(r for r in chatwoot.requests if r.url.path.endswith('/contacts/search'))
        assert search.url.params['q'] == "+5519998277880"

    def test_status_without_message_skips_chatwoot(self, sample_order, integration_settings):
        service, webhook, chatwoot = _service(integration_settings)

        outcome = asyncio.run(service.trigger_order_status_update(sample_order, "cancelled"))

        assert outcome['message'] is None
        assert outcome['chatwoot'] is False
        assert len(webhook.requests) == 1
        assert chatwoot.requests == []

    def test_missing_phone_returns_false(self, sample_order, integration_settings):
        service, _, chatwoot = _service(integration_settings)
        order = sample_order.model_copy(update={'user_phone': None})

        outcome = asyncio.run(service.trigger_order_status_update(order, "paid"))

        assert outcome['chatwoot'] is False
        assert chatwoot.requests == []

    def test_malformed_store_hours_still_posts_webhook(self, pickup_order, integration_settings):
        settings = integration_settings.model_copy(update={
            'store_hours': json.dumps({"monday": {"enabled": True, "slots": None}}),
            'chatwoot_url': None,
        })
        service, webhook, _ = _service(settings)

        outcome = asyncio.run(service.trigger_order_status_update(pickup_order, "sent"))

        assert outcome['webhook'] is True
        assert len(webhook.requests) == 1
        assert '"slots": null' in outcome['message']

    @patch('app.services.notification_service.build_whatsapp_message')
    def test_message_failure_does_not_block_webhook(self, mock_build, sample_order, integration_settings):
        mock_build.side_effect = RuntimeError("template error")
        service, webhook, chatwoot = _service(integration_settings)

        outcome = asyncio.run(service.trigger_order_status_update(sample_order, "paid"))

        assert outcome == {'webhook': True, 'chatwoot': False, 'message': None}
        assert json.loads(webhook.requests[0].content)['whatsapp_message'] is None
        assert chatwoot.requests == []

    def test_no_settings(self, sample_order):
        service, webhook, _ = _service(None)
        outcome = asyncio.run(service.trigger_order_status_update(sample_order, "paid"))
        assert outcome == {'webhook': False, 'chatwoot': False, 'message': None}
        assert webhook.requests == []


class TestDashboardTests:

    def test_test_webhook_success(self, integration_settings):
        service, webhook, _ = _service(integration_settings)

        result = asyncio.run(service.test_webhook())

        assert result == {'success': True, 'message': "Teste enviado com sucesso! Status: 200"}
        assert json.loads(webhook.requests[0].content)['event'] == "test_event"
        assert webhook.requests[0].headers['X-Source'] == "Ecommerce-Darkstore-Test"

    def test_test_webhook_without_url(self, integration_settings):
        settings = integration_settings.model_copy(update={'webhook_order_created': None})
        service, _, _ = _service(settings)
        assert asyncio.run(service.test_webhook())['success'] is False

    def test_send_test_webhook_cart_event(self, integration_settings):
        service, webhook, _ = _service(integration_settings)

        result = asyncio.run(service.send_test_webhook("https://n8n.test/hook", "abandoned_cart"))

        assert result['success'] is True
        assert json.loads(webhook.requests[0].content)['cart_id'] == "CART-TEST-888"

    def test_send_test_webhook_failure_status(self, integration_settings):
        service, _, _ = _service(integration_settings, webhook_status=404)
        result = asyncio.run(service.send_test_webhook("https://n8n.test/hook", "order_created"))
        assert result == {'success': False, 'message': "Erro no disparo: 404 Not Found"}


class TestGreeting:

    def test_uses_first_name(self):
        assert "Maria" in pick_greeting("Maria Souza")

    def test_generic_names_are_dropped(self):
        for name in (None, "", "Cliente", "M"):
            greeting = pick_greeting(name)
            assert greeting in ("Oi, tudo bem?", "Olá, como vai?", "Ei!")
