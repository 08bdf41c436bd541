"""
Unit tests for the outbound HTTP connectors (Chatwoot, Mercado Pago, webhooks)

Every test serves responses with httpx.MockTransport.
"""
import asyncio
import json

import httpx
import pytest

from app.connectors.chatwoot_connector import ChatwootConnector, format_phone
from app.connectors.mercadopago_connector import MercadoPagoConnector
from app.connectors.webhook_connector import WebhookConnector


def _failing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.MockTransport(handler)


class TestFormatPhone:

    @pytest.mark.parametrize("raw, expected", [
        ("(19) 99827-7880", "+5519998277880"),
        ("1932821234", "+551932821234"),
        ("5519998277880", "+5519998277880"),
        ("+55 19 99827-7880", "+5519998277880"),
        ("", ""),
        (None, ""),
    ])
    def test_format(self, raw, expected):
        assert format_phone(raw) == expected


class TestChatwootConnector:

    def _connector(self, handler):
        return ChatwootConnector(
            url="https://chat.test/", account_id="1", token="tok", inbox_id="2",
            transport=httpx.MockTransport(handler),
        )

    def test_requires_configuration(self):
        with pytest.raises(ValueError):
            ChatwootConnector(url="", account_id="1", token="tok", inbox_id="2")

    def test_reuses_existing_contact_and_open_conversation(self):
        requests = []

        def handler(request):
            requests.append(request)
            if request.url.path.endswith('/contacts/search'):
                return httpx.Response(200, json={'payload': [{'id': 7}]})
            return httpx.Response(200, json={'payload': [
                {'id': 20, 'status': 'resolved'},
                {'id': 21, 'status': 'open'},
            ]})

        connector = self._connector(handler)

        contact_id = asyncio.run(connector.get_or_create_contact("19998277880", "Maria"))
        conversation_id = asyncio.run(connector.get_or_create_conversation(contact_id))

        assert contact_id == 7
        assert conversation_id == 21
        assert all(r.method == 'GET' for r in requests)
        assert requests[0].headers['api_access_token'] == "tok"
        assert str(requests[0].url).startswith("https://chat.test/api/v1/accounts/1/contacts/search")

    def test_create_contact_without_id(self):
        connector = self._connector(lambda request: httpx.Response(200, json={'payload': {}}))
        assert asyncio.run(connector.create_contact("+5519998277880", "Maria")) is None

    def test_send_message_body(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={'id': 1})

        assert asyncio.run(self._connector(handler).send_message(11, "Olá")) is True
        assert bodies == [{'content': "Olá", 'message_type': 'outgoing'}]

    def test_network_error(self):
        connector = ChatwootConnector(
            url="https://chat.test", account_id="1", token="tok", inbox_id="2",
            transport=_failing_transport(),
        )
        assert asyncio.run(connector.send_message(11, "Olá")) is False
        assert asyncio.run(connector.search_contact("+5519998277880")) is None


class TestMercadoPagoConnector:

    def test_requires_token(self):
        with pytest.raises(ValueError):
            MercadoPagoConnector("")

    def test_preference_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={'id': 'p1', 'init_point': 'https://mp.test/p1'})

        connector = MercadoPagoConnector("APP_USR-1", transport=httpx.MockTransport(handler))
        result = asyncio.run(connector.create_preference({'items': [], 'external_reference': '1'}))

        assert result.ok
        assert result.data['init_point'] == 'https://mp.test/p1'
        assert seen[0].headers['Authorization'] == "Bearer APP_USR-1"
        assert str(seen[0].url) == "https://api.mercadopago.com/checkout/preferences"

    def test_payment_uses_given_idempotency_key(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={'id': 1, 'status': 'approved'})

        connector = MercadoPagoConnector("APP_USR-1", transport=httpx.MockTransport(handler))
        asyncio.run(connector.create_payment({'token': 'x'}, idempotency_key="key-1"))

        assert seen[0].headers['X-Idempotency-Key'] == "key-1"

    def test_search_sorts_latest_first(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={'results': [{'id': 2}]})

        connector = MercadoPagoConnector("APP_USR-1", transport=httpx.MockTransport(handler))
        payments = asyncio.run(connector.search_payments("42"))

        assert payments == [{'id': 2}]
        assert seen[0].url.params['sort'] == 'date_created'
        assert seen[0].url.params['criteria'] == 'desc'

    def test_network_error(self):
        connector = MercadoPagoConnector("APP_USR-1", transport=_failing_transport())

        result = asyncio.run(connector.create_preference({'items': []}))

        assert not result.ok
        assert "connection refused" in result.error
        assert asyncio.run(connector.search_payments("42")) is None


class TestWebhookConnector:

    def test_headers(self):
        headers = WebhookConnector.build_headers("Ecommerce-Darkstore", " tok ")
        assert headers == {
            'Content-Type': 'application/json',
            'X-Source': 'Ecommerce-Darkstore',
            'Authorization': 'Bearer tok',
        }

    def test_network_error(self):
        connector = WebhookConnector(transport=_failing_transport())

        result = asyncio.run(connector.post("https://hooks.test", {'event': 'x'}))

        assert not result.ok
        assert result.status_code is None
        assert "connection refused" in result.error
