"""
Unit tests for CheckoutService (hosted checkout, card payments, reconciliation)

Mercado Pago is served by httpx.MockTransport; repositories and the
order service are mocks.
"""
import asyncio
import json
from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest

from app.domain.checkout import CheckoutRequest, PaymentForm
from app.domain.coupon import CouponValidation, DiscountSource, DiscountType
from app.domain.order import DeliveryMethod, Order
from app.domain.product import Product
from app.domain.shipping import ShippingQuote
from app.services.checkout_service import CheckoutService


class MercadoPagoStub:
    """Serves canned Mercado Pago responses and records requests"""

    def __init__(self, preference=None, payment=None, search=None, status_code=200):
        self.requests = []
        self.preference = preference if preference is not None else {
            'id': 'pref-1', 'init_point': 'https://mp.test/checkout/pref-1'
        }
        self.payment = payment or {'id': 555, 'status': 'approved'}
        self.search = search if search is not None else {'results': []}
        self.status_code = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={'message': 'invalid access token'})
        if request.url.path == '/checkout/preferences':
            return httpx.Response(201, json=self.preference)
        if request.url.path == '/v1/payments':
            return httpx.Response(201, json=self.payment)
        return httpx.Response(200, json=self.search)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


def _order(**overrides) -> Order:
    data = {
        'id': 42,
        'user_name': 'Maria Souza',
        'user_email': 'maria@exemplo.com',
        'user_phone': '19998277880',
        'items': [{'product_id': 1, 'name': 'Whey Protein', 'price': Decimal('149.90'), 'quantity': 2}],
        'subtotal': Decimal('299.80'),
        'shipping_cost': Decimal('10.00'),
        'total': Decimal('309.80'),
        'shipping_address': {'type': 'shipping', 'rate_id': 3, 'city': 'Caconde'},
    }
    data.update(overrides)
    return Order(**data)


def _request(**overrides) -> CheckoutRequest:
    data = {
        'items': [{'product_id': 1, 'name': 'Whey Protein', 'price': 1.00, 'quantity': 2}],
        'shipping': {'type': 'shipping', 'rate_id': 3},
        'contact': {'name': 'Maria Souza', 'email': 'maria@exemplo.com', 'phone': '19998277880'},
        'session_id': 'sess-1',
    }
    data.update(overrides)
    return CheckoutRequest(**data)


def _service(stub: MercadoPagoStub, token='TEST-TOKEN') -> CheckoutService:
    order_service = MagicMock()
    service = CheckoutService(order_service=order_service, mp_transport=stub.transport)
    service.product_repo = MagicMock()
    service.product_repo.find_by_id.return_value = Product(
        id=1, name='Whey Protein', price=Decimal('149.90'), category_id=10, active=True
    )
    service.cart_repo = MagicMock()
    service.coupon_service = MagicMock()
    service.coupon_service.compute_discount.side_effect = (
        lambda subtotal, validation: (validation or CouponValidation.invalid("")).compute(subtotal)
    )
    service.shipping_service = MagicMock()
    service.shipping_service.quote_shipping.return_value = ShippingQuote(
        method=DeliveryMethod.SHIPPING, fee=Decimal('10.00'), rate_id=3, city_name='Caconde'
    )
    service.integration_service = MagicMock()
    service.integration_service.get_mp_access_token.return_value = token
    return service


class TestProcessCheckout:

    def test_creates_order_and_preference(self):
        stub = MercadoPagoStub()
        service = _service(stub)
        service.order_service.create_order.return_value = _order()

        result = asyncio.run(service.process_checkout(_request()))

        assert result.success
        assert result.url == "https://mp.test/checkout/pref-1"
        assert result.order_id == 42

        created = service.order_service.create_order.call_args.args[0]
        assert created.items[0].price == Decimal('149.90')
        assert created.subtotal == Decimal('299.80')
        assert created.shipping_cost == Decimal('10.00')
        assert created.total == Decimal('309.80')
        assert created.status.value == 'pending'
        assert created.shipping_address.city == 'Caconde'

        body = json.loads(stub.requests[0].content)
        assert stub.requests[0].headers['Authorization'] == "Bearer TEST-TOKEN"
        assert body['external_reference'] == "42"
        assert body['auto_return'] == "approved"
        assert body['back_urls']['success'] == "https://loja.test/checkout/success"
        assert body['items'][0]['unit_price'] == 149.9
        assert body['shipments']['cost'] == 10.0

        service.coupon_service.increment_usage.assert_not_called()
        service.cart_repo.mark_converted.assert_called_once_with('sess-1')

    def test_coupon_is_revalidated_and_consolidated(self):
        stub = MercadoPagoStub()
        service = _service(stub)
        service.coupon_service.validate_coupon.return_value = CouponValidation(
            valid=True, message="ok", source=DiscountSource.COUPON, code="VERAO10",
            discount_type=DiscountType.PERCENT, value=Decimal('10'),
        )
        service.order_service.create_order.return_value = _order(
            discount_amount=Decimal('29.98'), coupon_code='VERAO10', total=Decimal('279.82')
        )

        result = asyncio.run(service.process_checkout(_request(coupon_code='verao10')))

        assert result.success
        created = service.order_service.create_order.call_args.args[0]
        assert created.discount_amount == Decimal('29.98')
        assert created.total == Decimal('279.82')
        assert created.coupon_code == 'VERAO10'

        body = json.loads(stub.requests[0].content)
        assert len(body['items']) == 1
        assert body['items'][0]['unit_price'] == 269.82
        service.coupon_service.increment_usage.assert_called_once_with('VERAO10')

    def test_invalid_coupon_stops_checkout(self):
        stub = MercadoPagoStub()
        service = _service(stub)
        service.coupon_service.validate_coupon.return_value = CouponValidation.invalid("Cupom expirado.")

        result = asyncio.run(service.process_checkout(_request(coupon_code='OLD')))

        assert not result.success
        assert result.message == "Cupom expirado."
        service.order_service.create_order.assert_not_called()
        assert stub.requests == []

    def test_missing_token(self):
        stub = MercadoPagoStub()
        service = _service(stub, token=None)

        result = asyncio.run(service.process_checkout(_request()))

        assert not result.success
        assert result.message == "Erro de configuração de pagamento. Token não encontrado."
        service.order_service.create_order.assert_not_called()

    def test_preference_failure_cancels_order(self):
        stub = MercadoPagoStub(status_code=401)
        service = _service(stub)
        service.order_service.create_order.return_value = _order()

        result = asyncio.run(service.process_checkout(_request()))

        assert not result.success
        assert result.message == "Erro ao processar pagamento: invalid access token"
        service.order_service.update_order_status.assert_called_once_with(42, 'cancelled')
        service.cart_repo.mark_converted.assert_not_called()

    def test_preference_without_url(self):
        stub = MercadoPagoStub(preference={'id': 'pref-1'})
        service = _service(stub)
        service.order_service.create_order.return_value = _order()

        result = asyncio.run(service.process_checkout(_request()))

        assert result.message == "Falha ao criar preferência de pagamento (sem URL)."
        service.order_service.update_order_status.assert_called_once_with(42, 'cancelled')
        service.coupon_service.increment_usage.assert_not_called()

    def test_pickup_is_free(self):
        stub = MercadoPagoStub()
        service = _service(stub)
        service.shipping_service.quote_shipping.return_value = ShippingQuote(
            method=DeliveryMethod.PICKUP, fee=Decimal('0.00')
        )
        service.order_service.create_order.return_value = _order(
            shipping_cost=Decimal('0'), total=Decimal('299.80'), shipping_address={'type': 'pickup'}
        )

        asyncio.run(service.process_checkout(_request(shipping={'type': 'pickup'})))

        created = service.order_service.create_order.call_args.args[0]
        assert created.shipping_cost == Decimal('0.00')
        assert 'shipments' not in json.loads(stub.requests[0].content)


def _form(**overrides) -> PaymentForm:
    data = {
        'transaction_amount': Decimal('309.80'),
        'token': 'card-token',
        'installments': 1,
        'payment_method_id': 'visa',
        'payer': {'email': 'maria@exemplo.com', 'identification': {'type': 'CPF', 'number': '12345678909'}},
        'order_id': 42,
    }
    data.update(overrides)
    return PaymentForm(**data)


class TestProcessPayment:

    def test_approved_marks_order_paid(self):
        stub = MercadoPagoStub(payment={'id': 555, 'status': 'approved'})
        service = _service(stub)

        result = asyncio.run(service.process_payment(_form()))

        assert result == {'success': True, 'id': 555, 'status': 'approved'}
        assert 'X-Idempotency-Key' in stub.requests[0].headers
        assert json.loads(stub.requests[0].content)['external_reference'] == "42"
        service.order_service.update_order_status.assert_called_once_with(42, 'paid', None, payment_id='555')

    def test_rejected(self):
        stub = MercadoPagoStub(payment={'id': 556, 'status': 'rejected'})
        service = _service(stub)

        result = asyncio.run(service.process_payment(_form()))

        assert result == {'success': False, 'message': "Pagamento não aprovado. Status: rejected"}
        service.order_service.update_order_status.assert_not_called()


class TestCheckPaymentStatus:

    @pytest.mark.parametrize("status, message", [
        ('rejected', "O pagamento foi recusado ou cancelado no Mercado Pago."),
        ('cancelled', "O pagamento foi recusado ou cancelado no Mercado Pago."),
        ('pending', "O pagamento ainda está pendente ou em análise no Mercado Pago."),
        ('in_process', "O pagamento ainda está pendente ou em análise no Mercado Pago."),
        ('refunded', "Status do Mercado Pago: refunded"),
    ])
    def test_informative_statuses(self, status, message):
        stub = MercadoPagoStub(search={'results': [{'id': 1, 'status': status}]})
        service = _service(stub)

        result = asyncio.run(service.check_payment_status(42))

        assert result['message'] == message
        service.order_service.update_order_status.assert_not_called()

    def test_approved_updates_order(self):
        stub = MercadoPagoStub(search={'results': [{'id': 9, 'status': 'approved'}, {'id': 8, 'status': 'rejected'}]})
        service = _service(stub)

        result = asyncio.run(service.check_payment_status(42))

        assert result['message'] == "Pagamento aprovado no Mercado Pago! Status atualizado com sucesso."
        assert result['update_to'] == 'paid'
        assert stub.requests[0].url.params['external_reference'] == "42"
        service.order_service.update_order_status.assert_called_once_with(42, 'paid', None, payment_id='9')

    def test_no_payment(self):
        service = _service(MercadoPagoStub(search={'results': []}))
        result = asyncio.run(service.check_payment_status(42))
        assert result == {'success': False, 'message': "Nenhum pagamento encontrado no Mercado Pago para este pedido."}

    def test_api_error(self):
        service = _service(MercadoPagoStub(status_code=500))
        result = asyncio.run(service.check_payment_status(42))
        assert result['message'] == "Erro ao consultar a API do Mercado Pago."
