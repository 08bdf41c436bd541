"""
Unit tests for order statuses and the Order model
"""
from decimal import Decimal

import pytest

from app.domain.order import (
    DeliveryMethod,
    Order,
    OrderCreate,
    OrderItem,
    OrderStatus,
    parse_order_status,
    translate_order_status,
)


class TestOrderStatus:

    @pytest.mark.parametrize("status, label", [
        ("pending", "Pendente"),
        ("paid", "Pago / Confirmado"),
        ("packing", "Embalando"),
        ("sent", "Enviado"),
        ("shipped", "Enviado"),
        ("delivered", "Entregue"),
        ("cancelled", "Cancelado"),
    ])
    def test_translate(self, status, label):
        assert translate_order_status(status) == label

    def test_unknown_status_translates_to_itself(self):
        assert translate_order_status("refunded") == "refunded"

    def test_parse_accepts_shipped_alias(self):
        assert parse_order_status("SHIPPED") == OrderStatus.SENT
        assert parse_order_status(" paid ") == OrderStatus.PAID

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Status inválido"):
            parse_order_status("lost")


class TestOrder:

    def test_guest_and_short_id(self, sample_order):
        assert sample_order.is_guest
        assert sample_order.short_id == "00000123"
        assert sample_order.city == "Caconde"
        assert not sample_order.is_pickup

    def test_pickup(self, pickup_order):
        assert pickup_order.is_pickup
        assert pickup_order.shipping_address.type == DeliveryMethod.PICKUP

    def test_legacy_string_address(self, sample_order_row):
        row = dict(sample_order_row, shipping_address="Retirada na loja (pickup)")
        assert Order(**row).is_pickup

    def test_to_dict_uses_floats_and_labels(self, sample_order):
        data = sample_order.to_dict()
        assert data['total'] == 369.70
        assert data['status_label'] == "Pendente"
        assert data['items'][0]['price'] == 149.9
        assert data['total_quantity'] == 3

    def test_computed_subtotal(self):
        data = OrderCreate(
            items=[
                OrderItem(name="Creatina", price=Decimal("89.90"), quantity=2),
                OrderItem(name="Coqueteleira", price=Decimal("19.95"), quantity=1),
            ],
            total=Decimal("199.75"),
        )
        assert data.computed_subtotal == Decimal("199.75")
