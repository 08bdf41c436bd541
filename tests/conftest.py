"""
Pytest fixtures and configuration for DarkStore backend tests

Environment defaults are set before the app is imported so Settings
picks them up. No test here needs a live database.
"""
import os

os.environ.setdefault("AUTH_SECRET", "test-secret-key")
os.environ.setdefault("CRON_SECRET", "test-cron-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("PUBLIC_BASE_URL", "https://loja.test")
os.environ.setdefault("MP_ACCESS_TOKEN", "")

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.core.auth import TokenUser, create_access_token
from app.domain.integration import IntegrationSettings
from app.domain.order import Order


@pytest.fixture
def sample_order_row():
    """Order row as returned by RealDictCursor"""
    return {
        'id': 123,
        'user_id': None,
        'user_name': 'Maria Souza',
        'user_email': 'maria@exemplo.com',
        'user_phone': '19998277880',
        'items': [
            {'product_id': 1, 'name': 'Whey Protein', 'price': 149.9, 'quantity': 2, 'category_id': 10},
            {'product_id': 2, 'name': 'Camiseta Dry', 'price': 59.9, 'quantity': 1, 'category_id': 20},
        ],
        'subtotal': Decimal('359.70'),
        'discount_amount': Decimal('0.00'),
        'coupon_code': None,
        'shipping_cost': Decimal('10.00'),
        'total': Decimal('369.70'),
        'status': 'pending',
        'payment_id': None,
        'payment_method': 'mercadopago',
        'shipping_address': {'type': 'shipping', 'city': 'Caconde', 'street': 'Rua A', 'number': '10'},
        'channel': 'ecommerce',
        'created_at': datetime(2025, 7, 18, 15, 0, tzinfo=timezone.utc),
        'updated_at': None,
    }


@pytest.fixture
def sample_order(sample_order_row):
    return Order(**sample_order_row)


@pytest.fixture
def pickup_order(sample_order_row):
    row = dict(sample_order_row)
    row['shipping_address'] = {'type': 'pickup'}
    row['shipping_cost'] = Decimal('0.00')
    row['total'] = Decimal('359.70')
    return Order(**row)


@pytest.fixture
def integration_settings():
    """Fully configured integrations"""
    return IntegrationSettings(
        id=1,
        webhook_order_created="https://hooks.test/orders",
        webhook_abandoned_cart="https://hooks.test/carts",
        status_order_created=True,
        status_abandoned_cart=True,
        auth_token="hook-token",
        mp_access_token="TEST-123",
        mp_public_key="TEST-PUB",
        chatwoot_url="https://chat.test",
        chatwoot_account_id="1",
        chatwoot_token="cw-token",
        chatwoot_inbox_id="2",
        store_address="Rua da Loja, 100",
        store_hours=None,
    )


@pytest.fixture
def admin_headers():
    token = create_access_token(TokenUser(id="1", email="admin@loja.test", name="Admin", role="admin"))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers():
    token = create_access_token(TokenUser(id="user-42", email="cliente@loja.test", name="Cliente", role="user"))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from app.main import app

    return TestClient(app)
