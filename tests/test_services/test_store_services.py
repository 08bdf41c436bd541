"""
Unit tests for cart, shipping, catalog, product, dashboard, settings and storage services
"""
import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.domain.cart import Cart, CartSync
from app.domain.catalog import Category, CategoryCreate, CategoryUpdate
from app.domain.integration import IntegrationSettings, IntegrationSettingsUpdate
from app.domain.order import DeliveryMethod
from app.domain.product import Product, ProductCreate, slugify
from app.domain.shipping import ShippingRate
from app.services.cart_service import CartService
from app.services.catalog_service import CatalogService
from app.services.dashboard_service import DashboardService
from app.services.integration_service import IntegrationService
from app.services.product_service import ProductService
from app.services.shipping_service import ShippingService
from app.services.storage_service import StorageService, build_object_name


class TestCartService:

    def _service(self):
        notifications = MagicMock()
        notifications.trigger_abandoned_cart = AsyncMock(return_value=True)
        service = CartService(notifications=notifications)
        service.cart_repo = MagicMock()
        return service

    def test_sync_passes_contact(self):
        service = self._service()

        service.sync_cart(CartSync(session_id="s1", items=[{'id': 1}], total=Decimal("10.5"), email="", phone="19999"))

        kwargs = service.cart_repo.upsert.call_args.kwargs
        assert kwargs['total'] == Decimal("10.50")
        assert kwargs['user_email'] is None
        assert kwargs['user_phone'] == "19999"

    def test_sweep_notifies_and_marks_abandoned(self):
        service = self._service()
        service.cart_repo.find_abandoned.return_value = [
            Cart(id=1, session_id="a", items=[{'id': 1}], total=Decimal("10"), user_email="a@b.com"),
            Cart(id=2, session_id="b", items=[{'id': 2}], total=Decimal("20"), user_phone="19999"),
        ]
        service.cart_repo.set_status.side_effect = [True, Exception("db down")]
        now = datetime(2025, 7, 18, 12, 0, tzinfo=timezone.utc)

        result = asyncio.run(service.sweep_abandoned_carts(now=now))

        cutoff = service.cart_repo.find_abandoned.call_args.args[0]
        assert cutoff == datetime(2025, 7, 18, 11, 30, tzinfo=timezone.utc)
        assert result['success'] is True
        assert result['processed'] == 2
        assert result['results'] == [
            {'id': 1, 'status': 'processed', 'notified': True},
            {'id': 2, 'status': 'failed_update', 'notified': True},
        ]
        service.cart_repo.set_status.assert_any_call(1, 'abandoned')

    def test_sweep_skips_carts_without_contact(self):
        service = self._service()
        service.cart_repo.find_abandoned.return_value = [Cart(id=1, session_id="a", items=[{'id': 1}])]

        result = asyncio.run(service.sweep_abandoned_carts())

        assert result['processed'] == 0
        service.notifications.trigger_abandoned_cart.assert_not_called()


class TestShippingService:

    def _service(self, rate=None):
        service = ShippingService()
        service.shipping_repo = MagicMock()
        service.shipping_repo.find_by_id.return_value = rate
        return service

    def test_pickup_is_free(self):
        quote = self._service().quote_shipping(DeliveryMethod.PICKUP)
        assert quote.fee == Decimal("0.00")

    def test_active_rate(self):
        rate = ShippingRate(id=3, city_name="Caconde", base_fee=Decimal("10.00"), estimated_delivery_time=1)
        quote = self._service(rate).quote_shipping(DeliveryMethod.SHIPPING, 3)
        assert quote.fee == Decimal("10.00")
        assert quote.city_name == "Caconde"

    @pytest.mark.parametrize("rate_id, rate", [
        (None, None),
        (9, None),
        (3, ShippingRate(id=3, city_name="Caconde", base_fee=Decimal("10.00"), is_active=False)),
    ])
    def test_unavailable(self, rate_id, rate):
        with pytest.raises(ValidationError, match="Frete indisponível para esta região."):
            self._service(rate).quote_shipping(DeliveryMethod.SHIPPING, rate_id)


class TestCatalogService:

    def _service(self):
        service = CatalogService()
        service.category_repo = MagicMock()
        service.brand_repo = MagicMock()
        service.promotion_repo = MagicMock()
        return service

    def test_tree(self):
        service = self._service()
        service.category_repo.find_all.return_value = [
            Category(id=1, name="Suplementos"),
            Category(id=2, name="Whey", parent_id=1),
            Category(id=3, name="Roupas", type="clothing"),
        ]

        tree = service.category_tree()

        assert [c.name for c in tree] == ["Suplementos", "Roupas"]
        assert [c.name for c in tree[0].children] == ["Whey"]

    def test_create_with_missing_parent(self):
        service = self._service()
        service.category_repo.find_by_id.return_value = None
        with pytest.raises(ValidationError):
            service.create_category(CategoryCreate(name="Whey", parent_id=99))

    def test_create_defaults_to_supplement(self):
        service = self._service()
        service.create_category(CategoryCreate(name="Pré-Treino"))

        data = service.category_repo.create.call_args.args[0]
        assert data.type.value == "supplement"
        assert service.category_repo.create.call_args.kwargs['slug'] == "pre-treino"

    def test_category_cannot_be_its_own_parent(self):
        with pytest.raises(ValidationError):
            self._service().update_category(4, CategoryUpdate(parent_id=4))

    def test_delete_missing_brand(self):
        service = self._service()
        service.brand_repo.delete.return_value = False
        with pytest.raises(NotFoundError):
            service.delete_brand(1)


class TestProductService:

    def test_slugify(self):
        assert slugify("Whey Protein Concentrado 900g") == "whey-protein-concentrado-900g"
        assert slugify("Camiseta Dry-Fit Açaí") == "camiseta-dry-fit-acai"

    def test_unique_slug_adds_suffix(self):
        service = ProductService()
        service.product_repo = MagicMock()
        taken = {'creatina': Product(id=1, name="Creatina", price=Decimal("89.90"))}
        service.product_repo.find_by_slug.side_effect = taken.get

        service.create_product(ProductCreate(name="Creatina", price=Decimal("99.90")))

        assert service.product_repo.create.call_args.kwargs['slug'] == "creatina-2"

    def test_update_missing(self):
        service = ProductService()
        service.product_repo = MagicMock()
        service.product_repo.update_stock.return_value = None
        with pytest.raises(NotFoundError):
            service.update_stock(1, 5)


class TestDashboardService:

    def test_zero_filled_week(self):
        service = DashboardService()
        service.order_repo = MagicMock()
        service.product_repo = MagicMock()
        service.order_repo.get_stats.return_value = {
            'total_orders': 4, 'total_revenue': 500.0, 'total_customers': 3,
        }
        service.order_repo.get_daily_revenue.return_value = {date(2025, 7, 17): 200.0, date(2025, 7, 18): 300.0}
        service.order_repo.get_revenue_by_category.return_value = [{'name': 'Whey', 'value': 500.0}]
        service.product_repo.count.return_value = 12

        stats = service.get_stats(now=datetime(2025, 7, 18, 15, 0, tzinfo=timezone.utc))

        assert service.order_repo.get_daily_revenue.call_args.args[0] == date(2025, 7, 12)
        assert len(stats['daily_revenue']) == 7
        assert stats['daily_revenue'][0] == {'date': '12 jul', 'day': '2025-07-12', 'revenue': 0.0}
        assert stats['daily_revenue'][-1]['revenue'] == 300.0
        assert stats['total_products'] == 12
        assert stats['total_revenue'] == 500.0
        assert stats['sales_by_category'] == [{'name': 'Whey', 'value': 500.0}]


class TestIntegrationService:

    def _service(self, stored=None):
        service = IntegrationService()
        service.integration_repo = MagicMock()
        service.integration_repo.get.return_value = stored
        return service

    def test_dashboard_token_wins(self):
        service = self._service(IntegrationSettings(id=1, mp_access_token="APP_USR-db"))

        assert service.get_mp_access_token() == "APP_USR-db"

    @patch('app.services.integration_service.app_settings')
    def test_env_token_fallback(self, mock_settings):
        mock_settings.MP_ACCESS_TOKEN = "APP_USR-env"
        service = self._service(IntegrationSettings(id=1))

        assert service.get_mp_access_token() == "APP_USR-env"

    @patch('app.services.integration_service.app_settings')
    def test_no_token_anywhere(self, mock_settings):
        mock_settings.MP_ACCESS_TOKEN = ""
        service = self._service(None)
        service.integration_repo.get.side_effect = Exception("db down")

        assert service.get_mp_access_token() is None

    def test_update_only_sends_given_fields(self):
        service = self._service()
        service.integration_repo.save.return_value = IntegrationSettings(id=1, store_address="Rua Nova, 5")

        service.update_settings(IntegrationSettingsUpdate(store_address="Rua Nova, 5"))

        service.integration_repo.save.assert_called_once_with({"store_address": "Rua Nova, 5"})

    def test_store_open_without_hours(self):
        assert self._service(None).get_store_status().is_open is True


class TestStorageService:

    def test_object_name_keeps_extension(self):
        name = build_object_name("Whey.PNG", "products/")

        assert name.startswith("products/")
        assert name.endswith(".png")

    def test_rejects_unsupported_extension(self):
        with pytest.raises(ValidationError):
            build_object_name("tabela.pdf")

    def test_rejects_empty_file(self):
        with pytest.raises(ValidationError):
            StorageService(bucket="media").upload_image("whey.png", b"")

    @patch('app.services.storage_service.get_supabase')
    def test_upload_returns_public_url(self, mock_get_supabase):
        bucket = mock_get_supabase.return_value.storage.from_.return_value
        bucket.get_public_url.return_value = "https://cdn.test/media/products/x.png"

        url = StorageService(bucket="media").upload_image("whey.png", b"\x89PNG", subfolder="products")

        assert url == "https://cdn.test/media/products/x.png"
        mock_get_supabase.return_value.storage.from_.assert_called_once_with("media")
        object_name, content, options = bucket.upload.call_args.args
        assert object_name.startswith("products/")
        assert content == b"\x89PNG"
        assert options == {"content-type": "image/png"}
