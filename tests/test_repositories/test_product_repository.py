"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from app.domain.product import Product
from app.repositories.product_repository import ProductRepository
from tests.db_helpers import mock_db_connection


def _product_row(**overrides):
    row = {
        'id': 1,
        'name': 'Whey Protein Concentrado',
        'slug': 'whey-protein-concentrado',
        'description': 'Pote 900g',
        'price': Decimal('149.90'),
        'original_price': Decimal('179.90'),
        'category_id': 10,
        'category_name': 'Proteínas',
        'category_type': 'supplement',
        'brand_id': 3,
        'brand_name': 'Growth',
        'image_url': 'https://cdn.test/whey.png',
        'hover_image_url': None,
        'stock': 12,
        'barcode': '7890000000001',
        'featured': True,
        'active': True,
        'sizes': None,
        'flavors': ['Chocolate', 'Baunilha'],
        'flavor_details': None,
        'created_at': datetime.now(),
        'updated_at': None,
    }
    row.update(overrides)
    return row


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_product(self, mock_get_conn):
        """Test find_by_id returns a Product domain model"""
        # Arrange
        mock_conn, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _product_row()

        # Act
        product = ProductRepository().find_by_id(1)

        # Assert
        assert isinstance(product, Product)
        assert product.name == 'Whey Protein Concentrado'
        assert product.brand_name == 'Growth'
        assert product.sizes == []
        assert product.flavors == ['Chocolate', 'Baunilha']
        assert product.is_on_sale
        assert product.discount_percentage == 17

        mock_cursor.execute.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn):
        # Arrange
        _, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act / Assert
        assert ProductRepository().find_by_id(999) is None

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_all_returns_products_and_count(self, mock_get_conn):
        """Test find_all returns list of products and total count"""
        # Arrange
        _, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 2}
        mock_cursor.fetchall.return_value = [
            _product_row(),
            _product_row(id=2, name='Creatina', slug='creatina', original_price=None),
        ]

        # Act
        products, total = ProductRepository().find_all(limit=10)

        # Assert
        assert total == 2
        assert [p.id for p in products] == [1, 2]
        assert products[1].is_on_sale is False

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_all_category_includes_subcategories(self, mock_get_conn):
        # Arrange
        _, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        # Act
        ProductRepository().find_all(category_id=10, active=True, limit=20, offset=40)

        # Assert: count query and page query share the filters
        count_sql, count_params = mock_cursor.execute.call_args_list[0].args
        page_sql, page_params = mock_cursor.execute.call_args_list[1].args
        assert "(p.category_id = %s OR c.parent_id = %s)" in count_sql
        assert "p.active = %s" in count_sql
        assert count_params == [10, 10, True]
        assert page_params == [10, 10, True, 20, 40]
        assert "LIMIT %s OFFSET %s" in page_sql

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_all_search_matches_name_description_and_barcode(self, mock_get_conn):
        # Arrange
        _, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        # Act
        ProductRepository().find_all(search='7890000000001', on_sale=True)

        # Assert
        sql, params = mock_cursor.execute.call_args_list[0].args
        assert "p.original_price > 0" in sql
        assert "p.barcode = %s" in sql
        assert params == ['%7890000000001%', '%7890000000001%', '7890000000001']

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_update_ignores_unknown_columns(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.side_effect = [{'id': 1}, _product_row(stock=3)]

        # Act
        product = ProductRepository().update(1, {'stock': 3, 'id': 99, 'hacked': True})

        # Assert
        sql, params = mock_cursor.execute.call_args_list[0].args
        assert "stock = %s" in sql
        assert "hacked" not in sql
        assert params == [3, 1]
        assert product.stock == 3
        mock_conn.commit.assert_called_once()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_update_returns_none_when_missing(self, mock_get_conn):
        # Arrange
        _, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act / Assert
        assert ProductRepository().update(404, {'price': Decimal('10.00')}) is None

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_delete_rolls_back_on_error(self, mock_get_conn):
        # Arrange
        mock_conn, mock_cursor = mock_db_connection(mock_get_conn)
        mock_cursor.execute.side_effect = Exception("foreign key violation")

        # Act / Assert
        with pytest.raises(Exception, match="foreign key"):
            ProductRepository().delete(1)

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_product_out_of_stock(self):
        product = Product(id=1, name='Camiseta', price=Decimal('59.90'), stock=0)

        assert product.is_out_of_stock
        assert product.discount_percentage is None
