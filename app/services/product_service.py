"""
Product Service
Catalog management for the dashboard and storefront listings
"""
import logging
from typing import List, Optional, Tuple

from app.core.exceptions import NotFoundError
from app.domain.product import Product, ProductCreate, ProductUpdate, slugify
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service for products

    This service handles:
    - Filtered listings (storefront and dashboard)
    - Home page sections (new releases, on sale)
    - Create / update / delete with slug management
    - Quick stock edits
    """

    def __init__(self):
        self.product_repo = ProductRepository()

    def _unique_slug(self, name: str, product_id: Optional[int] = None) -> str:
        """Slug from the name, suffixed (-2, -3...) when another product uses it"""
        base = slugify(name) or "produto"
        slug = base
        suffix = 2

        while True:
            existing = self.product_repo.find_by_slug(slug)
            if existing is None or existing.id == product_id:
                return slug
            slug = f"{base}-{suffix}"
            suffix += 1

    def list_products(
        self,
        category_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        on_sale: Optional[bool] = None,
        active: Optional[bool] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        return self.product_repo.find_all(
            category_id=category_id,
            brand_id=brand_id,
            search=search,
            featured=featured,
            on_sale=on_sale,
            active=active,
            limit=limit,
            offset=offset,
        )

    def get_product(self, product_id: int) -> Product:
        product = self.product_repo.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Produto {product_id} não encontrado")
        return product

    def get_product_by_slug(self, slug: str) -> Product:
        product = self.product_repo.find_by_slug(slug)
        if product is None:
            raise NotFoundError(f"Produto '{slug}' não encontrado")
        return product

    def new_releases(self, limit: int = 8) -> List[Product]:
        return self.product_repo.find_new_releases(limit=limit)

    def on_sale(self, limit: int = 8) -> List[Product]:
        return self.product_repo.find_on_sale(limit=limit)

    def create_product(self, data: ProductCreate) -> Product:
        product = self.product_repo.create(data, slug=self._unique_slug(data.name))
        logger.info(f"Product created: {product.id} {product.name}")
        return product

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        fields = data.model_dump(exclude_unset=True)

        if fields.get('name'):
            fields['slug'] = self._unique_slug(fields['name'], product_id=product_id)

        product = self.product_repo.update(product_id, fields)
        if product is None:
            raise NotFoundError(f"Produto {product_id} não encontrado")
        return product

    def update_stock(self, product_id: int, stock: int) -> Product:
        product = self.product_repo.update_stock(product_id, stock)
        if product is None:
            raise NotFoundError(f"Produto {product_id} não encontrado")
        return product

    def delete_product(self, product_id: int) -> None:
        if not self.product_repo.delete(product_id):
            raise NotFoundError(f"Produto {product_id} não encontrado")
        logger.info(f"Product deleted: {product_id}")
