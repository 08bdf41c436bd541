"""
Catalog Service
Categories, brands and home page promotions
"""
import logging
from typing import List

from app.core.exceptions import NotFoundError, ValidationError
from app.domain.catalog import (
    Brand,
    BrandCreate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    Promotion,
    PromotionCreate,
    PromotionUpdate,
    build_category_tree,
)
from app.domain.product import slugify
from app.repositories.brand_repository import BrandRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.promotion_repository import PromotionRepository

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self):
        self.category_repo = CategoryRepository()
        self.brand_repo = BrandRepository()
        self.promotion_repo = PromotionRepository()

    # ========================================
    # Categories
    # ========================================

    def list_categories(self) -> List[Category]:
        return self.category_repo.find_all()

    def category_tree(self) -> List[Category]:
        return build_category_tree(self.category_repo.find_all())

    def create_category(self, data: CategoryCreate) -> Category:
        if data.parent_id and self.category_repo.find_by_id(data.parent_id) is None:
            raise ValidationError("Categoria pai não encontrada.")
        return self.category_repo.create(data, slug=slugify(data.name))

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        fields = data.model_dump(mode="json", exclude_unset=True)

        if fields.get('parent_id') == category_id:
            raise ValidationError("Uma categoria não pode ser pai de si mesma.")
        if fields.get('name'):
            fields['slug'] = slugify(fields['name'])

        category = self.category_repo.update(category_id, fields)
        if category is None:
            raise NotFoundError(f"Categoria {category_id} não encontrada")
        return category

    def delete_category(self, category_id: int) -> None:
        if not self.category_repo.delete(category_id):
            raise NotFoundError(f"Categoria {category_id} não encontrada")

    # ========================================
    # Brands
    # ========================================

    def list_brands(self) -> List[Brand]:
        return self.brand_repo.find_all()

    def create_brand(self, data: BrandCreate) -> Brand:
        return self.brand_repo.create(data, slug=slugify(data.name))

    def delete_brand(self, brand_id: int) -> None:
        if not self.brand_repo.delete(brand_id):
            raise NotFoundError(f"Marca {brand_id} não encontrada")

    # ========================================
    # Promotions
    # ========================================

    def list_promotions(self, active_only: bool = False) -> List[Promotion]:
        return self.promotion_repo.find_all(active=True if active_only else None)

    def create_promotion(self, data: PromotionCreate) -> Promotion:
        promotion = self.promotion_repo.create(data)
        logger.info(f"Promotion created: {promotion.id} ({promotion.position.value})")
        return promotion

    def update_promotion(self, promotion_id: int, data: PromotionUpdate) -> Promotion:
        fields = data.model_dump(mode="json", exclude_unset=True)
        if not fields:
            raise ValidationError("Nenhum campo para atualizar.")

        promotion = self.promotion_repo.update(promotion_id, fields)
        if promotion is None:
            raise NotFoundError(f"Promoção {promotion_id} não encontrada")
        return promotion

    def delete_promotion(self, promotion_id: int) -> None:
        if not self.promotion_repo.delete(promotion_id):
            raise NotFoundError(f"Promoção {promotion_id} não encontrada")
