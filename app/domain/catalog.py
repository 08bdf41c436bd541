"""
Catalog Domain Models

Categories, brands and home page promotions (banners).
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryType(str, Enum):
    """Drives the wording of packing notifications"""
    SUPPLEMENT = "supplement"
    CLOTHING = "clothing"
    OTHER = "other"


class Category(BaseModel):
    id: int = Field(..., description="Category ID")
    name: str = Field(..., description="Category name")
    slug: Optional[str] = None
    image_url: Optional[str] = None
    parent_id: Optional[int] = Field(None, description="Parent category ID")
    type: CategoryType = CategoryType.SUPPLEMENT
    created_at: Optional[datetime] = None
    children: List["Category"] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    image_url: Optional[str] = None
    parent_id: Optional[int] = None
    type: CategoryType = CategoryType.SUPPLEMENT


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    image_url: Optional[str] = None
    parent_id: Optional[int] = None
    type: Optional[CategoryType] = None


def build_category_tree(categories: List[Category]) -> List[Category]:
    """
    Nest categories under their parents

    Categories whose parent is missing are treated as roots.
    """
    by_id: Dict[int, Category] = {
        c.id: c.model_copy(update={"children": []}) for c in categories
    }
    roots: List[Category] = []

    for category in by_id.values():
        parent = by_id.get(category.parent_id) if category.parent_id else None
        if parent is not None and parent.id != category.id:
            parent.children.append(category)
        else:
            roots.append(category)

    return roots


class Brand(BaseModel):
    id: int = Field(..., description="Brand ID")
    name: str = Field(..., description="Brand name")
    slug: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class BrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    logo_url: Optional[str] = None


class PromotionPosition(str, Enum):
    MAIN_CAROUSEL = "main_carousel"
    GRID_LEFT = "grid_left"
    GRID_TOP_RIGHT = "grid_top_right"
    GRID_BOTTOM_LEFT = "grid_bottom_left"
    GRID_BOTTOM_RIGHT = "grid_bottom_right"


class Promotion(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    mobile_image_url: Optional[str] = None
    link: Optional[str] = None
    position: PromotionPosition = PromotionPosition.MAIN_CAROUSEL
    active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class PromotionCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    mobile_image_url: Optional[str] = None
    link: Optional[str] = None
    position: PromotionPosition = PromotionPosition.MAIN_CAROUSEL
    active: bool = True


class PromotionUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    mobile_image_url: Optional[str] = None
    link: Optional[str] = None
    position: Optional[PromotionPosition] = None
    active: Optional[bool] = None
