"""
Product Domain Model

Represents a product in the storefront catalog.
This is the single source of truth for product data structure.
"""
import re
import unicodedata
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def slugify(text: str) -> str:
    """
    Build a URL slug from a name

    Example:
        slugify("Whey Protein Concentrado 900g") -> "whey-protein-concentrado-900g"
    """
    normalized = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^\w\s-]", "", normalized.lower())
    return re.sub(r"[\s_-]+", "-", slug).strip("-")


class FlavorDetail(BaseModel):
    """Image shown when a flavor is selected"""
    flavor: str
    image: Optional[str] = None


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Internal product ID (primary key)
        name: Product name
        slug: URL slug
        description: Product description (optional)
        price: Current selling price
        original_price: Previous price, shown struck-through when higher than price
        category_id / category_name: Category (name from JOIN)
        brand_id / brand_name: Brand (name from JOIN)
        image_url: Main image
        hover_image_url: Image shown on hover
        stock: Units available
        barcode: EAN used by the packing station
        featured: Highlighted as a new release
        active: Whether product is visible in the storefront
        sizes / flavors / flavor_details: Variations
    """

    # Primary identification
    id: int = Field(..., description="Internal product ID")
    name: str = Field(..., description="Product name")
    slug: Optional[str] = Field(None, description="URL slug")
    description: Optional[str] = Field(None, description="Product description")

    # Pricing
    price: Decimal = Field(..., description="Sale price", ge=0)
    original_price: Optional[Decimal] = Field(None, description="Price before promotion", ge=0)

    # Classification
    category_id: Optional[int] = Field(None, description="Category ID")
    category_name: Optional[str] = Field(None, description="Category name (from JOIN)")
    category_type: Optional[str] = Field(None, description="Category type (from JOIN)")
    brand_id: Optional[int] = Field(None, description="Brand ID")
    brand_name: Optional[str] = Field(None, description="Brand name (from JOIN)")

    # Media
    image_url: Optional[str] = Field(None, description="Main image URL")
    hover_image_url: Optional[str] = Field(None, description="Hover image URL")

    # Inventory
    stock: int = Field(0, description="Units in stock")
    barcode: Optional[str] = Field(None, description="Barcode")

    # Flags
    featured: bool = Field(False, description="New release highlight")
    active: bool = Field(True, description="Visible in storefront")

    # Variations
    sizes: List[str] = Field(default_factory=list)
    flavors: List[str] = Field(default_factory=list)
    flavor_details: List[FlavorDetail] = Field(default_factory=list)

    # Metadata
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    # Computed properties
    @property
    def is_on_sale(self) -> bool:
        """Check if product has a higher previous price"""
        return bool(self.original_price) and self.original_price > self.price

    @property
    def discount_percentage(self) -> Optional[int]:
        """Rounded percentage off the original price"""
        if not self.is_on_sale:
            return None
        return int(round((1 - self.price / self.original_price) * 100))

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode="json")

        data["category_name"] = self.category_name or "Sem Categoria"
        data["is_on_sale"] = self.is_on_sale
        data["discount_percentage"] = self.discount_percentage
        data["is_out_of_stock"] = self.is_out_of_stock

        # Convert Decimal to float for JSON compatibility
        data["price"] = float(self.price)
        if self.original_price is not None:
            data["original_price"] = float(self.original_price)

        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    image_url: Optional[str] = None
    hover_image_url: Optional[str] = None
    stock: int = 0
    barcode: Optional[str] = None
    featured: bool = False
    active: bool = True
    sizes: List[str] = Field(default_factory=list)
    flavors: List[str] = Field(default_factory=list)
    flavor_details: List[FlavorDetail] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    image_url: Optional[str] = None
    hover_image_url: Optional[str] = None
    stock: Optional[int] = None
    barcode: Optional[str] = None
    featured: Optional[bool] = None
    active: Optional[bool] = None
    sizes: Optional[List[str]] = None
    flavors: Optional[List[str]] = None
    flavor_details: Optional[List[FlavorDetail]] = None


class StockUpdate(BaseModel):
    """Schema for the quick stock editor"""
    stock: int
