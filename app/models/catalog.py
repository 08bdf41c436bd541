"""
Modelos do catálogo: produtos, categorias, marcas e banners
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from app.core.database import Base


class Category(Base):
    """
    Categorias (árvore simples via parent_id)
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    slug = Column(String(180), nullable=False, index=True)
    image_url = Column(Text)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True)

    # supplement | clothing | other
    type = Column(String(20), nullable=False, server_default="supplement")

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    slug = Column(String(180), nullable=False, index=True)
    logo_url = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Product(Base):
    """
    Produtos do catálogo
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(280), nullable=False, index=True)
    description = Column(Text)

    # Preços (original_price > price indica promoção)
    price = Column(DECIMAL(12, 2), nullable=False)
    original_price = Column(DECIMAL(12, 2))

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), index=True)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="SET NULL"), index=True)

    image_url = Column(Text)
    hover_image_url = Column(Text)

    stock = Column(Integer, nullable=False, server_default="0")
    barcode = Column(String(64), index=True)

    featured = Column(Boolean, nullable=False, server_default="false")
    active = Column(Boolean, nullable=False, server_default="true", index=True)

    # Variações
    sizes = Column(JSONB, nullable=False, server_default="[]")
    flavors = Column(JSONB, nullable=False, server_default="[]")
    flavor_details = Column(JSONB, nullable=False, server_default="[]")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Promotion(Base):
    """
    Banners da home (carrossel e grid)
    """
    __tablename__ = "promotions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    image_url = Column(Text)
    mobile_image_url = Column(Text)
    link = Column(Text)
    position = Column(String(30), nullable=False, server_default="main_carousel")
    active = Column(Boolean, nullable=False, server_default="true")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
