"""
Catalog API Endpoints
Categories (flat list and tree), brands and storefront promotions
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.auth import TokenUser, require_admin
from app.core.exceptions import DarkStoreError
from app.domain.catalog import (
    BrandCreate,
    CategoryCreate,
    CategoryUpdate,
    PromotionCreate,
    PromotionUpdate,
)
from app.services.catalog_service import CatalogService

categories_router = APIRouter(prefix="/api/v1/categories", tags=["Categories"])
brands_router = APIRouter(prefix="/api/v1/brands", tags=["Brands"])
promotions_router = APIRouter(prefix="/api/v1/promotions", tags=["Promotions"])


# =============================================================================
# Categories
# =============================================================================

@categories_router.get("")
async def list_categories():
    """All categories sorted by name"""
    try:
        categories = CatalogService().list_categories()
        return {"status": "success", "count": len(categories), "data": [c.to_dict() for c in categories]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@categories_router.get("/tree")
async def get_category_tree():
    """Root categories with their children (menu)"""
    try:
        tree = CatalogService().category_tree()
        return {"status": "success", "data": [c.to_dict() for c in tree]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error building category tree: {str(e)}")


@categories_router.post("", status_code=201)
async def create_category(data: CategoryCreate, user: TokenUser = Depends(require_admin)):
    try:
        category = CatalogService().create_category(data)
        return {"status": "success", "data": category.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating category: {str(e)}")


@categories_router.put("/{category_id}")
async def update_category(category_id: int, data: CategoryUpdate, user: TokenUser = Depends(require_admin)):
    try:
        category = CatalogService().update_category(category_id, data)
        return {"status": "success", "data": category.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating category: {str(e)}")


@categories_router.delete("/{category_id}")
async def delete_category(category_id: int, user: TokenUser = Depends(require_admin)):
    try:
        CatalogService().delete_category(category_id)
        return {"status": "success", "message": "Categoria excluída."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting category: {str(e)}")


# =============================================================================
# Brands
# =============================================================================

@brands_router.get("")
async def list_brands():
    try:
        brands = CatalogService().list_brands()
        return {"status": "success", "count": len(brands), "data": [b.to_dict() for b in brands]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching brands: {str(e)}")


@brands_router.post("", status_code=201)
async def create_brand(data: BrandCreate, user: TokenUser = Depends(require_admin)):
    try:
        brand = CatalogService().create_brand(data)
        return {"status": "success", "data": brand.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating brand: {str(e)}")


@brands_router.delete("/{brand_id}")
async def delete_brand(brand_id: int, user: TokenUser = Depends(require_admin)):
    try:
        CatalogService().delete_brand(brand_id)
        return {"status": "success", "message": "Marca excluída."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting brand: {str(e)}")


# =============================================================================
# Promotions
# =============================================================================

@promotions_router.get("")
async def list_promotions(active_only: bool = Query(False, description="Only banners shown in the storefront")):
    """Promotion banners, newest first"""
    try:
        promotions = CatalogService().list_promotions(active_only=active_only)
        return {"status": "success", "count": len(promotions), "data": [p.to_dict() for p in promotions]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching promotions: {str(e)}")


@promotions_router.post("", status_code=201)
async def create_promotion(data: PromotionCreate, user: TokenUser = Depends(require_admin)):
    try:
        promotion = CatalogService().create_promotion(data)
        return {"status": "success", "data": promotion.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating promotion: {str(e)}")


@promotions_router.put("/{promotion_id}")
async def update_promotion(promotion_id: int, data: PromotionUpdate, user: TokenUser = Depends(require_admin)):
    try:
        promotion = CatalogService().update_promotion(promotion_id, data)
        return {"status": "success", "data": promotion.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating promotion: {str(e)}")


@promotions_router.delete("/{promotion_id}")
async def delete_promotion(promotion_id: int, user: TokenUser = Depends(require_admin)):
    try:
        CatalogService().delete_promotion(promotion_id)
        return {"status": "success", "message": "Promoção excluída."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting promotion: {str(e)}")
