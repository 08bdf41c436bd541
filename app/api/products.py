"""
Products API Endpoints
Storefront catalog queries and dashboard product management
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.auth import TokenUser, require_admin
from app.core.exceptions import DarkStoreError
from app.domain.product import ProductCreate, ProductUpdate, StockUpdate
from app.services.product_service import ProductService

router = APIRouter()


@router.get("/")
async def get_products(
    category_id: Optional[int] = Query(None, description="Filter by category (includes subcategories)"),
    brand_id: Optional[int] = Query(None, description="Filter by brand"),
    search: Optional[str] = Query(None, description="Search by name or description"),
    featured: Optional[bool] = Query(None, description="Only new releases"),
    on_sale: Optional[bool] = Query(None, description="Only products with a previous price"),
    active: Optional[bool] = Query(None, description="Filter by storefront visibility"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    """
    Get all products with optional filters

    Returns products with category and brand names included
    """
    try:
        products, total = ProductService().list_products(
            category_id=category_id,
            brand_id=brand_id,
            search=search,
            featured=featured,
            on_sale=on_sale,
            active=active,
            limit=limit,
            offset=offset,
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/new-releases")
async def get_new_releases(limit: int = Query(8, ge=1, le=50)):
    """Featured products, newest first"""
    try:
        products = ProductService().new_releases(limit=limit)
        return {"status": "success", "data": [p.to_dict() for p in products]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching new releases: {str(e)}")


@router.get("/on-sale")
async def get_on_sale(limit: int = Query(8, ge=1, le=50)):
    try:
        products = ProductService().on_sale(limit=limit)
        return {"status": "success", "data": [p.to_dict() for p in products]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products on sale: {str(e)}")


@router.get("/slug/{slug}")
async def get_product_by_slug(slug: str):
    try:
        product = ProductService().get_product_by_slug(slug)
        return {"status": "success", "data": product.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: int):
    try:
        product = ProductService().get_product(product_id)
        return {"status": "success", "data": product.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.post("/", status_code=201)
async def create_product(data: ProductCreate, user: TokenUser = Depends(require_admin)):
    """Create a product (slug generated from the name)"""
    try:
        product = ProductService().create_product(data)
        return {"status": "success", "data": product.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/{product_id}")
async def update_product(product_id: int, data: ProductUpdate, user: TokenUser = Depends(require_admin)):
    try:
        product = ProductService().update_product(product_id, data)
        return {"status": "success", "data": product.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.patch("/{product_id}/stock")
async def update_stock(product_id: int, data: StockUpdate, user: TokenUser = Depends(require_admin)):
    try:
        product = ProductService().update_stock(product_id, data.stock)
        return {"status": "success", "data": product.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating stock: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(product_id: int, user: TokenUser = Depends(require_admin)):
    try:
        ProductService().delete_product(product_id)
        return {"status": "success", "message": "Produto excluído."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")
