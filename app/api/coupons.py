"""
Coupons API Endpoints
Dashboard coupon management and storefront code validation

A cart carries at most one code: /apply replaces the current code
instead of stacking discounts.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.core.auth import TokenUser, require_admin
from app.core.exceptions import DarkStoreError
from app.domain.coupon import CouponCreate
from app.services.coupon_service import CouponService

router = APIRouter()


class CodeRequest(BaseModel):
    code: str = Field(..., min_length=1)


class ApplyCodeRequest(BaseModel):
    code: str = Field(..., min_length=1)
    subtotal: Decimal = Field(..., ge=0)
    current_code: Optional[str] = Field(None, description="Code already applied to the cart")


class ToggleStatusRequest(BaseModel):
    current_status: bool


@router.get("/")
async def list_coupons(user: TokenUser = Depends(require_admin)):
    """Coupons newest first, with partner name"""
    try:
        coupons = CouponService().list_coupons()
        return {"status": "success", "count": len(coupons), "data": [c.to_dict() for c in coupons]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching coupons: {str(e)}")


@router.post("/", status_code=201)
async def create_coupon(data: CouponCreate, user: TokenUser = Depends(require_admin)):
    try:
        coupon = CouponService().create_coupon(data)
        return {"status": "success", "data": coupon.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating coupon: {str(e)}")


@router.delete("/{coupon_id}")
async def delete_coupon(coupon_id: int, user: TokenUser = Depends(require_admin)):
    try:
        CouponService().delete_coupon(coupon_id)
        return {"status": "success", "message": "Cupom excluído."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting coupon: {str(e)}")


@router.patch("/{coupon_id}/toggle")
async def toggle_coupon(coupon_id: int, body: ToggleStatusRequest, user: TokenUser = Depends(require_admin)):
    """Write the opposite of the status shown in the dashboard"""
    try:
        active = CouponService().toggle_coupon_status(coupon_id, body.current_status)
        return {"status": "success", "data": {"id": coupon_id, "active": active}}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating coupon: {str(e)}")


@router.post("/validate")
async def validate_coupon(body: CodeRequest):
    """
    Validate a coupon or partner code

    Always 200: invalid codes come back with valid=false and a message.
    """
    try:
        validation = CouponService().validate_coupon(body.code)
        return validation.to_dict()

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error validating coupon: {str(e)}")


@router.post("/apply")
async def apply_coupon(body: ApplyCodeRequest):
    """Apply a code to a cart subtotal, replacing the current one"""
    try:
        return CouponService().apply_code(body.code, body.subtotal, current_code=body.current_code)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error applying coupon: {str(e)}")
