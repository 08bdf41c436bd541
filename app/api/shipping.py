"""
Shipping API Endpoints
Delivery rates per city and fee quotes for the checkout
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import TokenUser, require_admin
from app.core.exceptions import DarkStoreError
from app.domain.shipping import ShippingQuoteRequest, ShippingRateCreate, ShippingRateUpdate
from app.services.shipping_service import ShippingService

router = APIRouter()


@router.get("/")
async def list_active_rates():
    """Storefront list: active rates, cheapest first"""
    try:
        rates = ShippingService().list_rates(active_only=True)
        return {"status": "success", "count": len(rates), "data": [r.to_dict() for r in rates]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching shipping rates: {str(e)}")


@router.get("/all")
async def list_all_rates(user: TokenUser = Depends(require_admin)):
    try:
        rates = ShippingService().list_rates(active_only=False)
        return {"status": "success", "count": len(rates), "data": [r.to_dict() for r in rates]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching shipping rates: {str(e)}")


@router.post("/quote")
async def quote_shipping(body: ShippingQuoteRequest):
    """Fee for pickup (free) or delivery to an active rate"""
    try:
        quote = ShippingService().quote_shipping(body.method, body.rate_id)
        return {"status": "success", "data": quote.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error quoting shipping: {str(e)}")


@router.post("/", status_code=201)
async def create_rate(data: ShippingRateCreate, user: TokenUser = Depends(require_admin)):
    try:
        rate = ShippingService().create_rate(data)
        return {"status": "success", "data": rate.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating shipping rate: {str(e)}")


@router.put("/{rate_id}")
async def update_rate(rate_id: int, data: ShippingRateUpdate, user: TokenUser = Depends(require_admin)):
    try:
        rate = ShippingService().update_rate(rate_id, data)
        return {"status": "success", "data": rate.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating shipping rate: {str(e)}")


@router.delete("/{rate_id}")
async def delete_rate(rate_id: int, user: TokenUser = Depends(require_admin)):
    try:
        ShippingService().delete_rate(rate_id)
        return {"status": "success", "message": "Frete excluído."}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting shipping rate: {str(e)}")
