"""
Cart API Endpoints
Storefront cart sync and the abandoned-cart cron
"""
import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from app.core.config import settings
from app.domain.cart import CartSync
from app.services.cart_service import CartService

logger = logging.getLogger(__name__)

cart_router = APIRouter(prefix="/api/v1/cart", tags=["Cart"])
cron_router = APIRouter(prefix="/api/v1/cron", tags=["Cron"])


async def verify_cron_key(x_cron_key: str = Header(None, alias="X-Cron-Key")):
    """
    Verify the cron key from X-Cron-Key header.

    If CRON_SECRET is not configured the endpoint is closed.
    """
    if not settings.CRON_SECRET:
        logger.warning("CRON_SECRET not configured - cron endpoints are disabled")
        raise HTTPException(status_code=503, detail="Cron not configured")

    if not x_cron_key:
        logger.warning("Cron request without X-Cron-Key header")
        raise HTTPException(status_code=401, detail="Missing X-Cron-Key header. Authentication required.")

    if x_cron_key != settings.CRON_SECRET:
        logger.warning("Invalid cron key attempt")
        raise HTTPException(status_code=401, detail="Invalid cron key")


@cart_router.post("/sync")
async def sync_cart(data: CartSync):
    """
    Save the current cart of a browser session

    Called by the storefront whenever the cart or the contact fields change.
    """
    try:
        cart = CartService().sync_cart(data)
        return {"status": "success", "data": cart.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error syncing cart: {str(e)}")


@cron_router.post("/abandoned-carts", dependencies=[Depends(verify_cron_key)])
async def sweep_abandoned_carts():
    """Notify and close carts left open with a contact"""
    try:
        return await CartService().sweep_abandoned_carts()

    except Exception as e:
        logger.error(f"Abandoned cart sweep failed: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing abandoned carts: {str(e)}")
