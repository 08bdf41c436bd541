"""
Checkout & Payments API Endpoints
Hosted checkout (Mercado Pago preference), card payments and payment reconciliation

Payment outcomes are returned as {success, message} with HTTP 200 so the
storefront can show the message as-is.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from app.core.auth import TokenUser, get_current_user_optional, require_admin
from app.domain.checkout import CheckoutRequest, PaymentForm
from app.services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)

checkout_router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout"])
payments_router = APIRouter(prefix="/api/v1/payments", tags=["Payments"])


@checkout_router.post("")
async def process_checkout(
    request: CheckoutRequest,
    background_tasks: BackgroundTasks,
    user: Optional[TokenUser] = Depends(get_current_user_optional)
):
    """
    Create a pending order and return the Mercado Pago checkout URL

    Guests can check out; logged-in customers get the order linked to their account.
    """
    try:
        result = await CheckoutService().process_checkout(
            request,
            user_id=user.id if user else None,
            background_tasks=background_tasks,
        )
        return result.to_dict()

    except Exception as e:
        logger.error(f"Checkout failed: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing checkout: {str(e)}")


@payments_router.post("/process")
async def process_payment(form: PaymentForm, background_tasks: BackgroundTasks):
    """Charge a card tokenized by the Payment Brick"""
    try:
        return await CheckoutService().process_payment(form, background_tasks)

    except Exception as e:
        logger.error(f"Payment failed: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing payment: {str(e)}")


@payments_router.post("/orders/{order_id}/check")
async def check_payment_status(
    order_id: int,
    background_tasks: BackgroundTasks,
    user: TokenUser = Depends(require_admin)
):
    """
    Ask Mercado Pago for the latest payment of an order

    Approved payments move the order to paid.
    """
    try:
        return await CheckoutService().check_payment_status(order_id, background_tasks)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error checking payment status: {str(e)}")
