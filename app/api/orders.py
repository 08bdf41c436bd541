"""
Orders API Endpoints
Dashboard order management and the customer's order history
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from app.core.auth import TokenUser, get_current_user, require_admin
from app.core.exceptions import DarkStoreError
from app.domain.order import OrderCreate, OrderStatusUpdate, STATUS_LABELS, translate_order_status
from app.services.order_service import OrderService

router = APIRouter()


@router.get("/")
async def get_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    channel: Optional[str] = Query(None, description="Filter by sales channel (ecommerce, balcao...)"),
    from_date: Optional[str] = Query(None, description="Filter orders from this date (ISO format)"),
    to_date: Optional[str] = Query(None, description="Filter orders until this date (ISO format)"),
    search: Optional[str] = Query(None, description="Search by customer name, email, phone or order number"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    user: TokenUser = Depends(require_admin)
):
    """
    Get all orders with optional filters

    Returns orders newest first with their items
    """
    try:
        orders, total = OrderService().list_orders(
            status=status,
            channel=channel,
            from_date=from_date,
            to_date=to_date,
            search=search,
            limit=limit,
            offset=offset,
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/statuses")
async def get_statuses():
    """Known statuses with their Portuguese labels"""
    return {
        "status": "success",
        "data": [{"value": s, "label": translate_order_status(s)} for s in OrderService.statuses()]
    }


@router.get("/translate/{status}")
async def translate_status(status: str):
    return {"status": "success", "data": {"value": status, "label": translate_order_status(status)}}


@router.get("/me")
async def get_my_orders(user: TokenUser = Depends(get_current_user)):
    """Orders of the logged-in customer"""
    try:
        orders = OrderService().list_orders_for_user(user.id)
        return {"status": "success", "count": len(orders), "data": [o.to_dict() for o in orders]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/{order_id}")
async def get_order(order_id: int, user: TokenUser = Depends(require_admin)):
    try:
        order = OrderService().get_order(order_id)
        return {"status": "success", "data": order.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("/", status_code=201)
async def create_order(
    data: OrderCreate,
    background_tasks: BackgroundTasks,
    user: TokenUser = Depends(require_admin)
):
    """Register an order taken outside the storefront (counter, WhatsApp)"""
    try:
        order = OrderService().create_order(data, background_tasks)
        return {"status": "success", "data": order.to_dict()}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    user: TokenUser = Depends(require_admin)
):
    """
    Change the status of an order

    The customer is notified (webhook + WhatsApp) after the response.
    """
    try:
        order = OrderService().update_order_status(order_id, body.status, background_tasks)
        return {
            "status": "success",
            "message": f"Status atualizado para {STATUS_LABELS.get(order.status, order.status)}",
            "data": order.to_dict()
        }

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")
