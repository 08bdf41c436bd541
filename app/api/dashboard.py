"""
Dashboard API Endpoints
Store totals and charts for the admin home page
"""
from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.auth import TokenUser, require_admin
from app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def get_dashboard_stats(
    days: int = Query(7, ge=1, le=90, description="Days in the revenue chart"),
    user: TokenUser = Depends(require_admin)
):
    """
    Get dashboard statistics

    Returns:
    - Revenue (cancelled orders excluded), order and product counts
    - Unique customers
    - Revenue per day (zero-filled) and per category
    """
    try:
        stats = DashboardService().get_stats(days=days)
        return {"status": "success", "data": stats}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching dashboard stats: {str(e)}")
