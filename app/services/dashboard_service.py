"""
Dashboard Service
Headline numbers and charts of the merchant dashboard
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from dateutil import tz

from app.core.config import settings
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository

MONTHS_PT = ["jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"]


class DashboardService:
    def __init__(self):
        self.order_repo = OrderRepository()
        self.product_repo = ProductRepository()

    def get_stats(self, days: int = 7, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Dashboard totals and charts

        Returns:
            total_revenue (non-cancelled orders), total_orders,
            total_products, total_customers,
            daily_revenue for the last `days` store-local days (zero-filled)
            and sales_by_category
        """
        local_tz = tz.gettz(settings.STORE_TIMEZONE)
        today = (now.astimezone(local_tz) if now else datetime.now(local_tz)).date()
        first_day = today - timedelta(days=days - 1)

        totals = self.order_repo.get_stats()
        revenue_by_day = self.order_repo.get_daily_revenue(first_day, settings.STORE_TIMEZONE)

        daily_revenue = []
        for offset in range(days):
            day = first_day + timedelta(days=offset)
            daily_revenue.append({
                'date': f"{day.day:02d} {MONTHS_PT[day.month - 1]}",
                'day': day.isoformat(),
                'revenue': revenue_by_day.get(day, 0.0),
            })

        return {
            'total_revenue': totals['total_revenue'],
            'total_orders': totals['total_orders'],
            'total_products': self.product_repo.count(),
            'total_customers': totals['total_customers'],
            'daily_revenue': daily_revenue,
            'sales_by_category': self.order_repo.get_revenue_by_category(),
        }
