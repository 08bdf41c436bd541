"""
Order Service
Order creation, status changes and the notifications they trigger

Notifications are queued as FastAPI background tasks so the response is
never delayed or failed by a slow webhook.
"""
import logging
from typing import List, Optional, Tuple

from fastapi import BackgroundTasks

from app.core.exceptions import NotFoundError, ValidationError
from app.domain.order import Order, OrderCreate, OrderStatus, parse_order_status
from app.repositories.order_repository import OrderRepository
from app.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)


class OrderService:
    """Service for storefront and dashboard orders"""

    def __init__(self, notifications: Optional[NotificationService] = None):
        self.order_repo = OrderRepository()
        self.notifications = notifications or get_notification_service()

    def create_order(self, data: OrderCreate, background_tasks: Optional[BackgroundTasks] = None) -> Order:
        """
        Persist an order and queue the order_created notification

        Guest orders carry no user_id. The status defaults to pending.
        """
        order = self.order_repo.create(data)
        logger.info(f"Order {order.id} created ({order.channel}, total {order.total})")

        if background_tasks is not None:
            background_tasks.add_task(self.notifications.trigger_order_created, order)

        return order

    def update_order_status(
        self,
        order_id: int,
        status: str,
        background_tasks: Optional[BackgroundTasks] = None,
        payment_id: Optional[str] = None
    ) -> Order:
        """
        Change the status of an order and notify the customer

        Raises:
            ValidationError: unknown status
            NotFoundError: unknown order
        """
        try:
            new_status = parse_order_status(status)
        except ValueError as e:
            raise ValidationError(str(e))

        order = self.order_repo.update_status(order_id, new_status.value, payment_id=payment_id)
        if order is None:
            raise NotFoundError(f"Pedido {order_id} não encontrado")

        logger.info(f"Order {order_id} status -> {new_status.value}")

        if background_tasks is not None:
            background_tasks.add_task(
                self.notifications.trigger_order_status_update, order, new_status.value
            )

        return order

    def get_order(self, order_id: int) -> Order:
        order = self.order_repo.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Pedido {order_id} não encontrado")
        return order

    def list_orders(
        self,
        status: Optional[str] = None,
        channel: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        if status:
            try:
                status = parse_order_status(status).value
            except ValueError as e:
                raise ValidationError(str(e))

        return self.order_repo.find_all(
            status=status,
            channel=channel,
            from_date=from_date,
            to_date=to_date,
            search=search,
            limit=limit,
            offset=offset,
        )

    def list_orders_for_user(self, user_id: str) -> List[Order]:
        return self.order_repo.find_by_user(user_id)

    @staticmethod
    def statuses() -> List[str]:
        return [s.value for s in OrderStatus]
