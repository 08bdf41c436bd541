"""
Cart Service
Cart synchronisation and the abandoned-cart sweep run by the external cron
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.domain.cart import Cart, CartStatus, CartSync
from app.domain.money import to_money
from app.repositories.cart_repository import CartRepository
from app.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, notifications: Optional[NotificationService] = None):
        self.cart_repo = CartRepository()
        self.notifications = notifications or get_notification_service()

    def sync_cart(self, data: CartSync) -> Cart:
        """Store the storefront cart of a session (insert or update)"""
        return self.cart_repo.upsert(
            session_id=data.session_id,
            items=data.items,
            total=to_money(data.total),
            user_email=(data.email or None),
            user_phone=(data.phone or None),
        )

    async def sweep_abandoned_carts(
        self,
        now: Optional[datetime] = None,
        minutes: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Notify and close carts left open for too long

        Open carts untouched for ABANDONED_CART_MINUTES that carry an e-mail
        or phone are posted to the abandoned-cart webhook and marked
        abandoned so they are never notified twice.

        Returns:
            Dict with processed count and per-cart results
        """
        now = now or datetime.now(timezone.utc)
        minutes = minutes if minutes is not None else settings.ABANDONED_CART_MINUTES
        cutoff = now - timedelta(minutes=minutes)

        carts = self.cart_repo.find_abandoned(cutoff)
        logger.info(f"Abandoned cart sweep: {len(carts)} candidate carts (cutoff {cutoff.isoformat()})")

        results: List[Dict[str, Any]] = []

        for cart in carts:
            if not cart.has_contact:
                continue

            notified = await self.notifications.trigger_abandoned_cart(cart)

            try:
                updated = self.cart_repo.set_status(cart.id, CartStatus.ABANDONED.value)
            except Exception as e:
                logger.error(f"Failed to update cart {cart.id}: {e}")
                updated = False

            results.append({
                'id': cart.id,
                'status': 'processed' if updated else 'failed_update',
                'notified': notified,
            })

        return {
            'success': True,
            'processed': len(results),
            'results': results,
        }
