"""
Notification Service
Outbound order / cart events: generic webhooks and Chatwoot (WhatsApp)

Every trigger reads the integration settings, tries once and logs failures.
Nothing here raises into the operation that caused the event.
"""
import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.connectors.chatwoot_connector import ChatwootConnector
from app.connectors.webhook_connector import WebhookConnector
from app.core.config import settings as app_settings
from app.domain.cart import Cart
from app.domain.integration import IntegrationSettings
from app.domain.order import Order
from app.repositories.category_repository import CategoryRepository
from app.repositories.integration_repository import IntegrationRepository
from app.services.message_templates import build_whatsapp_message

logger = logging.getLogger(__name__)

SOURCE_ORDER = "Ecommerce-Darkstore"
SOURCE_CRON = "Ecommerce-Darkstore-Cron"
SOURCE_TEST = "Ecommerce-Darkstore-Test"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def pick_greeting(customer_name: Optional[str]) -> str:
    """Random opening line, personalized with the first name when known"""
    first_name = (customer_name or "").strip().split(" ")[0] if customer_name else ""
    if first_name == "Cliente" or len(first_name) <= 1:
        first_name = ""

    if first_name:
        greetings = [
            f"Oi {first_name}, tudo bem?",
            f"Olá {first_name}, como vai?",
            f"Ei {first_name}!",
        ]
    else:
        greetings = [
            "Oi, tudo bem?",
            "Olá, como vai?",
            "Ei!",
        ]

    return random.choice(greetings)


class NotificationService:
    """
    Service for order and cart notifications

    This service handles:
    - order_created / order_status_updated / abandoned_cart webhooks
    - WhatsApp messages through Chatwoot (greeting, typing, message)
    - Connection tests triggered from the dashboard
    """

    def __init__(self, webhook_transport=None, chatwoot_transport=None):
        self.integration_repo = IntegrationRepository()
        self.category_repo = CategoryRepository()
        self.webhook = WebhookConnector(timeout=app_settings.WEBHOOK_TIMEOUT, transport=webhook_transport)
        self.chatwoot_transport = chatwoot_transport

    def _load_settings(self) -> Optional[IntegrationSettings]:
        try:
            return self.integration_repo.get()
        except Exception as e:
            logger.error(f"Could not load integration settings: {e}")
            return None

    # ========================================
    # Webhooks
    # ========================================

    async def trigger_order_created(self, order: Order) -> bool:
        """
        Notify the order webhook about a new order

        Only sent when the event is enabled and a URL is configured.
        """
        settings = self._load_settings()
        if not settings or not settings.status_order_created or not settings.webhook_order_created:
            return False

        payload = {
            'event': 'order_created',
            'order_id': order.id,
            'customer_id': order.user_id or 'guest',
            'customer_name': order.user_name or 'Cliente Convidado',
            'customer_phone': order.user_phone,
            'total': float(order.total),
            'items': [
                {'name': item.name, 'quantity': item.quantity, 'price': float(item.price)}
                for item in order.items
            ],
            'created_at': _now_iso(),
        }

        result = await self.webhook.post(
            settings.webhook_order_created, payload,
            source=SOURCE_ORDER, auth_token=settings.auth_token,
        )
        return result.ok

    async def trigger_abandoned_cart(self, cart: Cart) -> bool:
        settings = self._load_settings()
        if not settings or not settings.status_abandoned_cart or not settings.webhook_abandoned_cart:
            return False

        payload = {
            'event': 'abandoned_cart',
            'cart_id': cart.id,
            'user_email': cart.user_email,
            'user_phone': cart.user_phone,
            'total': float(cart.total),
            'items': cart.items,
            'abandoned_at': _now_iso(),
        }

        result = await self.webhook.post(
            settings.webhook_abandoned_cart, payload,
            source=SOURCE_CRON, auth_token=settings.auth_token,
        )
        return result.ok

    async def trigger_order_status_update(self, order: Order, status: str) -> Dict[str, Any]:
        """
        Tell the customer about a status change

        Posts order_status_updated (with the WhatsApp text) to the order
        webhook and, when Chatwoot is configured, sends the text there too.

        Returns:
            Dict with webhook / chatwoot delivery flags
        """
        outcome = {'webhook': False, 'chatwoot': False, 'message': None}

        settings = self._load_settings()
        if not settings:
            return outcome

        try:
            category_types = self.category_repo.find_types_by_ids(
                item.category_id for item in order.items
            )
        except Exception as e:
            logger.error(f"Could not load category types for order {order.id}: {e}")
            category_types = {}

        try:
            message = build_whatsapp_message(
                order, status, settings, category_types, store_city=app_settings.STORE_CITY
            )
        except Exception as e:
            logger.error(f"Could not build status message for order {order.id}: {e}")
            message = None
        outcome['message'] = message

        if settings.webhook_order_created:
            payload = {
                'event': 'order_status_updated',
                'status': status,
                'order_id': order.id,
                'customer_id': order.user_id or 'guest',
                'customer_phone': order.user_phone or '',
                'whatsapp_message': message,
                'updated_at': _now_iso(),
            }
            result = await self.webhook.post(
                settings.webhook_order_created, payload,
                source=SOURCE_ORDER, auth_token=settings.auth_token,
            )
            outcome['webhook'] = result.ok

        if message and settings.chatwoot_configured:
            outcome['chatwoot'] = await self.send_chatwoot_message(
                settings, order.user_name or order.user_email, order.user_phone, message,
            )

        logger.info(
            f"Status notification for order {order.id} ({status}): "
            f"webhook={outcome['webhook']} chatwoot={outcome['chatwoot']}"
        )
        return outcome

    # ========================================
    # Chatwoot
    # ========================================

    async def send_chatwoot_message(
        self,
        settings: IntegrationSettings,
        customer_name: Optional[str],
        phone: Optional[str],
        message: str
    ) -> bool:
        """
        Humanized delivery: greeting, typing indicator, random pause, message

        Returns:
            True when the main message was delivered
        """
        if not settings.chatwoot_configured:
            logger.warning("[Chatwoot] Configuration missing or incomplete")
            return False

        if not phone:
            logger.warning("[Chatwoot] No phone number, skipping")
            return False

        try:
            connector = ChatwootConnector(
                url=settings.chatwoot_url,
                account_id=settings.chatwoot_account_id,
                token=settings.chatwoot_token,
                inbox_id=settings.chatwoot_inbox_id,
                timeout=app_settings.WEBHOOK_TIMEOUT,
                transport=self.chatwoot_transport,
            )

            contact_id = await connector.get_or_create_contact(phone, customer_name or 'Cliente')
            if not contact_id:
                logger.error("[Chatwoot] Could not obtain contact, flow aborted")
                return False

            conversation_id = await connector.get_or_create_conversation(contact_id)
            if not conversation_id:
                logger.error("[Chatwoot] Could not obtain conversation, flow aborted")
                return False

            if not await connector.send_message(conversation_id, pick_greeting(customer_name)):
                return False

            await connector.set_typing(conversation_id)
            await asyncio.sleep(random.uniform(
                app_settings.CHATWOOT_DELAY_MIN_SECONDS,
                app_settings.CHATWOOT_DELAY_MAX_SECONDS,
            ))

            return await connector.send_message(conversation_id, message)

        except Exception as e:
            logger.error(f"[Chatwoot] Notification failed: {e}")
            return False

    # ========================================
    # Dashboard tests
    # ========================================

    async def test_webhook(self) -> Dict[str, Any]:
        """Send a test_event to the configured order webhook"""
        settings = self._load_settings()
        if not settings or not settings.webhook_order_created:
            return {'success': False, 'message': 'URL do webhook não configurada.'}

        payload = {
            'event': 'test_event',
            'message': 'Isso é um teste de integração do Ecommerce DarkStore.',
            'timestamp': _now_iso(),
        }

        result = await self.webhook.post(
            settings.webhook_order_created, payload,
            source=SOURCE_TEST, auth_token=settings.auth_token,
        )

        if result.ok:
            return {'success': True, 'message': f"Teste enviado com sucesso! Status: {result.status_code}"}
        if result.error:
            return {'success': False, 'message': f"Erro ao testar webhook: {result.error}"}
        return {
            'success': False,
            'message': f"Falha no envio. Servidor respondeu: {result.status_code} {result.reason}",
        }

    async def send_test_webhook(self, url: str, event: str) -> Dict[str, Any]:
        """
        Post a sample order_created / abandoned_cart payload to any URL

        Used by the dashboard before saving a webhook URL.
        """
        if not url:
            return {'success': False, 'message': 'URL do Webhook não configurada.'}

        if event == 'abandoned_cart':
            payload = {
                'event': 'abandoned_cart',
                'cart_id': 'CART-TEST-888',
                'user_email': 'teste@exemplo.com',
                'total': 99.90,
                'items': [{'name': 'Produto Teste', 'quantity': 1}],
                'abandoned_at': _now_iso(),
            }
        else:
            payload = {
                'event': 'order_created',
                'order_id': 'TEST-12345',
                'customer_id': 'guest-user-123',
                'customer_name': 'Cliente Teste',
                'customer_phone': '5519999999999',
                'total': 99.90,
                'items': [{'name': 'Produto Teste', 'quantity': 1, 'price': 99.90}],
                'created_at': _now_iso(),
            }

        result = await self.webhook.post(url, payload)

        if result.ok:
            return {'success': True, 'message': 'Disparo de teste enviado com sucesso!'}
        if result.error:
            return {'success': False, 'message': f"Falha na requisição: {result.error}"}
        return {'success': False, 'message': f"Erro no disparo: {result.status_code} {result.reason}"}

    async def test_chatwoot_connection(self, phone: str) -> Dict[str, Any]:
        settings = self._load_settings()
        if not settings:
            return {'success': False, 'message': 'Não foi possível carregar as configurações.'}

        if not settings.chatwoot_url or not settings.chatwoot_token:
            return {'success': False, 'message': 'URL ou Token do Chatwoot não configurados.'}

        message = (
            f"Esta é uma mensagem de teste da sua loja {app_settings.STORE_NAME}! "
            f"Se você recebeu isso, a integração está funcionando. 🎉"
        )
        sent = await self.send_chatwoot_message(settings, 'Teste de Integração', phone, message)

        if sent:
            return {'success': True, 'message': 'Mensagem de teste enviada com sucesso! Verifique seu Chatwoot.'}
        return {
            'success': False,
            'message': 'Falha ao enviar mensagem. Verifique os logs do servidor ou as configurações (ID da Conta/Inbox).',
        }


# Singleton instance for easy import
_notification_service: Optional[NotificationService] = None


def get_notification_service() -> NotificationService:
    """Get the singleton notification service instance"""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
