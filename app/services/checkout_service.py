"""
Checkout Service
Turns a cart into a pending order and a Mercado Pago payment

Flow of process_checkout:
1. Reprice items from the catalog
2. Re-validate the discount code server-side (one code per order)
3. Quote shipping (pickup is free)
4. Create the pending order
5. Create the Mercado Pago preference (external_reference = order id)
6. Count the code usage and mark the synced cart as converted
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks

from app.connectors.mercadopago_connector import MercadoPagoConnector
from app.core.config import settings
from app.core.exceptions import PaymentConfigError, ValidationError
from app.domain.checkout import CheckoutRequest, CheckoutResult, PaymentForm
from app.domain.money import to_money
from app.domain.order import Order, OrderCreate, OrderItem, OrderStatus
from app.repositories.cart_repository import CartRepository
from app.repositories.product_repository import ProductRepository
from app.services.coupon_service import CouponService
from app.services.integration_service import IntegrationService
from app.services.order_service import OrderService
from app.services.shipping_service import ShippingService

logger = logging.getLogger(__name__)

TOKEN_MISSING_MESSAGE = "Erro de configuração de pagamento. Token não encontrado."


class CheckoutService:
    """
    Service for checkout and payments

    This service handles:
    - Hosted checkout (Checkout Pro preference)
    - Transparent card payments
    - Payment status reconciliation by order
    """

    def __init__(self, order_service: Optional[OrderService] = None, mp_transport=None):
        self.product_repo = ProductRepository()
        self.cart_repo = CartRepository()
        self.coupon_service = CouponService()
        self.shipping_service = ShippingService()
        self.integration_service = IntegrationService()
        self.order_service = order_service or OrderService()
        self.mp_transport = mp_transport

    def _connector(self) -> MercadoPagoConnector:
        """
        Raises:
            PaymentConfigError: no access token in the dashboard nor in MP_ACCESS_TOKEN
        """
        token = self.integration_service.get_mp_access_token()
        if not token:
            raise PaymentConfigError(TOKEN_MISSING_MESSAGE)
        return MercadoPagoConnector(token, api_url=settings.MP_API_URL, transport=self.mp_transport)

    def _reprice(self, items: List[OrderItem]) -> List[OrderItem]:
        """Use catalog prices; unknown products keep the cart price"""
        priced = []
        for item in items:
            product = self.product_repo.find_by_id(item.product_id) if item.product_id else None
            if product is not None:
                if not product.active:
                    raise ValidationError(f"Produto indisponível: {product.name}")
                item = item.model_copy(update={
                    'price': product.price,
                    'name': item.name or product.name,
                    'category_id': item.category_id or product.category_id,
                    'image_url': item.image_url or product.image_url,
                })
            priced.append(item)
        return priced

    def _build_preference(self, order: Order) -> Dict[str, Any]:
        base_url = settings.PUBLIC_BASE_URL.rstrip('/')

        if order.discount_amount > 0:
            # Mercado Pago has no order-level discount: charge one consolidated line
            mp_items = [{
                'id': str(order.id),
                'title': f"Pedido #{order.short_id} - {settings.STORE_NAME}",
                'quantity': 1,
                'unit_price': float(order.subtotal - order.discount_amount),
                'currency_id': settings.CURRENCY_ID,
            }]
        else:
            mp_items = [
                {
                    'id': str(item.product_id or index),
                    'title': item.name,
                    'quantity': item.quantity,
                    'unit_price': float(item.price),
                    'currency_id': settings.CURRENCY_ID,
                    **({'picture_url': item.image_url} if item.image_url else {}),
                }
                for index, item in enumerate(order.items, start=1)
            ]

        preference = {
            'items': mp_items,
            'external_reference': str(order.id),
            'back_urls': {
                'success': f"{base_url}/checkout/success",
                'failure': f"{base_url}/checkout/failure",
                'pending': f"{base_url}/checkout/pending",
            },
            'auto_return': 'approved',
            'statement_descriptor': settings.STORE_NAME,
            'metadata': {'order_id': order.id, 'phone': order.user_phone},
        }

        if order.shipping_cost > 0:
            preference['shipments'] = {'cost': float(order.shipping_cost), 'mode': 'not_specified'}

        payer = {k: v for k, v in {'name': order.user_name, 'email': order.user_email}.items() if v}
        if payer:
            preference['payer'] = payer

        return preference

    async def process_checkout(
        self,
        request: CheckoutRequest,
        user_id: Optional[str] = None,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> CheckoutResult:
        """
        Create the order and the hosted checkout

        Returns:
            CheckoutResult with the Mercado Pago init_point URL on success
        """
        logger.info(f"Processing checkout for {len(request.items)} items (coupon: {request.coupon_code})")

        try:
            connector = self._connector()
        except PaymentConfigError as e:
            logger.error("Mercado Pago access token not configured")
            return CheckoutResult(success=False, message=e.message)

        try:
            items = self._reprice(request.items)
            subtotal = to_money(sum((item.line_total for item in items), Decimal("0")))

            validation = None
            if request.coupon_code:
                validation = self.coupon_service.validate_coupon(request.coupon_code)
                if not validation.valid:
                    return CheckoutResult(success=False, message=validation.message)

            breakdown = self.coupon_service.compute_discount(subtotal, validation)
            quote = self.shipping_service.quote_shipping(request.shipping.type, request.shipping.rate_id)

            shipping_address = request.shipping
            if quote.city_name and not shipping_address.city:
                shipping_address = shipping_address.model_copy(update={'city': quote.city_name})

        except ValidationError as e:
            return CheckoutResult(success=False, message=e.message)

        total = to_money(breakdown.total + quote.fee)

        order = self.order_service.create_order(OrderCreate(
            user_id=user_id,
            user_name=request.contact.name,
            user_email=request.contact.email,
            user_phone=request.contact.phone,
            items=items,
            subtotal=subtotal,
            discount_amount=breakdown.discount_amount,
            coupon_code=validation.code if validation else None,
            shipping_cost=quote.fee,
            total=total,
            status=OrderStatus.PENDING,
            payment_method='mercadopago',
            shipping_address=shipping_address,
        ), background_tasks)

        result = await connector.create_preference(self._build_preference(order))

        if not result.ok:
            self.order_service.update_order_status(order.id, OrderStatus.CANCELLED.value)
            return CheckoutResult(
                success=False,
                order_id=order.id,
                message=f"Erro ao processar pagamento: {result.error or 'Desconhecido'}",
            )

        init_point = result.data.get('init_point')
        if not init_point:
            logger.error(f"Preference for order {order.id} returned no init_point")
            self.order_service.update_order_status(order.id, OrderStatus.CANCELLED.value)
            return CheckoutResult(
                success=False,
                order_id=order.id,
                message="Falha ao criar preferência de pagamento (sem URL).",
            )

        if validation:
            self.coupon_service.increment_usage(validation.code)

        if request.session_id:
            try:
                self.cart_repo.mark_converted(request.session_id)
            except Exception as e:
                logger.error(f"Could not mark cart {request.session_id} as converted: {e}")

        logger.info(f"Checkout ready for order {order.id}: {init_point}")

        return CheckoutResult(
            success=True,
            url=init_point,
            order_id=order.id,
            subtotal=order.subtotal,
            discount_amount=order.discount_amount,
            shipping_cost=order.shipping_cost,
            total=order.total,
        )

    async def process_payment(
        self,
        form: PaymentForm,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> Dict[str, Any]:
        """
        Charge a tokenized card

        Approved payments of a known order move it to paid.
        """
        try:
            connector = self._connector()
        except PaymentConfigError as e:
            return {'success': False, 'message': e.message}

        body = {
            'transaction_amount': float(form.transaction_amount),
            'token': form.token,
            'description': form.description,
            'installments': form.installments,
            'payment_method_id': form.payment_method_id,
            'issuer_id': form.issuer_id,
            'payer': form.payer.model_dump(exclude_none=True),
        }
        if form.order_id:
            body['external_reference'] = str(form.order_id)
        body = {key: value for key, value in body.items() if value is not None}

        result = await connector.create_payment(body)
        if not result.ok:
            return {'success': False, 'message': f"Erro ao processar pagamento: {result.error or 'Desconhecido'}"}

        status = result.data.get('status')
        payment_id = result.data.get('id')
        logger.info(f"Payment {payment_id} created with status {status}")

        if status != 'approved':
            return {'success': False, 'message': f"Pagamento não aprovado. Status: {status}"}

        if form.order_id:
            self.order_service.update_order_status(
                form.order_id, OrderStatus.PAID.value, background_tasks, payment_id=str(payment_id)
            )

        return {'success': True, 'id': payment_id, 'status': status}

    async def check_payment_status(
        self,
        order_id: int,
        background_tasks: Optional[BackgroundTasks] = None
    ) -> Dict[str, Any]:
        """
        Reconcile an order with its latest Mercado Pago payment

        approved -> order becomes paid (customer notified); other statuses
        only report what Mercado Pago says.
        """
        try:
            connector = self._connector()
        except PaymentConfigError:
            return {'success': False, 'message': "Token do Mercado Pago não encontrado nas configurações."}

        payments = await connector.search_payments(str(order_id))
        if payments is None:
            return {'success': False, 'message': "Erro ao consultar a API do Mercado Pago."}
        if not payments:
            return {'success': False, 'message': "Nenhum pagamento encontrado no Mercado Pago para este pedido."}

        latest = payments[0]
        status = latest.get('status')
        payment_id = latest.get('id')
        logger.info(f"Mercado Pago status for order {order_id}: {status}")

        result = {'success': True, 'mp_status': status, 'mp_id': payment_id}

        if status == 'approved':
            self.order_service.update_order_status(
                order_id, OrderStatus.PAID.value, background_tasks, payment_id=str(payment_id)
            )
            result.update(
                message="Pagamento aprovado no Mercado Pago! Status atualizado com sucesso.",
                update_to=OrderStatus.PAID.value,
            )
        elif status in ('rejected', 'cancelled'):
            result['message'] = "O pagamento foi recusado ou cancelado no Mercado Pago."
        elif status in ('pending', 'in_process'):
            result['message'] = "O pagamento ainda está pendente ou em análise no Mercado Pago."
        else:
            result['message'] = f"Status do Mercado Pago: {status}"

        return result
