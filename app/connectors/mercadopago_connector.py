"""
Mercado Pago REST Connector
Handles hosted checkout preferences and transparent card payments

Calls are attempted once. Network and HTTP errors are logged and returned
as a failed MercadoPagoResult so the checkout can show a friendly message.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class MercadoPagoResult:
    ok: bool
    data: Dict[str, Any] = field(default_factory=dict)
    status_code: Optional[int] = None
    error: Optional[str] = None


class MercadoPagoConnector:
    """
    Connector for Mercado Pago REST API

    Handles:
    - Checkout Pro preferences (POST /checkout/preferences)
    - Card payments (POST /v1/payments)
    - Payment search by external reference (GET /v1/payments/search)
    """

    def __init__(
        self,
        access_token: str,
        api_url: str = "https://api.mercadopago.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Mercado Pago connector

        Args:
            access_token: Seller access token (APP_USR-... / TEST-...)
            api_url: API base URL
            timeout: Seconds per request
            transport: Optional httpx transport (tests)
        """
        if not access_token:
            raise ValueError("Mercado Pago access token not configured")

        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            'Authorization': f'Bearer {access_token}',
            'Content-Type': 'application/json'
        }

    async def _request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> MercadoPagoResult:
        request_headers = {**self.headers, **(headers or {})}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, f"{self.api_url}{path}", headers=request_headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[MercadoPago] {method} {path} failed: {e}")
            return MercadoPagoResult(ok=False, error=str(e))

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            message = data.get('message') or response.reason_phrase
            logger.error(f"[MercadoPago] {method} {path} returned {response.status_code}: {message}")
            return MercadoPagoResult(ok=False, data=data, status_code=response.status_code, error=message)

        return MercadoPagoResult(ok=True, data=data, status_code=response.status_code)

    async def create_preference(self, preference: Dict[str, Any]) -> MercadoPagoResult:
        """
        Create a Checkout Pro preference

        Args:
            preference: Preference body (items, back_urls, external_reference...)

        Returns:
            Result whose data holds id and init_point
        """
        logger.info(
            f"[MercadoPago] Creating preference for reference {preference.get('external_reference')} "
            f"({len(preference.get('items', []))} items)"
        )
        return await self._request('POST', '/checkout/preferences', json=preference)

    async def create_payment(self, payment: Dict[str, Any], idempotency_key: Optional[str] = None) -> MercadoPagoResult:
        """
        Create a card payment from a tokenized card (Payment Brick)

        Returns:
            Result whose data holds id and status (approved, rejected, in_process...)
        """
        headers = {'X-Idempotency-Key': idempotency_key or str(uuid.uuid4())}
        return await self._request('POST', '/v1/payments', headers=headers, json=payment)

    async def search_payments(self, external_reference: str) -> Optional[List[Dict[str, Any]]]:
        """
        Payments linked to an order, most recent first

        Returns:
            List of payments, or None when the search itself failed
        """
        result = await self._request('GET', '/v1/payments/search', params={
            'external_reference': external_reference,
            'sort': 'date_created',
            'criteria': 'desc',
        })
        if not result.ok:
            return None
        return result.data.get('results') or []
