"""
Outbound Webhook Connector
Posts JSON events to the URLs configured in the dashboard (n8n, Zapier...)

Single attempt per event: failures are logged and reported, never retried.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class WebhookResult:
    """Outcome of one webhook delivery"""
    ok: bool
    status_code: Optional[int] = None
    reason: str = ""
    error: Optional[str] = None


class WebhookConnector:
    """
    Connector for generic JSON webhooks

    Handles:
    - Header building (source tag + optional bearer token)
    - Single POST with timeout
    """

    def __init__(self, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize webhook connector

        Args:
            timeout: Seconds before the request is abandoned
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.transport = transport

    @staticmethod
    def build_headers(source: Optional[str] = None, auth_token: Optional[str] = None) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if source:
            headers['X-Source'] = source
        if auth_token:
            headers['Authorization'] = f"Bearer {auth_token.strip()}"
        return headers

    async def post(
        self,
        url: str,
        payload: Dict,
        source: Optional[str] = None,
        auth_token: Optional[str] = None
    ) -> WebhookResult:
        """
        POST a JSON payload

        Args:
            url: Target webhook URL
            payload: JSON body
            source: Value of the X-Source header
            auth_token: Sent as "Authorization: Bearer <token>" when set

        Returns:
            WebhookResult (ok is True for 2xx responses)
        """
        headers = self.build_headers(source, auth_token)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"[Webhook] {payload.get('event')} to {url} failed: {e}")
            return WebhookResult(ok=False, error=str(e))

        if response.is_success:
            logger.info(f"[Webhook] {payload.get('event')} sent to {url} ({response.status_code})")
        else:
            logger.error(
                f"[Webhook] {payload.get('event')} to {url} returned {response.status_code}: "
                f"{response.text[:200]}"
            )

        return WebhookResult(
            ok=response.is_success,
            status_code=response.status_code,
            reason=response.reason_phrase,
        )
