"""
Chatwoot REST Connector
Delivers WhatsApp notifications through a Chatwoot inbox

Every call is attempted once; failures are logged and reported as None/False.
"""
import logging
import re
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


def format_phone(phone: Optional[str]) -> str:
    """
    Normalize a phone number to international format

    Brazilian numbers typed without the country code (10 or 11 digits)
    get the 55 prefix.

    Example:
        format_phone("(19) 99827-7880") -> "+5519998277880"
    """
    if not phone:
        return ""

    digits = re.sub(r"\D", "", phone)
    if not digits:
        return ""

    if not digits.startswith("55") and len(digits) in (10, 11):
        digits = f"55{digits}"

    return f"+{digits}"


class ChatwootConnector:
    """
    Connector for the Chatwoot application API

    Handles:
    - Contact lookup / creation by phone
    - Conversation reuse / creation
    - Outgoing messages and typing indicator
    """

    def __init__(
        self,
        url: str,
        account_id: str,
        token: str,
        inbox_id: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Chatwoot connector

        Args:
            url: Chatwoot instance URL (e.g., 'https://app.chatwoot.com')
            account_id: Account ID
            token: User or agent-bot api_access_token
            inbox_id: Inbox used for outgoing messages
            timeout: Seconds per request
            transport: Optional httpx transport (tests)
        """
        if not url or not account_id or not token or not inbox_id:
            raise ValueError("Chatwoot credentials not configured (url, account, token, inbox)")

        self.api_url = f"{url.rstrip('/')}/api/v1/accounts/{account_id}"
        self.inbox_id = int(inbox_id)
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            'api_access_token': token,
            'Content-Type': 'application/json'
        }

    async def _request(self, method: str, path: str, **kwargs) -> Optional[httpx.Response]:
        """Execute a request; returns None on network errors"""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                return await client.request(method, f"{self.api_url}{path}", headers=self.headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[Chatwoot] {method} {path} failed: {e}")
            return None

    async def search_contact(self, phone: str) -> Optional[int]:
        response = await self._request('GET', '/contacts/search', params={'q': phone})
        if response is None:
            return None

        if not response.is_success:
            logger.error(f"[Chatwoot] Contact search failed: {response.status_code} {response.text[:200]}")
            return None

        contacts = response.json().get('payload') or []
        if contacts:
            logger.info(f"[Chatwoot] Found existing contact: {contacts[0]['id']}")
            return contacts[0]['id']
        return None

    async def create_contact(self, phone: str, name: str) -> Optional[int]:
        logger.info(f"[Chatwoot] Creating new contact: {name}")
        response = await self._request('POST', '/contacts', json={
            'inbox_id': self.inbox_id,
            'name': name or 'Cliente',
            'phone_number': phone,
        })
        if response is None:
            return None

        if not response.is_success:
            logger.error(f"[Chatwoot] Failed to create contact: {response.status_code} {response.text[:200]}")
            return None

        contact_id = ((response.json().get('payload') or {}).get('contact') or {}).get('id')
        if not contact_id:
            logger.error(f"[Chatwoot] Contact creation returned no id: {response.text[:200]}")
            return None
        logger.info(f"[Chatwoot] Contact created: {contact_id}")
        return contact_id

    async def get_or_create_contact(self, phone: str, name: str) -> Optional[int]:
        """
        Find the contact of a phone number, creating it when missing

        Args:
            phone: Raw phone (normalized here)
            name: Contact name used on creation

        Returns:
            Contact ID or None
        """
        formatted = format_phone(phone)
        if not formatted:
            return None

        logger.info(f"[Chatwoot] Searching for contact: {formatted}")
        contact_id = await self.search_contact(formatted)
        if contact_id:
            return contact_id

        return await self.create_contact(formatted, name)

    async def get_or_create_conversation(self, contact_id: int) -> Optional[int]:
        """
        Reuse the first unresolved conversation of a contact or open a new one

        Returns:
            Conversation ID or None
        """
        response = await self._request('GET', f'/contacts/{contact_id}/conversations')
        if response is not None and response.is_success:
            conversations = response.json().get('payload') or []
            active = next((c for c in conversations if c.get('status') != 'resolved'), None)
            if active:
                logger.info(f"[Chatwoot] Found existing active conversation: {active['id']}")
                return active['id']

        logger.info(f"[Chatwoot] Creating new conversation for contact {contact_id}")
        response = await self._request('POST', '/conversations', json={
            'inbox_id': self.inbox_id,
            'contact_id': int(contact_id),
        })
        if response is None:
            return None

        if not response.is_success:
            logger.error(f"[Chatwoot] Conversation creation failed: {response.status_code} {response.text[:200]}")
            return None

        conversation_id = response.json().get('id')
        logger.info(f"[Chatwoot] Conversation created: {conversation_id}")
        return conversation_id

    async def send_message(self, conversation_id: int, content: str) -> bool:
        response = await self._request('POST', f'/conversations/{conversation_id}/messages', json={
            'content': content,
            'message_type': 'outgoing',
        })
        if response is None:
            return False

        if not response.is_success:
            logger.error(f"[Chatwoot] Failed to send message: {response.status_code} {response.text[:200]}")
            return False

        logger.info(f"[Chatwoot] Message sent to conversation {conversation_id}")
        return True

    async def set_typing(self, conversation_id: int) -> None:
        """Best effort; the result is not checked"""
        await self._request('POST', f'/conversations/{conversation_id}/typing_status', json={
            'typing_status': 'on',
        })
