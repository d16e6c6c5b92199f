"""
Messenger Response Sender

Sends relay output back to the user through the Facebook Send API.
No formatting intelligence. No retries. No logic.
"""

import logging
from typing import Optional

import httpx

from .schemas import OutboundMessage, SendResult

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


class MessengerSenderError(Exception):
    """Failed to send a message through the Send API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MessengerSender:
    """
    Send API client.

    send_text() never raises: failures are logged and returned as a
    SendResult with ok=False.
    """

    def __init__(
        self,
        page_access_token: str,
        api_version: str = "v15.0",
        base_url: str = GRAPH_BASE_URL,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            page_access_token: Page token, sent as the access_token query param
            api_version: Graph API version (e.g. "v15.0")
            base_url: Graph API root
            timeout_s: Per-request timeout
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.page_access_token = page_access_token
        self.api_version = api_version
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.api_version}/me/messages"

    async def _post(self, message: OutboundMessage) -> SendResult:
        """
        POST one message.

        Raises:
            MessengerSenderError: missing token, non-2xx response or network failure
        """
        if not self.page_access_token:
            raise MessengerSenderError("FACEBOOK_PAGE_ACCESS_TOKEN not configured")

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"access_token": self.page_access_token},
                    json=message.model_dump(),
                    timeout=self.timeout_s,
                )
        except httpx.RequestError as e:
            raise MessengerSenderError(f"HTTP request failed: {e}")

        if not response.is_success:
            raise MessengerSenderError(
                f"Send API returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        message_id = data.get("message_id") if isinstance(data, dict) else None

        return SendResult(
            ok=True,
            recipient_id=message.recipient.id,
            status_code=response.status_code,
            message_id=message_id,
        )

    async def send_text(self, recipient_id: str, text: str) -> SendResult:
        """
        Send a plain text message to a sender id.

        Args:
            recipient_id: Sender id taken from the inbound event
            text: Reply text, must be non-empty

        Returns:
            SendResult describing the delivery attempt
        """
        if not recipient_id or not text:
            logger.warning(
                "Refusing to send: recipient id and text are required",
                extra={"recipient_id": recipient_id},
            )
            return SendResult(ok=False, recipient_id=recipient_id or "", error="empty recipient or text")

        try:
            result = await self._post(OutboundMessage.text_to(recipient_id, text))
        except MessengerSenderError as e:
            logger.error(
                f"Send API error: {e}",
                extra={"recipient_id": recipient_id, "status_code": e.status_code},
            )
            return SendResult(
                ok=False,
                recipient_id=recipient_id,
                status_code=e.status_code,
                error=str(e),
            )

        logger.info(
            f"Message sent to {recipient_id}",
            extra={"recipient_id": recipient_id, "message_id": result.message_id},
        )
        return result
