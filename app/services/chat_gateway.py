"""
app/services/chat_gateway.py

Purpose: WhatsApp conversation gateway via Twilio

- Sends text to a channel (a whatsapp: address) through the Twilio API
- Opens direct channels to users
- Collects a single reply from a user through the ReplyRegistry
"""

import httpx
from typing import Optional

from app.core.exceptions import ChatDeliveryError
from app.core.logging import get_logger
from app.flow.replies import ReplyRegistry
from utils.whatsapp_utils import to_whatsapp_address

logger = get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01/Accounts"


class ChatGateway:
    """Gateway for sending WhatsApp messages via Twilio"""

    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        whatsapp_number: Optional[str],
        replies: ReplyRegistry,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.whatsapp_number = whatsapp_number  # whatsapp:+14155238886
        self.replies = replies
        self.base_url = f"{TWILIO_API_BASE}/{account_sid}"
        self._client = client or httpx.AsyncClient(timeout=10.0)

    async def post_to_channel(self, channel: str, text: str) -> str:
        """
        Sends a WhatsApp message to a channel.

        Args:
            channel: Destination address (whatsapp:+15551234567)
            text: Message text

        Returns:
            Twilio message SID

        Raises:
            ChatDeliveryError: If Twilio is unreachable or rejects the message
        """
        data = {
            "From": self.whatsapp_number,
            "To": to_whatsapp_address(channel),
            "Body": text
        }

        try:
            response = await self._client.post(
                f"{self.base_url}/Messages.json",
                data=data,
                auth=(self.account_sid or "", self.auth_token or "")
            )
        except httpx.TimeoutException as e:
            logger.error("Twilio API timeout")
            raise ChatDeliveryError("Twilio API timeout") from e
        except httpx.RequestError as e:
            logger.error(f"Error sending Twilio message: {e}")
            raise ChatDeliveryError(f"Twilio request failed: {e}") from e

        if response.status_code not in (200, 201):
            logger.error(f"Twilio API error: {response.status_code} - {response.text}")
            raise ChatDeliveryError(
                f"Twilio API error: {response.status_code}",
                details={"channel": channel}
            )

        try:
            sid = response.json().get("sid")
        except (ValueError, AttributeError) as e:
            logger.error(f"Unexpected Twilio response: {response.text}")
            raise ChatDeliveryError(
                "Unexpected Twilio response",
                details={"channel": channel}
            ) from e

        logger.debug(f"Message sent to {channel}: SID={sid}")
        return sid

    async def open_direct_channel(self, user_id: str) -> str:
        """WhatsApp users are addressed directly; the channel is their address."""
        return to_whatsapp_address(user_id)

    async def send_direct(self, user_id: str, text: str) -> str:
        channel = await self.open_direct_channel(user_id)
        return await self.post_to_channel(channel, text)

    async def await_single_reply(self, channel: str, user_id: str, timeout: float) -> str:
        """
        Waits for the next message from `user_id` on `channel`.

        Raises:
            ReplyTimeoutError: If the user does not reply in time
        """
        return await self.replies.wait_for_reply(to_whatsapp_address(channel), user_id, timeout)

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(self.account_sid and self.auth_token and self.whatsapp_number)

    async def close(self):
        await self._client.aclose()
