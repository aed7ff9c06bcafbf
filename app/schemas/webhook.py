"""
app/schemas/webhook.py

Purpose: WhatsApp webhook payload schemas and parsers

- Validates incoming Twilio WhatsApp messages
- Normalizes them into UnifiedMessage
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone

from utils.whatsapp_utils import strip_whatsapp_prefix, to_whatsapp_address, same_address


class UnifiedMessage(BaseModel):
    """
    Normalized inbound chat message for internal processing
    """
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "user_id": "+15551234567",
            "name": "Jane Doe",
            "text": "!inspire",
            "message_id": "SM1234567890",
            "channel": "whatsapp:+15551234567",
            "is_automated": False
        }
    })

    user_id: str = Field(..., description="Sender's WhatsApp number in E.164 format")
    name: str = Field(..., description="Sender's display name")
    text: str = Field(..., description="Message text content")
    message_id: str = Field(..., description="Unique message identifier")
    channel: str = Field(..., description="Conversation the message arrived on")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_automated: bool = Field(default=False, description="Sent by a bot, including ourselves")


def parse_twilio_message(
    from_number: str,
    body: str,
    profile_name: Optional[str] = None,
    message_sid: Optional[str] = None,
    bot_number: Optional[str] = None
) -> UnifiedMessage:
    """
    Parses Twilio WhatsApp webhook payload

    Twilio format (form data):
    - From: whatsapp:+15551234567
    - Body: message text
    - ProfileName: User's name
    - MessageSid: SM...
    """
    user_id = strip_whatsapp_prefix(from_number)

    return UnifiedMessage(
        user_id=user_id,
        name=profile_name or user_id,  # Fallback to number if name not provided
        text=body,
        message_id=message_sid or f"twilio_{datetime.now(timezone.utc).timestamp()}",
        channel=to_whatsapp_address(from_number),
        is_automated=same_address(from_number, bot_number)
    )
