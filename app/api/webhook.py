"""
app/api/webhook.py

Purpose: WhatsApp webhook endpoint

- Receives incoming messages from Twilio
- Parses message payloads and normalizes them
- Passes control to the command dispatcher
- Returns an empty TwiML response (replies go out through the API)
"""

from fastapi import APIRouter, Request, Form
from fastapi.responses import Response
from typing import Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.flow.dispatcher import CommandDispatcher
from app.schemas.webhook import parse_twilio_message

logger = get_logger(__name__)
router = APIRouter()

EMPTY_TWIML = "<?xml version=\"1.0\" encoding=\"UTF-8\"?><Response></Response>"


def get_dispatcher(request: Request) -> CommandDispatcher:
    return request.app.state.dispatcher


@router.post("/webhook")
async def webhook_handler(
    request: Request,
    From: str = Form(...),
    Body: str = Form(""),
    ProfileName: Optional[str] = Form(None),
    MessageSid: Optional[str] = Form(None),
):
    """
    Twilio WhatsApp webhook (form data).

    Commands are dispatched in the background; this returns as soon as the
    message has been routed.
    """
    message = parse_twilio_message(
        from_number=From,
        body=Body,
        profile_name=ProfileName,
        message_sid=MessageSid,
        bot_number=settings.TWILIO_WHATSAPP_NUMBER
    )

    try:
        result = await get_dispatcher(request).dispatch_message(message)
        logger.debug(f"Webhook message {message.message_id}: {result['status']}")
    except Exception as e:
        # Twilio retries on non-2xx, which would replay the command
        logger.error(f"Webhook error: {e}", exc_info=True)

    return Response(content=EMPTY_TWIML, media_type="application/xml")


@router.get("/webhook")
async def webhook_verification(request: Request):
    """
    Webhook verification endpoint (for platforms that require GET verification)
    """
    return {"status": "ok", "message": "Webhook endpoint is active"}
