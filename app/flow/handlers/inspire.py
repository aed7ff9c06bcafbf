"""
app/flow/handlers/inspire.py

Handles: !inspire

- Fetches a quote and posts it to the originating channel
- Texts the same quote to the user's phone if their subscription is confirmed
- Channel post and SMS are not transactional; a failed SMS leaves the post in place
"""

from typing import Dict, Any

from app.flow.context import FlowContext
from app.flow.handlers.common import report_to_user
from app.core.logging import get_logger, LogContext
from utils.constants import COMMAND_INSPIRE, QUOTE_SMS_SENT_MESSAGE, INSPIRE_ERROR_MESSAGE

logger = get_logger(__name__)


async def handle_inspire(ctx: FlowContext, user_id: str, channel: str) -> Dict[str, Any]:
    """
    Runs the inspire flow for one command.

    Args:
        ctx: Flow collaborators
        user_id: Chat user who sent the command
        channel: Channel the command came from

    Returns:
        Response dict with status, quote and sms_message_id (if an SMS went out)
    """
    with LogContext(user_id=user_id, command=COMMAND_INSPIRE):
        quote = None
        posted = False

        try:
            quote = await ctx.quotes.fetch_quote()
            await ctx.gateway.post_to_channel(channel, quote)
            posted = True

            record = await ctx.store.get(user_id)
            if record is None or not record.is_confirmed:
                return {"status": "success", "quote": quote, "sms_message_id": None}

            message_id = await ctx.notifier.send(record.phone_number, quote)
            await ctx.gateway.send_direct(user_id, QUOTE_SMS_SENT_MESSAGE)

            return {"status": "success", "quote": quote, "sms_message_id": message_id}

        except Exception as e:
            logger.error(f"Error handling {COMMAND_INSPIRE} command: {e}", exc_info=True)
            await report_to_user(ctx, user_id, INSPIRE_ERROR_MESSAGE)

            return {
                "status": "partial" if posted else "error",
                "quote": quote,
                "error": str(e)
            }
