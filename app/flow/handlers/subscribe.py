"""
app/flow/handlers/subscribe.py

Handles: !subscribe

- Prompts the user for a phone number in a direct channel
- Waits for one reply (REPLY_TIMEOUT_SECONDS)
- Subscribes the number to the SNS topic, then stores it as PENDING

The store write comes after a successful SNS subscribe; any earlier failure
leaves the user's record untouched.
"""

from typing import Dict, Any

from app.flow.context import FlowContext
from app.flow.handlers.common import report_to_user
from app.flow.states import SubscriptionRecord
from app.core.logging import get_logger, LogContext
from utils.constants import (
    COMMAND_SUBSCRIBE,
    ASK_PHONE_NUMBER_MESSAGE,
    SUBSCRIPTION_PENDING_MESSAGE,
    SUBSCRIBE_ERROR_MESSAGE,
)

logger = get_logger(__name__)


async def handle_subscribe(ctx: FlowContext, user_id: str) -> Dict[str, Any]:
    """
    Runs the subscribe conversation for one command.

    Returns:
        Response dict with status and, on success, the pending phone number
    """
    with LogContext(user_id=user_id, command=COMMAND_SUBSCRIBE):
        try:
            channel = await ctx.gateway.open_direct_channel(user_id)
            await ctx.gateway.post_to_channel(channel, ASK_PHONE_NUMBER_MESSAGE)

            reply = await ctx.gateway.await_single_reply(channel, user_id, ctx.reply_timeout)
            phone_number = reply.strip()

            await ctx.notifier.subscribe(phone_number, ctx.topic_arn)
            await ctx.gateway.post_to_channel(channel, SUBSCRIPTION_PENDING_MESSAGE)

            # Overwrites any earlier record, confirmed or not
            await ctx.store.put(SubscriptionRecord.pending(user_id, phone_number))
            logger.info(f"Stored pending subscription for {phone_number}")

            return {"status": "pending", "phone_number": phone_number}

        except Exception as e:
            logger.error(f"Error handling {COMMAND_SUBSCRIBE} command: {e}", exc_info=True)
            await report_to_user(ctx, user_id, SUBSCRIBE_ERROR_MESSAGE)

            return {"status": "error", "error": str(e)}
