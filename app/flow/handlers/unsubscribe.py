"""
app/flow/handlers/unsubscribe.py

Handles: !unsubscribe

- Removes a PENDING or CONFIRMED record
- Users without a record are told they are not subscribed
"""

from typing import Dict, Any

from app.flow.context import FlowContext
from app.flow.handlers.common import report_to_user
from app.core.logging import get_logger, LogContext
from utils.constants import (
    COMMAND_UNSUBSCRIBE,
    UNSUBSCRIBED_MESSAGE,
    NOT_SUBSCRIBED_MESSAGE,
    UNSUBSCRIBE_ERROR_MESSAGE,
)

logger = get_logger(__name__)


async def handle_unsubscribe(ctx: FlowContext, user_id: str) -> Dict[str, Any]:
    with LogContext(user_id=user_id, command=COMMAND_UNSUBSCRIBE):
        try:
            record = await ctx.store.get(user_id)

            if record is None:
                await ctx.gateway.send_direct(user_id, NOT_SUBSCRIBED_MESSAGE)
                return {"status": "not_subscribed"}

            await ctx.store.delete(user_id)
            await ctx.gateway.send_direct(user_id, UNSUBSCRIBED_MESSAGE)
            logger.info(
                f"Phone number {record.phone_number} for user {user_id} has been unsubscribed."
            )

            return {"status": "unsubscribed", "phone_number": record.phone_number}

        except Exception as e:
            logger.error(f"Error handling {COMMAND_UNSUBSCRIBE} command: {e}", exc_info=True)
            await report_to_user(ctx, user_id, UNSUBSCRIBE_ERROR_MESSAGE)

            return {"status": "error", "error": str(e)}
