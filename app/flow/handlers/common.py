"""
app/flow/handlers/common.py

Helpers shared by the flow handlers.
"""

from app.core.exceptions import InspireBotError
from app.core.logging import get_logger
from app.flow.context import FlowContext

logger = get_logger(__name__)


async def report_to_user(ctx: FlowContext, user_id: str, text: str) -> bool:
    """
    Sends a direct message reporting a flow outcome.

    The report is the last step of a failed flow, so a delivery failure
    here is logged rather than raised.

    Returns:
        True if the message was delivered
    """
    try:
        await ctx.gateway.send_direct(user_id, text)
        return True
    except InspireBotError as e:
        logger.error(f"Could not deliver report to {user_id}: {e.message}")
        return False
