"""
app/flow/handlers/confirm.py

Handles: PENDING -> CONFIRMED

Carrier confirmation happens outside the chat, so no command reaches this
handler. It is driven by the subscription admin API.
"""

from app.core.exceptions import InvalidTransitionError
from app.flow.context import FlowContext
from app.flow.states import (
    PhoneState,
    SubscriptionEvent,
    SubscriptionRecord,
    is_valid_transition,
    state_of,
)
from app.core.logging import get_logger, LogContext

logger = get_logger(__name__)


async def handle_confirm(ctx: FlowContext, user_id: str) -> SubscriptionRecord:
    """
    Promotes a pending subscription to confirmed.

    Raises:
        InvalidTransitionError: If the user has no pending subscription
        StoreUnavailableError: If the store cannot be read or written
    """
    with LogContext(user_id=user_id, command=SubscriptionEvent.CONFIRM.value):
        record = await ctx.store.get(user_id)
        current = state_of(record)

        if not is_valid_transition(SubscriptionEvent.CONFIRM, current, PhoneState.CONFIRMED):
            logger.warning(f"Cannot confirm subscription in state {current.value}")
            raise InvalidTransitionError(
                f"Cannot confirm subscription in state {current.value}",
                details={"user_id": user_id, "state": current.value}
            )

        confirmed = SubscriptionRecord.confirmed(user_id, record.phone_number)
        await ctx.store.put(confirmed)
        logger.info(f"Subscription confirmed for {record.phone_number}")

        return confirmed
