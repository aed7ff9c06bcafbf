"""
app/api/subscriptions.py

Purpose: Subscription admin endpoints

- Inspect a user's subscription state
- Confirm a pending subscription once the carrier confirmation is known
- Guarded by the X-Admin-Token header
"""

from fastapi import APIRouter, Depends, Header, Request
from typing import Optional

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConfigurationError
from app.core.logging import get_logger
from app.flow.machine import SubscriptionStateMachine
from app.schemas.response import SubscriptionResponse

logger = get_logger(__name__)
router = APIRouter()


def verify_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    """
    Requires X-Admin-Token to match ADMIN_TOKEN.
    """
    if not settings.ADMIN_TOKEN:
        # Misconfiguration; refuse rather than expose subscriber numbers
        raise ConfigurationError("ADMIN_TOKEN not configured")

    if x_admin_token != settings.ADMIN_TOKEN:
        raise AuthenticationError("Invalid admin token")


def get_machine(request: Request) -> SubscriptionStateMachine:
    return request.app.state.machine


@router.get("/subscriptions/{user_id}", response_model=SubscriptionResponse)
async def get_subscription(
    user_id: str,
    machine: SubscriptionStateMachine = Depends(get_machine),
    _: None = Depends(verify_admin),
):
    """Current subscription state (UNSET if the user has none)."""
    record = await machine.get_record(user_id)
    return SubscriptionResponse.from_record(record)


@router.post("/subscriptions/{user_id}/confirm", response_model=SubscriptionResponse)
async def confirm_subscription(
    user_id: str,
    machine: SubscriptionStateMachine = Depends(get_machine),
    _: None = Depends(verify_admin),
):
    """
    Promotes a PENDING subscription to CONFIRMED.

    Returns 409 if the user has no pending subscription.
    """
    record = await machine.confirm(user_id)
    logger.info(f"Subscription for {user_id} confirmed via admin API")
    return SubscriptionResponse.from_record(record)
