"""
app/flow/states.py

Purpose: Subscription phone states

- Enum for each phone state (UNSET, PENDING, CONFIRMED)
- SubscriptionRecord: the per-user record the flows read and write
- Single source of truth for allowed transitions
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass


class PhoneState(str, Enum):
    """
    Status of a user's SMS subscription.
    """

    UNSET = "UNSET"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"


class SubscriptionEvent(str, Enum):
    """
    Events that move a subscription record between states.
    """

    SUBSCRIBE = "subscribe"
    CONFIRM = "confirm"
    UNSUBSCRIBE = "unsubscribe"


@dataclass(frozen=True)
class SubscriptionRecord:
    """
    A user's subscription as seen by the flows.

    UNSET records are never stored; the store returns None for them and
    SubscriptionRecord.unset() stands in where a value is needed.
    """
    user_id: str
    state: PhoneState
    phone_number: Optional[str] = None

    def __post_init__(self):
        if self.state == PhoneState.UNSET and self.phone_number is not None:
            raise ValueError("UNSET record cannot carry a phone number")
        if self.state != PhoneState.UNSET and not self.phone_number:
            raise ValueError(f"{self.state.value} record requires a phone number")

    @classmethod
    def unset(cls, user_id: str) -> "SubscriptionRecord":
        return cls(user_id=user_id, state=PhoneState.UNSET)

    @classmethod
    def pending(cls, user_id: str, phone_number: str) -> "SubscriptionRecord":
        return cls(user_id=user_id, state=PhoneState.PENDING, phone_number=phone_number)

    @classmethod
    def confirmed(cls, user_id: str, phone_number: str) -> "SubscriptionRecord":
        return cls(user_id=user_id, state=PhoneState.CONFIRMED, phone_number=phone_number)

    @property
    def is_confirmed(self) -> bool:
        return self.state == PhoneState.CONFIRMED


# Valid transitions per event. Subscribing always lands in PENDING,
# overwriting whatever was there.
STATE_TRANSITIONS: Dict[SubscriptionEvent, Dict[PhoneState, List[PhoneState]]] = {
    SubscriptionEvent.SUBSCRIBE: {
        PhoneState.UNSET: [PhoneState.PENDING],
        PhoneState.PENDING: [PhoneState.PENDING],
        PhoneState.CONFIRMED: [PhoneState.PENDING],
    },
    SubscriptionEvent.CONFIRM: {
        PhoneState.PENDING: [PhoneState.CONFIRMED],
    },
    SubscriptionEvent.UNSUBSCRIBE: {
        PhoneState.PENDING: [PhoneState.UNSET],
        PhoneState.CONFIRMED: [PhoneState.UNSET],
    },
}


def state_of(record: Optional[SubscriptionRecord]) -> PhoneState:
    """State of a possibly-missing record."""
    return record.state if record is not None else PhoneState.UNSET


def is_valid_transition(
    event: SubscriptionEvent,
    from_state: PhoneState,
    to_state: PhoneState
) -> bool:
    """
    Checks if a state transition is valid.

    Args:
        event: What is driving the change
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    allowed = STATE_TRANSITIONS.get(event, {}).get(from_state, [])
    return to_state in allowed
