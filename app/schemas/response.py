from pydantic import BaseModel
from typing import Optional, Any

from app.flow.states import PhoneState, SubscriptionRecord

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None

class SubscriptionResponse(BaseModel):
    """
    A user's subscription as returned by the admin API.
    """
    user_id: str
    state: PhoneState
    phone_number: Optional[str] = None

    @classmethod
    def from_record(cls, record: SubscriptionRecord) -> "SubscriptionResponse":
        return cls(user_id=record.user_id, state=record.state, phone_number=record.phone_number)
