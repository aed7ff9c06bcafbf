"""
app/services/subscription_store.py

Purpose: Subscription persistence

- get / put / delete a SubscriptionRecord keyed by chat user id
- Encodes PENDING as a "pending:" prefix on the stored phone number
- Maps driver failures to StoreUnavailableError
"""

from datetime import datetime, timezone
from typing import Optional

from pymongo.errors import PyMongoError

from app.core.exceptions import StoreUnavailableError
from app.core.logging import get_logger
from app.flow.states import PhoneState, SubscriptionRecord

logger = get_logger(__name__)

PENDING_MARKER = "pending:"


def encode_phone_number(record: SubscriptionRecord) -> str:
    """Stored form of a record's phone number."""
    if record.state == PhoneState.PENDING:
        return f"{PENDING_MARKER}{record.phone_number}"
    if record.state == PhoneState.CONFIRMED:
        if record.phone_number.startswith(PENDING_MARKER):
            raise ValueError(f"Confirmed phone number cannot start with {PENDING_MARKER!r}")
        return record.phone_number
    raise ValueError("UNSET records are not stored")


def decode_phone_number(user_id: str, stored: Optional[str]) -> Optional[SubscriptionRecord]:
    """Record for a stored phone number, or None when nothing is stored."""
    if not stored:
        return None
    if stored.startswith(PENDING_MARKER):
        return SubscriptionRecord.pending(user_id, stored[len(PENDING_MARKER):])
    return SubscriptionRecord.confirmed(user_id, stored)


class SubscriptionStore:
    """
    MongoDB-backed store holding one document per user.
    """

    def __init__(self, collection):
        self._collection = collection

    async def get(self, user_id: str) -> Optional[SubscriptionRecord]:
        """
        Reads a user's record.

        Returns:
            The record, or None if the user is not subscribed
        """
        try:
            document = await self._collection.find_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error(f"Could not get phone number for {user_id}: {e}")
            raise StoreUnavailableError(f"Could not read subscription for {user_id}") from e

        if document is None:
            return None
        return decode_phone_number(user_id, document.get("phone_number"))

    async def put(self, record: SubscriptionRecord) -> None:
        """
        Writes a record, replacing any existing one for the same user.
        """
        document = {
            "user_id": record.user_id,
            "phone_number": encode_phone_number(record),
            "updated_at": datetime.now(timezone.utc),
        }
        try:
            await self._collection.replace_one(
                {"user_id": record.user_id},
                document,
                upsert=True
            )
        except PyMongoError as e:
            logger.error(f"Could not save phone number for {record.user_id}: {e}")
            raise StoreUnavailableError(f"Could not save subscription for {record.user_id}") from e

    async def delete(self, user_id: str) -> None:
        try:
            await self._collection.delete_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error(f"Could not delete phone number for {user_id}: {e}")
            raise StoreUnavailableError(f"Could not delete subscription for {user_id}") from e
