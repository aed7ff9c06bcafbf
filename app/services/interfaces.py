"""
app/services/interfaces.py

Purpose: Contracts the subscription flows depend on

Concrete services (SubscriptionStore, NotificationService, QuoteService,
ChatGateway) satisfy these structurally, as do the in-memory doubles in tests.
"""

from typing import Optional, Protocol

from app.flow.states import SubscriptionRecord


class QuoteSource(Protocol):
    async def fetch_quote(self) -> str:
        """Raises SourceUnavailableError."""
        ...


class ConversationGateway(Protocol):
    async def post_to_channel(self, channel: str, text: str) -> str:
        """Raises ChatDeliveryError."""
        ...

    async def open_direct_channel(self, user_id: str) -> str:
        ...

    async def send_direct(self, user_id: str, text: str) -> str:
        ...

    async def await_single_reply(self, channel: str, user_id: str, timeout: float) -> str:
        """Raises ReplyTimeoutError."""
        ...


class Notifier(Protocol):
    async def send(self, phone_number: str, text: str) -> str:
        """Raises DeliveryRejectedError."""
        ...

    async def subscribe(self, phone_number: str, topic_arn: Optional[str]) -> str:
        """Raises DeliveryRejectedError."""
        ...


class RecordStore(Protocol):
    async def get(self, user_id: str) -> Optional[SubscriptionRecord]:
        """Raises StoreUnavailableError."""
        ...

    async def put(self, record: SubscriptionRecord) -> None:
        ...

    async def delete(self, user_id: str) -> None:
        ...
