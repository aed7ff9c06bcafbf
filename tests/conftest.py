import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from app.core.exceptions import (
    ChatDeliveryError,
    DeliveryRejectedError,
    SourceUnavailableError,
    StoreUnavailableError,
)
from app.flow.context import FlowContext
from app.flow.machine import SubscriptionStateMachine
from app.flow.replies import ReplyRegistry
from app.flow.states import SubscriptionRecord

TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:quotes"


class CallLog:
    """Ordered record of adapter calls across all fakes."""

    def __init__(self):
        self.calls: List[Tuple] = []

    def add(self, *call):
        self.calls.append(call)

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeStore:
    def __init__(self, log: CallLog):
        self.log = log
        self.records: Dict[str, SubscriptionRecord] = {}
        self.fail_on = set()

    def _check(self, op):
        if op in self.fail_on:
            raise StoreUnavailableError(f"store {op} failed")

    async def get(self, user_id):
        self.log.add("store.get", user_id)
        self._check("get")
        return self.records.get(user_id)

    async def put(self, record):
        self.log.add("store.put", record)
        self._check("put")
        self.records[record.user_id] = record

    async def delete(self, user_id):
        self.log.add("store.delete", user_id)
        self._check("delete")
        self.records.pop(user_id, None)


class FakeNotifier:
    def __init__(self, log: CallLog):
        self.log = log
        self.fail_send = False
        self.fail_subscribe = False

    async def send(self, phone_number, text):
        self.log.add("notifier.send", phone_number, text)
        if self.fail_send:
            raise DeliveryRejectedError("publish rejected")
        return f"msg-{len(self.log.calls)}"

    async def subscribe(self, phone_number, topic_arn):
        self.log.add("notifier.subscribe", phone_number, topic_arn)
        if self.fail_subscribe:
            raise DeliveryRejectedError("invalid phone number")
        return "pending confirmation"


class FakeQuotes:
    def __init__(self, log: CallLog):
        self.log = log
        self.quote = "Stay hungry. -Steve Jobs"
        self.fail = False

    async def fetch_quote(self):
        self.log.add("quotes.fetch")
        if self.fail:
            raise SourceUnavailableError("quote API down")
        return self.quote


class FakeGateway:
    def __init__(self, log: CallLog, replies: ReplyRegistry):
        self.log = log
        self.replies = replies
        self.fail_channels = set()

    async def post_to_channel(self, channel, text):
        self.log.add("gateway.post", channel, text)
        if channel in self.fail_channels:
            raise ChatDeliveryError(f"cannot post to {channel}")
        return f"SM{len(self.log.calls)}"

    async def open_direct_channel(self, user_id):
        return f"dm:{user_id}"

    async def send_direct(self, user_id, text):
        return await self.post_to_channel(await self.open_direct_channel(user_id), text)

    async def await_single_reply(self, channel, user_id, timeout):
        self.log.add("gateway.await_reply", channel, user_id)
        return await self.replies.wait_for_reply(channel, user_id, timeout)

    def posts_to(self, channel) -> List[str]:
        return [call[2] for call in self.log.calls if call[0] == "gateway.post" and call[1] == channel]


class Harness:
    """Fakes plus a state machine wired to them."""

    def __init__(self, serialize: bool = False, reply_timeout: float = 1.0):
        self.log = CallLog()
        self.replies = ReplyRegistry()
        self.store = FakeStore(self.log)
        self.notifier = FakeNotifier(self.log)
        self.quotes = FakeQuotes(self.log)
        self.gateway = FakeGateway(self.log, self.replies)
        self.ctx = FlowContext(
            store=self.store,
            notifier=self.notifier,
            quotes=self.quotes,
            gateway=self.gateway,
            topic_arn=TOPIC_ARN,
            reply_timeout=reply_timeout,
        )
        self.machine = SubscriptionStateMachine(self.ctx, serialize_user_mutations=serialize)

    async def subscribe_with_reply(self, user_id: str, reply: Optional[str]):
        """Runs !subscribe and answers the prompt with `reply` (None = never answer)."""
        task = asyncio.create_task(self.machine.handle_subscribe(user_id))
        if reply is not None:
            await wait_until(lambda: self.replies.has_waiter(f"dm:{user_id}", user_id))
            self.replies.offer(f"dm:{user_id}", user_id, reply)
        return await task


async def wait_until(condition, attempts: int = 200):
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


@pytest.fixture
def harness():
    return Harness()


@pytest.fixture
def run():
    return asyncio.run
