"""
app/flow/machine.py

Purpose: Subscription state machine entry points

- One method per command flow, plus the confirm extension point
- Holds the injected collaborators (FlowContext)
- Optional per-user serialization of flows

Without serialization, flows for the same user interleave at every await
and the last store write wins.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict
from weakref import WeakValueDictionary

from app.flow.context import FlowContext
from app.flow.states import SubscriptionRecord
from app.flow.handlers.inspire import handle_inspire
from app.flow.handlers.subscribe import handle_subscribe
from app.flow.handlers.unsubscribe import handle_unsubscribe
from app.flow.handlers.confirm import handle_confirm


class SubscriptionStateMachine:

    def __init__(self, ctx: FlowContext, serialize_user_mutations: bool = False):
        self.ctx = ctx
        self.serialize_user_mutations = serialize_user_mutations
        self._locks: "WeakValueDictionary[str, asyncio.Lock]" = WeakValueDictionary()

    @asynccontextmanager
    async def _user_scope(self, user_id: str):
        if not self.serialize_user_mutations:
            yield
            return

        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        async with lock:
            yield

    async def handle_inspire(self, user_id: str, channel: str) -> Dict[str, Any]:
        async with self._user_scope(user_id):
            return await handle_inspire(self.ctx, user_id, channel)

    async def handle_subscribe(self, user_id: str) -> Dict[str, Any]:
        async with self._user_scope(user_id):
            return await handle_subscribe(self.ctx, user_id)

    async def handle_unsubscribe(self, user_id: str) -> Dict[str, Any]:
        async with self._user_scope(user_id):
            return await handle_unsubscribe(self.ctx, user_id)

    async def confirm(self, user_id: str) -> SubscriptionRecord:
        async with self._user_scope(user_id):
            return await handle_confirm(self.ctx, user_id)

    async def get_record(self, user_id: str) -> SubscriptionRecord:
        """Current record, with UNSET standing in for a missing one."""
        record = await self.ctx.store.get(user_id)
        return record if record is not None else SubscriptionRecord.unset(user_id)
