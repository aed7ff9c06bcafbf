"""
app/flow/replies.py

Purpose: Single-reply collection

- A flow registers interest in the next message from one user on one channel
- The webhook offers each inbound message before command routing
- Waiters resolve with the reply text or fail with ReplyTimeoutError
"""

import asyncio
from typing import Dict, List, Tuple

from app.core.exceptions import ReplyTimeoutError
from app.core.logging import get_logger

logger = get_logger(__name__)

WaiterKey = Tuple[str, str]


class ReplyRegistry:
    """
    Futures keyed by (channel, expected sender).
    """

    def __init__(self):
        self._waiters: Dict[WaiterKey, List[asyncio.Future]] = {}

    def has_waiter(self, channel: str, user_id: str) -> bool:
        return bool(self._waiters.get((channel, user_id)))

    async def wait_for_reply(self, channel: str, user_id: str, timeout: float) -> str:
        """
        Suspends until `user_id` sends a message on `channel`.

        Raises:
            ReplyTimeoutError: If nothing arrives within `timeout` seconds
        """
        key = (channel, user_id)
        future = asyncio.get_running_loop().create_future()
        self._waiters.setdefault(key, []).append(future)

        try:
            return await asyncio.wait_for(future, timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.info(f"No reply from {user_id} on {channel} within {timeout}s")
            raise ReplyTimeoutError(f"No reply from {user_id} within {timeout} seconds") from e
        finally:
            waiters = self._waiters.get(key, [])
            if future in waiters:
                waiters.remove(future)
            if not waiters:
                self._waiters.pop(key, None)

    def offer(self, channel: str, user_id: str, text: str) -> bool:
        """
        Hands an inbound message to every waiter for (channel, user_id).

        Returns:
            True if at least one waiter took the message
        """
        delivered = False
        for future in self._waiters.get((channel, user_id), []):
            if not future.done():
                future.set_result(text)
                delivered = True
        return delivered
