"""
app/flow/dispatcher.py

Purpose: Central message dispatcher

- Receives normalized messages from the webhook
- Hands replies to flows that are waiting for them
- Routes !inspire / !subscribe / !unsubscribe to the state machine
- Runs each command as its own task so the webhook returns immediately
"""

import asyncio
from typing import Any, Dict, Optional, Set

from app.schemas.webhook import UnifiedMessage
from app.flow.machine import SubscriptionStateMachine
from app.flow.replies import ReplyRegistry
from app.core.logging import get_logger
from utils.constants import COMMAND_INSPIRE, COMMAND_SUBSCRIBE, COMMAND_UNSUBSCRIBE

logger = get_logger(__name__)


class CommandDispatcher:

    def __init__(self, machine: SubscriptionStateMachine, replies: ReplyRegistry):
        self.machine = machine
        self.replies = replies
        self._tasks: Set[asyncio.Task] = set()

    def match_command(self, text: str) -> Optional[str]:
        """Command at the start of `text`, if any."""
        for command in (COMMAND_INSPIRE, COMMAND_SUBSCRIBE, COMMAND_UNSUBSCRIBE):
            if text.startswith(command):
                return command
        return None

    async def dispatch_message(self, message: UnifiedMessage) -> Dict[str, Any]:
        """
        Main dispatcher for incoming chat messages

        Returns:
            {"status": "ignored" | "reply" | "dispatched", "command": ...}
        """
        if message.is_automated:
            return {"status": "ignored", "command": None}

        command = self.match_command(message.text)

        # Commands are always routed, even while a prompt is waiting
        if command is None and self.replies.offer(message.channel, message.user_id, message.text):
            logger.info(f"Reply from {message.user_id} delivered to waiting flow")
            return {"status": "reply", "command": None}

        if command is None:
            return {"status": "ignored", "command": None}

        logger.info(f"Dispatching {command} from {message.user_id}")

        if command == COMMAND_INSPIRE:
            coro = self.machine.handle_inspire(message.user_id, message.channel)
        elif command == COMMAND_SUBSCRIBE:
            coro = self.machine.handle_subscribe(message.user_id)
        else:
            coro = self.machine.handle_unsubscribe(message.user_id)

        self._spawn(coro, name=f"{command}:{message.user_id}")
        return {"status": "dispatched", "command": command}

    def _spawn(self, coro, name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Command task {task.get_name()} failed: {exc}", exc_info=exc)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self):
        """Waits for all running command tasks to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self):
        """Cancels running command tasks (e.g. subscribe prompts still waiting)."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(f"Cancelled {len(tasks)} command task(s)")
