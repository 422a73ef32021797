"""
Fire-and-forget scheduling of network work.

Qt slots are synchronous; they schedule coroutines here instead of
awaiting them, so a tick or a click never blocks on the network.
"""

import asyncio
import logging
from typing import Coroutine, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundRunner:
    """Keeps a reference to every scheduled task until it finishes"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop
        self._pending: Set[asyncio.Task] = set()

    def spawn(self, coro: Coroutine) -> asyncio.Task:
        """Schedule ``coro`` on the loop and return its task"""
        loop = self.loop or asyncio.get_running_loop()
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task):
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", exc_info=task.exception())

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self):
        """Wait until nothing is pending, including work spawned meanwhile"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def cancel_all(self):
        for task in list(self._pending):
            task.cancel()
