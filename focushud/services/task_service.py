"""
Task Service - serves candidate tasks from the cache or ClickUp.

Architecture Decision: Single in-flight fetch
The day check, the startup reconciliation and the refresh button can all
ask for tasks at the same time. Only one fetch per calendar day runs; later
requests for the same day join it, so the cache is written once and the
loading signal stays consistent. A fetch that finishes after midnight is
never cached: its "due today" answer belongs to yesterday.
"""

import asyncio
import datetime
import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from focushud.domain.models import Task, utc_now
from focushud.infra.clickup_client import ClickUpClient
from focushud.services.background import BackgroundRunner
from focushud.services.task_cache import TaskCache

logger = logging.getLogger(__name__)

NO_TASKS_TEXT = "No active tasks"


class TaskService(QObject):
    """
    Cache-first access to the ClickUp task list.
    """

    # Signals
    tasks_changed = Signal(object)  # List[Task] after a completed fetch
    loading_changed = Signal(bool)  # True while a fetch is in flight

    def __init__(self, client: Optional[ClickUpClient], list_id: Optional[str],
                 runner: BackgroundRunner, cache: Optional[TaskCache] = None,
                 due_today_only: bool = True,
                 clock: Callable[[], datetime.datetime] = utc_now,
                 today: Callable[[], datetime.date] = datetime.date.today):
        super().__init__()
        self.client = client
        self.list_id = list_id
        self.runner = runner
        self.cache = cache if cache is not None else TaskCache()
        self.due_today_only = due_today_only
        self._clock = clock
        self._today = today
        self._inflight: Optional[asyncio.Task] = None
        self._inflight_day: Optional[datetime.date] = None

    @property
    def is_enabled(self) -> bool:
        return self.client is not None and bool(self.list_id)

    @property
    def is_loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def get_tasks(self, force: bool = False) -> List[Task]:
        """
        Get the candidate tasks.

        Args:
            force: Skip the freshness check and go to ClickUp

        Returns:
            Cached tasks while fresh, otherwise the result of a fetch.
            Empty when there are no tasks or the fetch failed.
        """
        if not self.is_enabled:
            return []

        if not force:
            cached = self.cache.get(self._clock())
            if cached is not None:
                logger.debug("Serving tasks from cache")
                return cached

        day = self._today()
        if self.is_loading and self._inflight_day == day:
            logger.debug("Task fetch already in flight, joining it")
        else:
            if self.is_loading:
                logger.info(f"Fetch in flight is for {self._inflight_day}; starting one for {day}")
            else:
                self.loading_changed.emit(True)
            self._inflight_day = day
            self._inflight = self.runner.spawn(self._fetch(day))
        return await asyncio.shield(self._inflight)

    async def _fetch(self, day: datetime.date) -> List[Task]:
        try:
            tasks = await self.client.try_fetch_tasks(self.list_id, self.due_today_only, today=day)
            if tasks is None:
                # Keep what we had; a failed fetch must not clobber it
                return []
            if day != self._today():
                logger.info(f"Day changed during the fetch; not caching tasks for {day}")
                return tasks
            self.cache.put(tasks, self._clock())
            self.tasks_changed.emit(tasks)
            return tasks
        finally:
            if self._inflight is asyncio.current_task():
                self.loading_changed.emit(False)

    def request_refresh(self, force: bool = True) -> asyncio.Task:
        """Schedule a refresh without waiting for it (for Qt slots)"""
        return self.runner.spawn(self.get_tasks(force=force))

    async def next_task_name(self) -> str:
        """Name of the task to offer in the idle display"""
        tasks = await self.get_tasks()
        if tasks:
            return tasks[0].name
        return NO_TASKS_TEXT

    def invalidate(self):
        self.cache.invalidate()
