"""
Day-Rollover Detector - refreshes "due today" tasks after midnight.
"""

import asyncio
import datetime
import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from focushud.services.task_service import TaskService

logger = logging.getLogger(__name__)

CHECK_INTERVAL_MS = 1000


class DayRolloverDetector(QObject):
    """
    Compares the local date with the last one seen on every tick.

    The only path that invalidates the task cache before its TTL runs out.
    """

    day_changed = Signal(object)  # the new datetime.date

    def __init__(self, tasks: TaskService,
                 today: Callable[[], datetime.date] = datetime.date.today):
        super().__init__()
        self.tasks = tasks
        self._today = today
        self.last_date = today()

        self.timer = QTimer()
        self.timer.timeout.connect(self.check)

    def start(self, interval_ms: int = CHECK_INTERVAL_MS):
        self.timer.start(interval_ms)

    def stop(self):
        self.timer.stop()

    def check(self) -> Optional[asyncio.Task]:
        """
        One tick.

        Returns:
            The scheduled refresh when the date changed, else None
        """
        today = self._today()
        if today == self.last_date:
            return None

        logger.info(f"Day changed from {self.last_date} to {today}; refreshing tasks")
        self.last_date = today
        self.tasks.invalidate()
        self.day_changed.emit(today)
        if not self.tasks.is_enabled:
            return None
        return self.tasks.request_refresh(force=True)
