"""
Task Cache - last fetched task list with a fixed time-to-live.
"""

import datetime
import logging
from typing import List, Optional, Sequence, Tuple

from focushud.domain.models import Task

logger = logging.getLogger(__name__)

TASK_CACHE_TTL = datetime.timedelta(minutes=15)


class TaskCache:
    """
    Holds the result of exactly one completed fetch, or nothing.

    The tasks and their fetch time live in a single tuple that ``put``
    replaces in one assignment, so a reader never sees a half update.
    """

    ttl = TASK_CACHE_TTL

    def __init__(self):
        self._snapshot: Optional[Tuple[Tuple[Task, ...], datetime.datetime]] = None

    def get(self, now: datetime.datetime) -> Optional[List[Task]]:
        """
        Get the cached tasks if they are still fresh at ``now``.

        Returns:
            The tasks, or None when empty, invalidated or older than the TTL
        """
        snapshot = self._snapshot
        if snapshot is None:
            return None
        tasks, fetched_at = snapshot
        if not tasks:
            return None
        if not (fetched_at <= now < fetched_at + self.ttl):
            logger.debug("Task cache expired")
            return None
        return list(tasks)

    def put(self, tasks: Sequence[Task], now: datetime.datetime):
        """Replace the cached tasks and the fetch timestamp"""
        self._snapshot = (tuple(tasks), now)

    def invalidate(self):
        """Force the next ``get`` to miss"""
        self._snapshot = None

    @property
    def fetched_at(self) -> Optional[datetime.datetime]:
        return self._snapshot[1] if self._snapshot else None
