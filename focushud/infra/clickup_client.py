"""
ClickUp client - the task-list side of the sync.
"""

import datetime
import logging
from typing import List, Optional, NamedTuple

import httpx
from pydantic import ValidationError

from focushud.domain.models import Task
from focushud.infra.http import ApiClient, DEFAULT_TIMEOUT, SyncError

logger = logging.getLogger(__name__)

CLICKUP_BASE_URL = "https://api.clickup.com/api/v2/"


def _epoch_millis(moment: datetime.datetime) -> int:
    return int(moment.timestamp() * 1000)


class DueWindow(NamedTuple):
    """
    Due-date window of one local calendar day, in epoch milliseconds.

    ``start`` is local midnight, ``end`` the last millisecond of the day.
    A due date belongs to the day when ``start <= due < end + 1``.
    """
    start: int
    end: int

    @classmethod
    def for_day(cls, day: datetime.date) -> "DueWindow":
        """Window of ``day`` in the local time zone"""
        midnight = datetime.datetime.combine(day, datetime.time.min).astimezone()
        next_midnight = datetime.datetime.combine(
            day + datetime.timedelta(days=1), datetime.time.min
        ).astimezone()
        return cls(_epoch_millis(midnight), _epoch_millis(next_midnight) - 1)

    def contains(self, due_millis: int) -> bool:
        return self.start <= due_millis < self.end + 1

    def as_params(self) -> dict:
        """ClickUp's due_date_gt / due_date_lt are exclusive bounds"""
        return {"due_date_gt": self.start - 1, "due_date_lt": self.end + 1}


class ClickUpClient(ApiClient):
    """Wraps the ClickUp v2 REST API for a single API token"""

    name = "ClickUp"

    def __init__(self, api_token: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 base_url: str = CLICKUP_BASE_URL):
        # ClickUp takes the raw token, no scheme
        super().__init__(
            base_url,
            headers={"Authorization": api_token},
            timeout=timeout,
            transport=transport,
        )

    async def fetch_tasks(self, list_id: str, due_today_only: bool = False,
                          today: Optional[datetime.date] = None) -> List[Task]:
        """
        Fetch the open tasks of a list, most recently updated first.

        Returns:
            Tasks in server order. Empty when there are none OR the fetch failed.
        """
        tasks = await self.try_fetch_tasks(list_id, due_today_only, today)
        return tasks if tasks is not None else []

    async def try_fetch_tasks(self, list_id: str, due_today_only: bool = False,
                              today: Optional[datetime.date] = None) -> Optional[List[Task]]:
        """
        Fetch the open tasks of a list, most recently updated first.

        Args:
            list_id: ClickUp list id
            due_today_only: Only tasks due on the local calendar day
            today: The day to filter on (defaults to the local date)

        Returns:
            Tasks in server order (possibly empty), or None when the fetch failed
        """
        params = {
            "archived": "false",
            "page": 0,
            "order_by": "updated",
            "reverse": "true",
            "include_closed": "false",
        }
        if due_today_only:
            window = DueWindow.for_day(today or datetime.date.today())
            params.update(window.as_params())

        result = await self._request("GET", f"list/{list_id}/task", params=params)
        if not result.ok:
            return None
        data = result.data
        if not isinstance(data, dict):
            return []

        raw_tasks = data.get("tasks") or []
        try:
            tasks = [Task.model_validate(item) for item in raw_tasks]
        except ValidationError as e:
            self._fail(SyncError.MALFORMED, f"tasks: {e.error_count()} validation errors")
            return None

        logger.debug(f"Fetched {len(tasks)} tasks from list {list_id}")
        return tasks
