"""
Pytest configuration and fixtures.
"""

import sys
import asyncio
import datetime
from pathlib import Path
from typing import List, Optional
import pytest

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from PySide6.QtCore import QCoreApplication

from focushud.domain.models import Project, Task, TimeEntry
from focushud.infra.http import SyncError
from focushud.services.background import BackgroundRunner


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """QObject/QTimer based services need a Qt application instance"""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class MutableClock:
    """Injectable UTC clock that only moves when told to"""

    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


class FakeTogglClient:
    """In-memory stand-in for TogglClient with the same best-effort contract"""

    def __init__(self, clock: MutableClock, workspace_id: Optional[int] = 42,
                 current: Optional[TimeEntry] = None):
        self.clock = clock
        self.workspace_id = workspace_id
        self.current = current
        self.project_list: List[Project] = []
        self.start_ok = True
        self.start_gate: Optional[asyncio.Event] = None
        self.next_id = 1000
        self.calls = []
        self.last_error: Optional[SyncError] = None

    async def default_workspace(self):
        self.calls.append(("default_workspace",))
        return self.workspace_id

    async def current_entry(self):
        self.calls.append(("current_entry",))
        return self.current

    async def start(self, description, workspace_id, project_id=None):
        self.calls.append(("start", description, workspace_id, project_id))
        if self.start_gate is not None:
            await self.start_gate.wait()
        if not self.start_ok:
            self.last_error = SyncError.TRANSPORT
            return False
        self.last_error = None
        self.current = TimeEntry(
            id=self.next_id, workspace_id=workspace_id, description=description,
            start=self.clock(), duration=-1, project_id=project_id,
        )
        self.next_id += 1
        return True

    async def stop(self, entry_id, workspace_id):
        self.calls.append(("stop", entry_id, workspace_id))
        if self.current is not None and self.current.id == entry_id:
            self.current = None
            self.last_error = None
            return True
        self.last_error = SyncError.HTTP_STATUS
        return False

    async def projects(self, workspace_id):
        self.calls.append(("projects", workspace_id))
        return list(self.project_list)

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


class FakeClickUpClient:
    """In-memory stand-in for ClickUpClient"""

    def __init__(self, tasks: Optional[List[Task]] = None):
        self.tasks = tasks or []
        self.fail = False
        self.gate: Optional[asyncio.Event] = None
        self.requests = []
        self.last_error: Optional[SyncError] = None

    async def try_fetch_tasks(self, list_id, due_today_only=False, today=None):
        self.requests.append((list_id, due_today_only, today))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            self.last_error = SyncError.TRANSPORT
            return None
        return list(self.tasks)

    async def fetch_tasks(self, list_id, due_today_only=False, today=None):
        tasks = await self.try_fetch_tasks(list_id, due_today_only, today)
        return tasks if tasks is not None else []


@pytest.fixture
def clock():
    return MutableClock(datetime.datetime(2026, 3, 2, 9, 0, 0, tzinfo=datetime.timezone.utc))


@pytest.fixture
def runner():
    return BackgroundRunner()


@pytest.fixture
def toggl(clock):
    return FakeTogglClient(clock)


@pytest.fixture
def sample_tasks():
    return [
        Task(id="t1", name="Write release notes"),
        Task(id="t2", name="Review pull request"),
    ]


@pytest.fixture
def clickup(sample_tasks):
    return FakeClickUpClient(sample_tasks)
