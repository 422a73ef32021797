"""
Session Reconciler - derives local state from Toggl at startup.

Remote wins at startup: a running Toggl entry is adopted as the local
session. Local wins during an active session: a manual reconnect never
throws away a session that is running locally but unknown remotely.
"""

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from focushud.domain.models import Project, SessionState
from focushud.infra.toggl_client import TogglClient
from focushud.services.task_service import TaskService
from focushud.services.timer_service import TimerService

logger = logging.getLogger(__name__)

NO_DESCRIPTION_TEXT = "No Description"


class SessionReconciler(QObject):
    """
    Runs once at startup and again on every manual reconnect.
    """

    # Signals
    candidate_task = Signal(str)  # text to prefill the task name with
    projects_loaded = Signal(object)  # List[Project]
    reconciled = Signal(object)  # resulting SessionState

    def __init__(self, client: Optional[TogglClient], timer: TimerService,
                 tasks: TaskService):
        super().__init__()
        self.client = client
        self.timer = timer
        self.tasks = tasks
        self.projects: List[Project] = []

    async def reconcile(self) -> SessionState:
        """
        Bring the local session in line with Toggl.

        1. No workspace (no token, or Toggl unreachable): fetch nothing. A running
           session keeps the workspace it was bound to.
        2. A running remote entry: adopt it, elapsed continues from its start.
        3. Otherwise: Idle, and offer the next due-today task.
        """
        workspace_id = await self.client.default_workspace() if self.client else None
        if workspace_id is None:
            if self.timer.is_running:
                # The running entry still has to be stopped in its workspace
                logger.info(f"Toggl unreachable; keeping workspace {self.timer.workspace_id} "
                            f"for the running session")
            else:
                logger.info("No Toggl workspace; running without remote sync")
                self.timer.bind_workspace(None)
            return self._done()

        self.timer.bind_workspace(workspace_id)
        await self._load_projects(workspace_id)

        current = await self.client.current_entry()
        if current is not None and current.is_running:
            if self._already_tracking(current.id):
                logger.debug(f"Entry {current.id} is already the local session")
            else:
                self.timer.adopt(current)
                self.candidate_task.emit(current.description or NO_DESCRIPTION_TEXT)
            return self._done()

        if self.timer.is_running:
            logger.info("Local session is running but unknown to Toggl; keeping it")
            return self._done()

        name = await self.tasks.next_task_name()
        self.candidate_task.emit(name)
        return self._done()

    def _already_tracking(self, entry_id: int) -> bool:
        state = self.timer.state
        return state.is_running and state.remote_entry_id == entry_id

    async def _load_projects(self, workspace_id: int):
        self.projects = await self.client.projects(workspace_id)
        self.projects_loaded.emit(self.projects)

    def _done(self) -> SessionState:
        state = self.timer.state
        self.reconciled.emit(state)
        return state
