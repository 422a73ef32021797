"""
Timer Service - the local play/pause state machine.

Architecture Decision: Observer Pattern (Qt Signals)
The service emits signals when state changes, keeping it decoupled from UI.

Architecture Decision: Local clock first
The start instant is taken locally before Toggl is contacted, so the display
starts at once no matter how slow the network is. Toggl is told afterwards,
in the background, and a failure there never rolls the local state back.
"""

import asyncio
import datetime
import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from focushud.domain.models import (
    IdleState, RunningState, SessionState, TimeEntry, utc_now
)
from focushud.infra.http import SyncError
from focushud.infra.toggl_client import TogglClient
from focushud.services.background import BackgroundRunner

logger = logging.getLogger(__name__)

IDLE_DISPLAY = "00:00"
TICK_INTERVAL_MS = 1000


def format_elapsed(elapsed: datetime.timedelta) -> str:
    """
    Format elapsed time for the HUD.

    ``H:MM:SS`` from one hour on, ``MM:SS`` below.
    """
    total_seconds = max(0, int(elapsed.total_seconds()))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours >= 1:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


class TimerService(QObject):
    """
    Owns the SessionState. Nothing else mutates it.

    Emits signals when things change (Observer Pattern).
    """

    # Signals
    tick = Signal(str, int)  # (formatted_time, total_seconds)
    state_changed = Signal(bool)  # is_running
    session_started = Signal(str)  # description
    session_stopped = Signal()
    entry_linked = Signal(object)  # Toggl entry id, may exceed 32 bits

    def __init__(self, client: Optional[TogglClient], runner: BackgroundRunner,
                 clock: Callable[[], datetime.datetime] = utc_now):
        super().__init__()
        self.client = client
        self.runner = runner
        self._clock = clock
        self.workspace_id: Optional[int] = None
        self._state: SessionState = IdleState()

        # Internal timer that fires every second while running
        self.timer = QTimer()
        self.timer.timeout.connect(self._on_tick)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    def bind_workspace(self, workspace_id: Optional[int]):
        """Set the Toggl workspace used for start/stop"""
        self.workspace_id = workspace_id

    def _can_sync(self) -> bool:
        return self.client is not None and self.workspace_id is not None

    def elapsed(self) -> datetime.timedelta:
        """Elapsed time of the running session (zero when idle)"""
        if not isinstance(self._state, RunningState):
            return datetime.timedelta(0)
        return self._clock() - self._state.start_instant

    def display_text(self) -> str:
        if not self.is_running:
            return IDLE_DISPLAY
        return format_elapsed(self.elapsed())

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def toggle(self, description: str, project_id: Optional[int] = None) -> Optional[asyncio.Task]:
        """Play when idle, pause when running"""
        if self.is_running:
            return self.pause()
        return self.play(description, project_id)

    def play(self, description: str, project_id: Optional[int] = None) -> Optional[asyncio.Task]:
        """
        Idle -> Running.

        Returns:
            The background task pushing the start to Toggl, or None when
            there is nothing to push (already running, or sync not configured)
        """
        if self.is_running:
            return None

        session = RunningState(start_instant=self._clock(), description=description)
        self._set_state(session)
        self.session_started.emit(description)
        logger.info(f"Session started: {description!r}")

        if not self._can_sync():
            return None
        return self.runner.spawn(
            self._push_start(session, description, self.workspace_id, project_id)
        )

    def pause(self) -> Optional[asyncio.Task]:
        """
        Running -> Idle.

        The local clock stops immediately. The remote entry (if its id was
        captured) is stopped in the background and forgotten either way.
        """
        if not isinstance(self._state, RunningState):
            return None

        session = self._state
        self._set_state(IdleState())
        self.session_stopped.emit()
        logger.info(f"Session stopped after {format_elapsed(self._clock() - session.start_instant)}")

        if session.remote_entry_id is None:
            logger.info(f"No remote entry to stop ({SyncError.INCONSISTENT.value}); local only")
            return None
        if not self._can_sync():
            return None
        return self.runner.spawn(self._push_stop(session.remote_entry_id, self.workspace_id))

    def adopt(self, entry: TimeEntry):
        """
        Resume a session that is already running remotely.

        Elapsed time continues from the remote start, it is never reset.
        """
        session = RunningState(
            start_instant=entry.start,
            description=entry.description or "",
            remote_entry_id=entry.id,
        )
        self._set_state(session)
        self.session_started.emit(session.description)
        self.entry_linked.emit(entry.id)
        logger.info(f"Resumed running entry {entry.id} started at {entry.start.isoformat()}")

    def shutdown(self):
        """Stop ticking; the remote entry keeps running and is resumed next start"""
        self.timer.stop()

    # ------------------------------------------------------------------
    # Remote side
    # ------------------------------------------------------------------

    async def _push_start(self, session: RunningState, description: str,
                          workspace_id: int, project_id: Optional[int]):
        if not await self.client.start(description, workspace_id, project_id):
            logger.warning("Toggl start failed; session keeps running locally only")
            return

        current = await self.client.current_entry()
        if current is None:
            logger.warning("Toggl start succeeded but the entry id could not be read")
            return

        if self._state is session:
            self._state = session.model_copy(update={"remote_entry_id": current.id})
            self.entry_linked.emit(current.id)
            logger.debug(f"Linked session to Toggl entry {current.id}")
        elif not self.is_running:
            # Paused before the id arrived: nothing will ever stop this entry otherwise
            logger.info(f"Stopping Toggl entry {current.id} of an already paused session")
            await self.client.stop(current.id, workspace_id)

    async def _push_stop(self, entry_id: int, workspace_id: int):
        if not await self.client.stop(entry_id, workspace_id):
            logger.warning(f"Toggl stop failed for entry {entry_id}; ignored")

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _set_state(self, state: SessionState):
        self._state = state
        if state.is_running:
            self.timer.start(TICK_INTERVAL_MS)
        else:
            self.timer.stop()
        self.state_changed.emit(state.is_running)
        self._on_tick()

    def _on_tick(self):
        """Called every second while running, and once on every transition"""
        self.tick.emit(self.display_text(), max(0, int(self.elapsed().total_seconds())))
