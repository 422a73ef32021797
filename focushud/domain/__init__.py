"""Domain layer - Pure business entities and logic"""

from .models import (
    Task, TimeEntry, Project, IdleState, RunningState, SessionState, utc_now, as_utc
)

__all__ = [
    "Task", "TimeEntry", "Project", "IdleState", "RunningState", "SessionState",
    "utc_now", "as_utc",
]
