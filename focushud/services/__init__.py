"""Services layer - Business logic"""

from .background import BackgroundRunner
from .task_cache import TaskCache, TASK_CACHE_TTL
from .task_service import TaskService
from .timer_service import TimerService, format_elapsed
from .session_reconciler import SessionReconciler
from .day_rollover import DayRolloverDetector

__all__ = [
    "BackgroundRunner", "TaskCache", "TASK_CACHE_TTL", "TaskService",
    "TimerService", "format_elapsed", "SessionReconciler", "DayRolloverDetector",
]
