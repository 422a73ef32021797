"""Infrastructure layer - Remote APIs and configuration"""

from .http import ApiClient, SyncError
from .toggl_client import TogglClient
from .clickup_client import ClickUpClient, DueWindow

__all__ = ["ApiClient", "SyncError", "TogglClient", "ClickUpClient", "DueWindow"]
