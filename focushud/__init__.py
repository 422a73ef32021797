"""FocusHUD - single-task overlay synced with Toggl Track and ClickUp"""

__version__ = "0.1.0"
