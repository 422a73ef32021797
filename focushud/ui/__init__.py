"""UI layer - PySide6 host window"""

from .hud_app import FocusHudApp
from .hud_window import HudWindow

__all__ = ["FocusHudApp", "HudWindow"]
