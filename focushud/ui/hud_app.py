"""
FocusHUD Application - wires settings, clients, services and the window.

Architecture Decision: Presentation Layer
This layer only handles UI logic. Business logic is delegated to Services.

The asyncio loop is advanced from a short Qt timer, so network calls run
while Qt keeps painting and ticking; no slot ever blocks on the network.
"""

import sys
import asyncio
import logging
from typing import Optional

from PySide6.QtWidgets import QApplication, QSystemTrayIcon, QMenu, QStyle
from PySide6.QtGui import QAction
from PySide6.QtCore import QTimer

from focushud.infra.config import Settings, get_settings
from focushud.infra.clickup_client import ClickUpClient
from focushud.infra.toggl_client import TogglClient
from focushud.services import (
    BackgroundRunner, TaskService, TimerService, SessionReconciler, DayRolloverDetector
)
from .hud_window import HudWindow

logger = logging.getLogger(__name__)

LOOP_PUMP_INTERVAL_MS = 10


class FocusHudApp:
    """
    Main application class managing the HUD window and the tray icon.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)  # Keep running when the HUD hides

        self.settings = settings or get_settings()

        # Event loop for async operations, advanced by _pump_loop
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.runner = BackgroundRunner(self.loop)

        # Clients (None when not configured; the app stays usable offline)
        timeout = self.settings.request_timeout
        self.toggl = (TogglClient(self.settings.toggl.api_token, timeout=timeout)
                      if self.settings.toggl_enabled else None)
        self.clickup = (ClickUpClient(self.settings.clickup.api_token, timeout=timeout)
                        if self.settings.clickup_enabled else None)

        # Services
        self.tasks = TaskService(
            self.clickup, self.settings.clickup.list_id, self.runner,
            due_today_only=self.settings.due_today_only,
        )
        self.timer = TimerService(self.toggl, self.runner)
        self.reconciler = SessionReconciler(self.toggl, self.timer, self.tasks)
        self.day_check = DayRolloverDetector(self.tasks)

        self.window = HudWindow()
        self._connect_signals()

        self.tray_icon = QSystemTrayIcon(
            self.app.style().standardIcon(QStyle.SP_ComputerIcon), self.app
        )
        self.tray_icon.setToolTip("FocusHUD")
        self.tray_icon.activated.connect(self._on_tray_icon_activated)
        self.setup_menu()
        self.tray_icon.show()

        self.pump = QTimer()
        self.pump.timeout.connect(self._pump_loop)
        self.pump.start(LOOP_PUMP_INTERVAL_MS)

        # Initialize on startup
        QTimer.singleShot(0, self._async_init)

    def _connect_signals(self):
        """Connect service signals to UI handlers"""
        self.timer.tick.connect(self.window.set_time)
        self.timer.tick.connect(self.update_tooltip)
        self.timer.state_changed.connect(self.window.set_running)
        self.tasks.tasks_changed.connect(self.window.set_tasks)
        self.tasks.loading_changed.connect(self.window.set_loading)
        self.reconciler.candidate_task.connect(self.window.set_task_name)
        self.reconciler.projects_loaded.connect(self.window.set_projects)

        self.window.toggle_requested.connect(self._on_toggle_requested)
        self.window.refresh_requested.connect(self._on_refresh_requested)

    def _pump_loop(self):
        """Run every ready asyncio callback once, then return to Qt"""
        self.loop.call_soon(self.loop.stop)
        self.loop.run_forever()

    def _async_init(self):
        """Async initialization tasks"""
        self.window.show()
        self.runner.spawn(self.reconciler.reconcile())
        self.day_check.start()

    def setup_menu(self):
        """Setup the system tray context menu"""
        menu = QMenu()

        show_action = QAction("Show HUD", self.app)
        show_action.triggered.connect(self._show_window)
        menu.addAction(show_action)

        reconnect_action = QAction("Reconnect", self.app)
        reconnect_action.triggered.connect(self._reconnect)
        menu.addAction(reconnect_action)

        menu.addSeparator()

        quit_action = QAction("Quit", self.app)
        quit_action.triggered.connect(self._quit_application)
        menu.addAction(quit_action)

        self.tray_icon.setContextMenu(menu)
        self._menu = menu

    def _on_toggle_requested(self, description: str, project_id):
        self.timer.toggle(description, project_id)

    def _on_refresh_requested(self):
        self.tasks.request_refresh(force=True)

    def _reconnect(self):
        self.runner.spawn(self.reconciler.reconcile())

    def update_tooltip(self, text: str, seconds: int):
        """Update the tray icon tooltip with current time"""
        self.tray_icon.setToolTip(f"FocusHUD {text}")

    def _show_window(self):
        self.window.show()
        self.window.activateWindow()
        self.window.raise_()

    def _on_tray_icon_activated(self, reason):
        """Handle tray icon click"""
        if reason == QSystemTrayIcon.Trigger:
            if self.window.isVisible():
                self.window.hide()
            else:
                self._show_window()

    def _quit_application(self):
        """Quit the application"""
        self.day_check.stop()
        self.timer.shutdown()
        self.pump.stop()

        # Let pending Toggl calls finish, then release the HTTP clients
        self.loop.run_until_complete(self.runner.drain())
        for client in (self.toggl, self.clickup):
            if client is not None:
                self.loop.run_until_complete(client.aclose())
        self.loop.close()

        self.tray_icon.hide()
        self.app.quit()

    def run(self):
        """Run the application"""
        return self.app.exec()
