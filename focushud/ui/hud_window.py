"""
HUD Window - Minimal always-on-top task widget.

Architecture Decision: Presentation only
The window renders what the services signal and forwards clicks back.
It never touches the session state or the task cache itself.
"""

from typing import List

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QLabel, QPushButton,
    QComboBox, QListWidget, QListWidgetItem
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QShortcut, QKeySequence

from focushud.domain.models import Project, Task

NO_PROJECT_TEXT = "No Project"


class HudWindow(QWidget):
    """
    Task name, play/pause button, timer, project choice and task list.
    """

    # Signals
    toggle_requested = Signal(str, object)  # description, project_id or None
    refresh_requested = Signal()
    closed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("FocusHUD")
        self.setWindowFlags(Qt.WindowStaysOnTopHint | Qt.Tool)
        self._setup_ui()
        self._setup_shortcuts()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)

        row = QHBoxLayout()
        self.task_input = QLineEdit()
        self.task_input.setPlaceholderText("What are you working on?")
        row.addWidget(self.task_input, stretch=3)

        self.play_btn = QPushButton("▶")
        self.play_btn.setFixedSize(30, 30)
        self.play_btn.setCursor(Qt.PointingHandCursor)
        self.play_btn.clicked.connect(self._on_play_clicked)
        row.addWidget(self.play_btn)

        self.timer_display = QLabel("00:00")
        timer_font = QFont()
        timer_font.setPointSize(11)
        timer_font.setBold(True)
        self.timer_display.setFont(timer_font)
        self.timer_display.setAlignment(Qt.AlignCenter)
        row.addWidget(self.timer_display, stretch=1)
        layout.addLayout(row)

        self.project_combo = QComboBox()
        self.set_projects([])
        layout.addWidget(self.project_combo)

        list_row = QHBoxLayout()
        self.tasks_list = QListWidget()
        self.tasks_list.itemClicked.connect(self._on_task_clicked)
        list_row.addWidget(self.tasks_list)

        self.refresh_btn = QPushButton("⟳")
        self.refresh_btn.setFixedSize(30, 30)
        self.refresh_btn.setToolTip("Refresh tasks (R)")
        self.refresh_btn.clicked.connect(self.refresh_requested.emit)
        list_row.addWidget(self.refresh_btn, alignment=Qt.AlignTop)
        layout.addLayout(list_row)

        self.setMinimumWidth(300)

    def _setup_shortcuts(self):
        refresh = QShortcut(QKeySequence("R"), self)
        refresh.activated.connect(self.refresh_requested.emit)
        hide = QShortcut(QKeySequence("Escape"), self)
        hide.activated.connect(self.hide)

    # --- Slots fed by the services ---

    def set_time(self, text: str, seconds: int):
        self.timer_display.setText(text)

    def set_running(self, running: bool):
        self.play_btn.setText("⏸" if running else "▶")
        self.play_btn.setStyleSheet("color: #818cf8;" if running else "")

    def set_task_name(self, name: str):
        self.task_input.setText(name)

    def set_tasks(self, tasks: List[Task]):
        self.tasks_list.clear()
        for task in tasks:
            item = QListWidgetItem(task.name)
            item.setData(Qt.UserRole, task.id)
            self.tasks_list.addItem(item)

    def set_projects(self, projects: List[Project]):
        self.project_combo.clear()
        self.project_combo.addItem(NO_PROJECT_TEXT, None)
        for project in projects:
            self.project_combo.addItem(project.name, project.id)

    def set_loading(self, loading: bool):
        self.refresh_btn.setEnabled(not loading)
        self.setCursor(Qt.WaitCursor if loading else Qt.ArrowCursor)

    # --- User input ---

    def _on_play_clicked(self):
        self.toggle_requested.emit(self.task_input.text(), self.project_combo.currentData())

    def _on_task_clicked(self, item: QListWidgetItem):
        if item.text():
            self.task_input.setText(item.text())
        self.tasks_list.clearSelection()

    def closeEvent(self, event):
        """Hide instead of quitting; the tray menu quits"""
        event.ignore()
        self.hide()
        self.closed.emit()
