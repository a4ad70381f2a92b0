"""UI package."""

from .timer_widget import TimerWidget
from .task_panel import TaskPanel
from .stats_widget import StatsWidget
from .settings_dialog import SettingsDialog

__all__ = [
    "TimerWidget",
    "TaskPanel",
    "StatsWidget",
    "SettingsDialog",
]
