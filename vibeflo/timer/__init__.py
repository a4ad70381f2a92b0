"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    Transition,
    PomodoroSessionRecord,
)
from .formatting import format_time, format_focus_minutes, window_title
from .modes import Mode, MODE_LABELS, mode_label
from .policy import next_mode

__all__ = [
    "TimerEngine",
    "TimerState",
    "Transition",
    "PomodoroSessionRecord",
    "Mode",
    "MODE_LABELS",
    "mode_label",
    "next_mode",
    "format_time",
    "format_focus_minutes",
    "window_title",
]
