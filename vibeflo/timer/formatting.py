"""Text helpers for the countdown display, tray tooltip and stats."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .modes import mode_label

if TYPE_CHECKING:
    from .engine import TimerState


def format_time(seconds: int) -> str:
    """0 → '00:00', 61 → '01:01', 1500 → '25:00'.  Negatives clamp to 0."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_focus_minutes(total_minutes: int) -> str:
    """125 → '2h 5m', 0 → '0m', 60 → '1h 0m'."""
    if total_minutes <= 0:
        return "0m"
    hours, mins = divmod(total_minutes, 60)
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"


def window_title(state: TimerState, app_name: str = "VibeFlo") -> str:
    """'24:59 - Pomodoro' while running, 'VibeFlo | Pomodoro 24:59' otherwise."""
    label = mode_label(state.mode)
    clock = format_time(state.remaining_seconds)
    if state.is_running:
        return f"{clock} - {label}"
    return f"{app_name} | {label} {clock}"
