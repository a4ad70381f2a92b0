"""Timer modes and their display strings."""

from __future__ import annotations

from enum import Enum


class Mode(Enum):
    POMODORO = "pomodoro"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not Mode.POMODORO


MODE_LABELS: dict[Mode, str] = {
    Mode.POMODORO:    "Pomodoro",
    Mode.SHORT_BREAK: "Short Break",
    Mode.LONG_BREAK:  "Long Break",
}

# Notification title shown when the timer lands in a mode
NOTIFICATION_TITLES: dict[Mode, str] = {
    Mode.POMODORO:    "Break is over, time to focus!",
    Mode.SHORT_BREAK: "Time for a break!",
    Mode.LONG_BREAK:  "Time for a break!",
}

# Sound played when a mode's countdown finishes
COMPLETION_SOUNDS: dict[Mode, str] = {
    Mode.POMODORO:    "pomodoro_complete",
    Mode.SHORT_BREAK: "break_complete",
    Mode.LONG_BREAK:  "break_complete",
}


def mode_label(mode: Mode) -> str:
    return MODE_LABELS[mode]


def coerce_mode(value: Mode | str) -> Mode:
    """Accept a Mode or its string value ("pomodoro", "short_break", ...)."""
    if isinstance(value, Mode):
        return value
    try:
        return Mode(value)
    except ValueError:
        raise ValueError(f"Unknown timer mode: {value!r}") from None
