"""Which mode follows which.

The cycle is Pomodoro → short break → Pomodoro → ... and every
``pomodoros_until_long_break``-th completed Pomodoro earns a long break
instead.  With ``pomodoros_until_long_break == 1`` every Pomodoro is
followed by a long break.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .modes import Mode

if TYPE_CHECKING:
    from ..settings import TimerSettings


def is_long_break_due(completed_pomodoros: int, pomodoros_until_long_break: int) -> bool:
    return (
        completed_pomodoros > 0
        and completed_pomodoros % pomodoros_until_long_break == 0
    )


def next_mode(
    current_mode: Mode,
    completed_pomodoros: int,
    settings: TimerSettings,
) -> Mode:
    """Mode that follows ``current_mode``.

    ``completed_pomodoros`` is the count *after* crediting the session
    that just ended (natural completion), or as if the skipped Pomodoro
    had been credited (skip).
    """
    if current_mode == Mode.POMODORO:
        if is_long_break_due(completed_pomodoros, settings.pomodoros_until_long_break):
            return Mode.LONG_BREAK
        return Mode.SHORT_BREAK
    if current_mode in (Mode.SHORT_BREAK, Mode.LONG_BREAK):
        return Mode.POMODORO
    raise ValueError(f"Unknown timer mode: {current_mode!r}")
