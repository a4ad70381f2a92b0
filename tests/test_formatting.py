"""Tests for countdown, focus-time and window-title formatting."""

import pytest

from vibeflo.timer.engine import TimerState
from vibeflo.timer.formatting import format_focus_minutes, format_time, window_title
from vibeflo.timer.modes import Mode


class TestFormatTime:

    @pytest.mark.parametrize("seconds, text", [
        (0, "00:00"),
        (5, "00:05"),
        (59, "00:59"),
        (60, "01:00"),
        (61, "01:01"),
        (300, "05:00"),
        (1500, "25:00"),
        (1499, "24:59"),
        (5999, "99:59"),
    ])
    def test_values(self, seconds, text):
        assert format_time(seconds) == text

    def test_negative_clamps(self):
        assert format_time(-7) == "00:00"

    def test_over_99_minutes_widens(self):
        assert format_time(120 * 60) == "120:00"

    @pytest.mark.parametrize("seconds", range(0, 6000, 37))
    def test_round_trips_to_seconds(self, seconds):
        minutes, secs = format_time(seconds).split(":")
        assert len(secs) == 2
        assert int(minutes) * 60 + int(secs) == seconds


class TestFormatFocusMinutes:

    @pytest.mark.parametrize("minutes, text", [
        (0, "0m"),
        (-5, "0m"),
        (1, "1m"),
        (45, "45m"),
        (60, "1h 0m"),
        (125, "2h 5m"),
        (600, "10h 0m"),
    ])
    def test_values(self, minutes, text):
        assert format_focus_minutes(minutes) == text


class TestWindowTitle:

    def _state(self, *, running, mode=Mode.POMODORO, remaining=1499):
        return TimerState(
            mode=mode,
            remaining_seconds=remaining,
            is_running=running,
            completed_pomodoros=0,
            current_task=None,
        )

    def test_running(self):
        assert window_title(self._state(running=True)) == "24:59 - Pomodoro"

    def test_paused(self):
        assert window_title(self._state(running=False)) == "VibeFlo | Pomodoro 24:59"

    def test_break_label(self):
        state = self._state(running=True, mode=Mode.LONG_BREAK, remaining=900)
        assert window_title(state) == "15:00 - Long Break"

    def test_custom_app_name(self):
        assert window_title(self._state(running=False), "Focus").startswith("Focus | ")
