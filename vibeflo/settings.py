"""Timer settings with JSON persistence.

Settings are stored at:
    ~/.vibeflo/settings.json

Usage::

    provider = SettingsProvider(load_settings(), path=SETTINGS_PATH)
    provider.subscribe(controller.apply_settings)
    provider.update(pomodoro_duration=50)

Durations are whole minutes.  The engine converts them to seconds and
only picks up a new snapshot at a reset / mode-switch boundary.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Callable

from .timer.modes import Mode

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / ".vibeflo"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

_DURATION_FIELDS = (
    "pomodoro_duration",
    "short_break_duration",
    "long_break_duration",
)
_BOOL_FIELDS = (
    "auto_start_breaks",
    "auto_start_pomodoros",
    "sound_enabled",
    "notifications_enabled",
)


@dataclass(frozen=True)
class TimerSettings:
    """Immutable snapshot of the user's timer preferences."""

    pomodoro_duration: int = 25            # minutes
    short_break_duration: int = 5
    long_break_duration: int = 15
    pomodoros_until_long_break: int = 4
    auto_start_breaks: bool = False
    auto_start_pomodoros: bool = False
    sound_enabled: bool = True
    notifications_enabled: bool = True

    def duration_minutes(self, mode: Mode) -> int:
        if mode == Mode.POMODORO:
            return self.pomodoro_duration
        if mode == Mode.SHORT_BREAK:
            return self.short_break_duration
        if mode == Mode.LONG_BREAK:
            return self.long_break_duration
        raise ValueError(f"Unknown timer mode: {mode!r}")

    def duration_seconds(self, mode: Mode) -> int:
        return self.duration_minutes(mode) * 60

    def auto_starts(self, mode: Mode) -> bool:
        """Whether landing in ``mode`` starts the countdown by itself."""
        if mode == Mode.POMODORO:
            return self.auto_start_pomodoros
        return self.auto_start_breaks

    def sanitized(self) -> TimerSettings:
        """Copy with every invalid field replaced by its default.

        A zero or negative duration would leave the timer unrenderable
        (or completing on every tick), so it never reaches the engine.
        """
        defaults = TimerSettings()
        changes: dict[str, object] = {}

        for name in _DURATION_FIELDS + ("pomodoros_until_long_break",):
            value = getattr(self, name)
            if not _is_positive_int(value):
                logger.warning(
                    "Invalid %s=%r, falling back to %r",
                    name, value, getattr(defaults, name),
                )
                changes[name] = getattr(defaults, name)

        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                logger.warning(
                    "Invalid %s=%r, falling back to %r",
                    name, value, getattr(defaults, name),
                )
                changes[name] = getattr(defaults, name)

        return replace(self, **changes) if changes else self

    @classmethod
    def from_dict(cls, data: dict) -> TimerSettings:
        """Build sanitized settings from a loosely-typed mapping.

        Unknown keys are ignored so older/newer settings files still load.
        """
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered).sanitized()

    def to_dict(self) -> dict:
        return asdict(self)


def _is_positive_int(value: object) -> bool:
    # bool is an int subclass; True must not pass as "1 minute"
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


# ── persistence ───────────────────────────────────────────────────────────


def load_settings(path: Path | None = None) -> TimerSettings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return TimerSettings.from_dict(data)
            logger.warning("Ignoring settings file %s: not a JSON object", path)
    except (OSError, ValueError, TypeError):
        logger.exception("Could not read settings from %s", path)
    return TimerSettings()


def save_settings(settings: TimerSettings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(settings.to_dict(), indent=2) + "\n",
        encoding="utf-8",
    )


# ── provider ──────────────────────────────────────────────────────────────


class SettingsProvider:
    """Owns the current settings snapshot and tells subscribers about
    replacements.

    Subscribers receive the new immutable snapshot; the timer decides
    when to apply it.
    """

    def __init__(
        self,
        settings: TimerSettings | None = None,
        *,
        path: Path | None = None,
    ) -> None:
        self._settings = (settings or TimerSettings()).sanitized()
        self._path = path
        self._subscribers: list[Callable[[TimerSettings], None]] = []

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    def subscribe(self, callback: Callable[[TimerSettings], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[TimerSettings], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def update(self, **changes) -> TimerSettings:
        """Replace some fields, persist, and notify subscribers."""
        unknown = set(changes) - {f.name for f in fields(TimerSettings)}
        if unknown:
            raise TypeError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        return self.replace(replace(self._settings, **changes))

    def replace(self, settings: TimerSettings) -> TimerSettings:
        new = settings.sanitized()
        if new == self._settings:
            return new
        self._settings = new
        if self._path is not None:
            try:
                save_settings(new, self._path)
            except OSError:
                logger.exception("Could not save settings to %s", self._path)
        for callback in list(self._subscribers):
            try:
                callback(new)
            except Exception:
                logger.exception("Settings subscriber %r failed", callback)
        return new
