"""Focus-timer state machine for VibeFlo.

Modes
-----
POMODORO      Work interval.
SHORT_BREAK   Break after a Pomodoro.
LONG_BREAK    Break after every Nth completed Pomodoro.

Transitions
-----------
POMODORO → SHORT_BREAK | LONG_BREAK      (countdown reaches 0, or skip)
SHORT_BREAK | LONG_BREAK → POMODORO      (countdown reaches 0, or skip)
any → any                                (switch_mode, manual tab click)

The engine does not own a timer.  Whoever drives it (``TimerController``
in the app, a plain loop in tests) calls ``tick()`` once per second
while ``is_running`` is true.  Completion is handled synchronously inside
``tick()`` and described by the returned ``Transition``; if the next mode
auto-starts, ``is_running`` simply stays true and the driver keeps going.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from .modes import (
    COMPLETION_SOUNDS, Mode, NOTIFICATION_TITLES, coerce_mode, mode_label,
)
from .policy import next_mode

if TYPE_CHECKING:
    from ..notifications import NotificationSink, SoundPlayer
    from ..settings import TimerSettings
    from ..stats import StatsReporter

logger = logging.getLogger(__name__)


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerState:
    """Read-only snapshot of the engine, safe to hand to the UI."""

    mode: Mode
    remaining_seconds: int
    is_running: bool
    completed_pomodoros: int
    current_task: str | None


@dataclass(frozen=True)
class PomodoroSessionRecord:
    """One naturally completed Pomodoro, handed to the stats reporter."""

    duration_minutes: int
    task: str | None
    completed_at: datetime


@dataclass(frozen=True)
class Transition:
    """What happened when the countdown hit zero (or was skipped)."""

    previous_mode: Mode
    mode: Mode
    completed: bool                       # False for skip()
    record: PomodoroSessionRecord | None = None
    auto_started: bool = False


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine:
    """Pomodoro countdown with work/break cycling.

    Collaborators
    -------------
    stats_reporter
        ``add_session(record) -> bool``.  Called once per natural
        Pomodoro completion.  Failures are logged and ignored.
    notification_sink
        ``request_permission() -> bool`` and ``notify(title, body)``.
        Asked on every completion when notifications are enabled.
    sound_player
        ``play(name)``.  Plays the finished mode's sound on every
        completion when sounds are enabled.  Failures are logged.
    clock
        Returns "now"; tests pass a fake.
    """

    def __init__(
        self,
        settings: TimerSettings | None = None,
        *,
        stats_reporter: StatsReporter | None = None,
        notification_sink: NotificationSink | None = None,
        sound_player: SoundPlayer | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._stats_reporter = stats_reporter
        self._notification_sink = notification_sink
        self._sound_player = sound_player
        self._clock = clock
        self._completion_listeners: list[Callable[[PomodoroSessionRecord], None]] = []

        self._settings: TimerSettings
        self._pending_settings: TimerSettings | None = None

        self._mode: Mode = Mode.POMODORO
        self._remaining: int = 0
        self._running: bool = False
        self._completed: int = 0
        self._task: str | None = None

        if settings is None:
            from ..settings import TimerSettings
            settings = TimerSettings()
        self.initialize(settings)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def completed_pomodoros(self) -> int:
        return self._completed

    @property
    def current_task(self) -> str | None:
        return self._task

    @property
    def settings(self) -> TimerSettings:
        """Settings the current countdown was configured from."""
        return self._settings

    @property
    def total_seconds(self) -> int:
        """Full length of the current mode."""
        return self._settings.duration_seconds(self._mode)

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current mode."""
        total = self.total_seconds
        if total <= 0:
            return 0.0
        return max(0.0, min(1.0, (total - self._remaining) / total))

    @property
    def state(self) -> TimerState:
        return TimerState(
            mode=self._mode,
            remaining_seconds=self._remaining,
            is_running=self._running,
            completed_pomodoros=self._completed,
            current_task=self._task,
        )

    def add_completion_listener(
        self, listener: Callable[[PomodoroSessionRecord], None]
    ) -> None:
        """Extra observer for natural Pomodoro completions (e.g. the task
        list).  Called after the stats reporter; failures are logged."""
        self._completion_listeners.append(listener)

    # ══════════════════════════════════════════════════════════════════
    #  OPERATIONS
    # ══════════════════════════════════════════════════════════════════

    def initialize(self, settings: TimerSettings) -> None:
        """Start over: first Pomodoro of a fresh cycle, stopped, no task."""
        self._settings = settings.sanitized()
        self._pending_settings = None
        self._mode = Mode.POMODORO
        self._remaining = self._settings.duration_seconds(Mode.POMODORO)
        self._running = False
        self._completed = 0
        self._task = None
        self._check_invariants()

    def apply_settings(self, settings: TimerSettings) -> None:
        """Queue new settings for the next reset / mode boundary.

        A running countdown keeps the duration it started with.
        """
        self._pending_settings = settings.sanitized()

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.debug("Started %s with %ds left", self._mode.value, self._remaining)

    def pause(self) -> None:
        self._running = False

    def reset(self) -> None:
        """Refill the current mode's countdown.  Completed count is kept."""
        self._running = False
        self._take_pending_settings()
        self._remaining = self._settings.duration_seconds(self._mode)
        self._check_invariants()

    def tick(self) -> Transition | None:
        """Advance one second.  Returns the transition if the countdown
        reached zero, else None.  No-op while paused."""
        if not self._running:
            return None
        self._remaining -= 1
        self._check_invariants()
        if self._remaining > 0:
            return None
        return self._complete()

    def skip(self) -> Transition:
        """Jump to the next mode without crediting the current one.

        A skipped Pomodoro picks its break as if it had been the next
        one completed, but ``completed_pomodoros`` stays as it was.
        """
        self._running = False
        previous = self._mode
        count = self._completed + 1 if previous == Mode.POMODORO else self._completed
        target = next_mode(previous, count, self._pending_or_current())
        self._enter_mode(target)
        logger.info("Skipped %s → %s", previous.value, target.value)
        return Transition(previous_mode=previous, mode=target, completed=False)

    def switch_mode(self, mode: Mode | str) -> None:
        """Manual tab switch: stop and load ``mode``'s full duration.

        An unknown mode raises under ``__debug__`` and is ignored with
        ``-O``.
        """
        try:
            target = coerce_mode(mode)
        except ValueError:
            if __debug__:
                raise
            logger.error("Ignoring switch to unknown mode %r", mode)
            return
        self._running = False
        self._enter_mode(target)

    def set_task(self, text: str | None) -> None:
        """Bind a task label.  Blank text clears it.  Never affects timing."""
        if text is None:
            self._task = None
            return
        try:
            stripped = str(text).strip()
        except Exception:
            logger.warning("Ignoring unprintable task label", exc_info=True)
            return
        self._task = stripped or None

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: completion
    # ══════════════════════════════════════════════════════════════════

    def _complete(self) -> Transition:
        previous = self._mode
        record: PomodoroSessionRecord | None = None

        # ── credit the Pomodoro ───────────────────────────────────────
        if previous == Mode.POMODORO:
            self._completed += 1
            record = PomodoroSessionRecord(
                duration_minutes=self._settings.pomodoro_duration,
                task=self._task,
                completed_at=self._clock(),
            )
            self._report(record)

        # ── move to the next mode ─────────────────────────────────────
        settings = self._pending_or_current()
        target = next_mode(previous, self._completed, settings)
        self._enter_mode(target)
        self._running = self._settings.auto_starts(target)

        logger.info(
            "Completed %s → %s (completed=%d, auto_start=%s)",
            previous.value, target.value, self._completed, self._running,
        )

        # ── tell the user ─────────────────────────────────────────────
        if self._settings.sound_enabled:
            self._play_sound(previous)
        if self._settings.notifications_enabled:
            self._notify(target)

        return Transition(
            previous_mode=previous,
            mode=target,
            completed=True,
            record=record,
            auto_started=self._running,
        )

    def _report(self, record: PomodoroSessionRecord) -> None:
        if self._stats_reporter is not None:
            try:
                ok = self._stats_reporter.add_session(record)
            except Exception:
                logger.exception("Stats reporter failed to record session")
            else:
                if ok is False:
                    logger.warning("Stats reporter rejected session %r", record)

        for listener in list(self._completion_listeners):
            try:
                listener(record)
            except Exception:
                logger.exception("Completion listener %r failed", listener)

    def _play_sound(self, finished: Mode) -> None:
        if self._sound_player is None:
            return
        try:
            self._sound_player.play(COMPLETION_SOUNDS[finished])
        except Exception:
            logger.warning("Could not play completion sound", exc_info=True)

    def _notify(self, mode: Mode) -> None:
        sink = self._notification_sink
        if sink is None:
            return
        minutes = self._settings.duration_minutes(mode)
        body = f"{mode_label(mode)}: {minutes} min"
        try:
            if not sink.request_permission():
                logger.debug("Notification permission not granted")
                return
            sink.notify(NOTIFICATION_TITLES[mode], body)
        except Exception:
            logger.warning("Could not show completion notification", exc_info=True)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: bookkeeping
    # ══════════════════════════════════════════════════════════════════

    def _pending_or_current(self) -> TimerSettings:
        return self._pending_settings or self._settings

    def _take_pending_settings(self) -> None:
        if self._pending_settings is not None:
            self._settings = self._pending_settings
            self._pending_settings = None

    def _enter_mode(self, mode: Mode) -> None:
        self._take_pending_settings()
        self._mode = mode
        self._remaining = self._settings.duration_seconds(mode)
        self._check_invariants()

    def _check_invariants(self) -> None:
        """Fail fast under ``__debug__``; clamp when run with ``-O``."""
        assert isinstance(self._mode, Mode), f"bad mode {self._mode!r}"
        if not isinstance(self._mode, Mode):
            self._mode = Mode.POMODORO
        total = self._settings.duration_seconds(self._mode)
        assert 0 <= self._remaining <= total, (
            f"remaining {self._remaining}s outside [0, {total}]"
        )
        if self._remaining < 0:
            self._remaining = 0
        elif self._remaining > total:
            self._remaining = total
