"""Qt driver for the timer engine.

``TimerController`` owns the one and only ``QTimer`` that ticks the
engine.  Every user action goes through the controller so that it can
stop or start that timer right after the engine changes state: after
``pause()``, ``reset()``, ``skip()``, ``switch_mode()`` or ``shutdown()``
returns, no tick is pending.

When a completion auto-starts the next mode, the engine stays running
and the same ``QTimer`` keeps firing; the controller never creates a
second timer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .engine import TimerEngine, TimerState, Transition
from .modes import Mode

if TYPE_CHECKING:
    from ..settings import TimerSettings

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class TimerController(QObject):
    """Connects a ``TimerEngine`` to the Qt event loop.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted after every engine tick.
    state_changed(state: TimerState)
        Emitted after every operation that may have changed the engine.
    transitioned(transition: Transition)
        Emitted after a natural completion or a skip.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    transitioned = pyqtSignal(object)

    def __init__(
        self,
        engine: TimerEngine,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._shut_down = False

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

    # ── properties ────────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def state(self) -> TimerState:
        return self._engine.state

    @property
    def active(self) -> bool:
        """True while a tick is scheduled."""
        return self._qt_timer.isActive()

    # ── user actions ──────────────────────────────────────────────────────

    def start(self) -> None:
        if self._shut_down:
            return
        self._engine.start()
        self._sync()

    def pause(self) -> None:
        self._qt_timer.stop()
        self._engine.pause()
        self._sync()

    def toggle(self) -> None:
        """Start when stopped, pause when running."""
        if self._engine.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._qt_timer.stop()
        self._engine.reset()
        self._sync()

    def skip(self) -> Transition:
        self._qt_timer.stop()
        transition = self._engine.skip()
        self._sync()
        self.transitioned.emit(transition)
        return transition

    def switch_mode(self, mode: Mode | str) -> None:
        self._qt_timer.stop()
        self._engine.switch_mode(mode)
        self._sync()

    def set_task(self, text: str | None) -> None:
        self._engine.set_task(text)
        self.state_changed.emit(self._engine.state)

    def apply_settings(self, settings: TimerSettings) -> None:
        """Queue new settings.  An idle, untouched countdown picks them up
        right away; anything else waits for the next boundary."""
        self._engine.apply_settings(settings)
        engine = self._engine
        if not engine.is_running and engine.remaining_seconds == engine.total_seconds:
            engine.reset()
        self._sync()

    def shutdown(self) -> None:
        """Teardown: cancel the pending tick and ignore any stragglers."""
        self._shut_down = True
        self._qt_timer.stop()
        self._engine.pause()

    # ── internals ─────────────────────────────────────────────────────────

    def _on_timeout(self) -> None:
        if self._shut_down or not self._engine.is_running:
            # Stale callback after a logical stop
            self._qt_timer.stop()
            return

        transition = self._engine.tick()
        self.tick.emit(self._engine.remaining_seconds)

        if transition is not None:
            self._sync()
            self.transitioned.emit(transition)
        elif not self._engine.is_running:
            self._sync()

    def _sync(self) -> None:
        """Make the QTimer agree with ``engine.is_running``."""
        if self._engine.is_running and not self._shut_down:
            if not self._qt_timer.isActive():
                self._qt_timer.start()
        else:
            self._qt_timer.stop()
        self.state_changed.emit(self._engine.state)
