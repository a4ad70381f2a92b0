"""Shared test helpers for VibeFlo."""

from datetime import datetime, timedelta

from vibeflo.timer.engine import TimerEngine, Transition


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Deterministic stand-in for ``datetime.now``."""

    def __init__(self, start: datetime = datetime(2024, 3, 4, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class FailingReporter:
    """Stats reporter that always blows up."""

    def __init__(self, exc: Exception | None = None):
        self.calls = 0
        self._exc = exc or RuntimeError("stats backend down")

    def add_session(self, record) -> bool:
        self.calls += 1
        raise self._exc


class RejectingReporter:
    """Stats reporter that reports failure without raising."""

    def __init__(self):
        self.calls = 0

    def add_session(self, record) -> bool:
        self.calls += 1
        return False


class FailingSink:
    """Notification sink whose ``notify`` raises."""

    def __init__(self, *, fail_on_permission: bool = False):
        self.fail_on_permission = fail_on_permission
        self.notify_calls = 0

    def request_permission(self) -> bool:
        if self.fail_on_permission:
            raise PermissionError("denied by platform")
        return True

    def notify(self, title: str, body: str) -> None:
        self.notify_calls += 1
        raise OSError("notification daemon unavailable")


class FailingSoundPlayer:
    """Sound player whose audio device is gone."""

    def __init__(self):
        self.calls = 0

    def play(self, name: str) -> None:
        self.calls += 1
        raise RuntimeError("audio device unavailable")


def run_ticks(engine: TimerEngine, n: int, clock: FakeClock | None = None) -> list[Transition]:
    """Drive ``n`` one-second ticks the way the scheduler would.

    Returns the transitions that happened along the way.
    """
    transitions = []
    for _ in range(n):
        if clock is not None:
            clock.advance(1)
        t = engine.tick()
        if t is not None:
            transitions.append(t)
    return transitions


def complete_session(engine: TimerEngine) -> Transition:
    """Start (if needed) and tick through whatever is left on the clock."""
    engine.start()
    transitions = run_ticks(engine, engine.remaining_seconds)
    assert len(transitions) == 1
    return transitions[0]
