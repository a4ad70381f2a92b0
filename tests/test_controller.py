"""Tests for the Qt timer controller: the single tick source.

``_on_timeout()`` is called directly to simulate QTimer firing, so the
tests never wait on a real event loop.
"""

import pytest

from vibeflo.settings import TimerSettings
from vibeflo.timer.controller import TICK_INTERVAL_MS, TimerController
from vibeflo.timer.engine import TimerEngine
from vibeflo.timer.modes import Mode

from helpers import SignalCollector


@pytest.fixture
def controller(qapp, engine):
    ctrl = TimerController(engine)
    yield ctrl
    ctrl.shutdown()


@pytest.fixture
def auto_controller(qapp, engine_auto):
    ctrl = TimerController(engine_auto)
    yield ctrl
    ctrl.shutdown()


def fire(ctrl: TimerController, n: int = 1) -> None:
    for _ in range(n):
        ctrl._on_timeout()


# ═══════════════════════════════════════════════════════════════════════════
#  SCHEDULING
# ═══════════════════════════════════════════════════════════════════════════


class TestScheduling:

    def test_idle_on_creation(self, controller):
        assert controller.active is False

    def test_interval(self, controller):
        assert controller._qt_timer.interval() == TICK_INTERVAL_MS

    def test_start_schedules(self, controller):
        controller.start()
        assert controller.active is True
        assert controller.state.is_running is True

    def test_start_twice_keeps_one_timer(self, controller):
        controller.start()
        timer = controller._qt_timer
        controller.start()
        assert controller._qt_timer is timer
        assert controller.active is True

    @pytest.mark.parametrize("action", [
        lambda c: c.pause(),
        lambda c: c.reset(),
        lambda c: c.skip(),
        lambda c: c.switch_mode(Mode.LONG_BREAK),
        lambda c: c.shutdown(),
    ])
    def test_stopping_actions_cancel_tick(self, controller, action):
        controller.start()
        action(controller)
        assert controller.active is False
        assert controller.state.is_running is False

    def test_toggle(self, controller):
        controller.toggle()
        assert controller.active is True
        controller.toggle()
        assert controller.active is False

    def test_timeout_ticks_engine(self, controller):
        controller.start()
        fire(controller, 3)
        assert controller.state.remaining_seconds == 1497

    def test_stale_timeout_after_pause_is_ignored(self, controller):
        controller.start()
        fire(controller)
        controller.pause()
        before = controller.state.remaining_seconds
        fire(controller, 5)
        assert controller.state.remaining_seconds == before
        assert controller.active is False

    def test_timeout_after_shutdown_is_ignored(self, controller):
        controller.start()
        controller.shutdown()
        before = controller.state.remaining_seconds
        fire(controller)
        assert controller.state.remaining_seconds == before

    def test_start_after_shutdown_is_refused(self, controller):
        controller.shutdown()
        controller.start()
        assert controller.active is False
        assert controller.state.is_running is False


# ═══════════════════════════════════════════════════════════════════════════
#  COMPLETION
# ═══════════════════════════════════════════════════════════════════════════


class TestCompletion:

    def test_manual_break_stops_ticking(self, controller):
        controller.start()
        fire(controller, 1500)
        assert controller.state.mode == Mode.SHORT_BREAK
        assert controller.state.remaining_seconds == 300
        assert controller.active is False

    def test_auto_start_keeps_same_timer(self, auto_controller):
        auto_controller.start()
        timer = auto_controller._qt_timer
        fire(auto_controller, 1500)
        assert auto_controller.state.mode == Mode.SHORT_BREAK
        assert auto_controller.state.is_running is True
        assert auto_controller.active is True
        assert auto_controller._qt_timer is timer
        fire(auto_controller)
        assert auto_controller.state.remaining_seconds == 299

    def test_auto_start_full_cycle(self, auto_controller, reporter):
        auto_controller.start()
        fire(auto_controller, 4 * 1500 + 3 * 300)
        assert auto_controller.state.mode == Mode.LONG_BREAK
        assert len(reporter.records) == 4
        assert auto_controller.active is True

    def test_transitioned_signal(self, controller):
        seen = SignalCollector()
        controller.transitioned.connect(seen.slot)
        controller.start()
        fire(controller, 1500)
        assert len(seen) == 1
        assert seen.last.completed is True
        assert seen.last.mode == Mode.SHORT_BREAK

    def test_skip_emits_transition(self, controller):
        seen = SignalCollector()
        controller.transitioned.connect(seen.slot)
        t = controller.skip()
        assert seen.last is t
        assert t.completed is False


# ═══════════════════════════════════════════════════════════════════════════
#  SIGNALS
# ═══════════════════════════════════════════════════════════════════════════


class TestSignals:

    def test_tick_signal_carries_remaining(self, controller):
        ticks = SignalCollector()
        controller.tick.connect(ticks.slot)
        controller.start()
        fire(controller, 2)
        assert ticks.items == [1499, 1498]

    def test_state_changed_on_actions(self, controller):
        states = SignalCollector()
        controller.state_changed.connect(states.slot)
        controller.start()
        controller.pause()
        controller.set_task("Read paper")
        assert [s.is_running for s in states.items] == [True, False, False]
        assert states.last.current_task == "Read paper"

    def test_set_task_does_not_touch_timer(self, controller):
        controller.start()
        fire(controller, 10)
        controller.set_task("Other")
        assert controller.active is True
        assert controller.state.remaining_seconds == 1490


# ═══════════════════════════════════════════════════════════════════════════
#  SETTINGS
# ═══════════════════════════════════════════════════════════════════════════


class TestApplySettings:

    def test_idle_untouched_applies_now(self, controller):
        controller.apply_settings(TimerSettings(pomodoro_duration=50))
        assert controller.state.remaining_seconds == 3000

    def test_running_waits_for_boundary(self, controller):
        controller.start()
        fire(controller, 5)
        controller.apply_settings(TimerSettings(pomodoro_duration=50))
        assert controller.state.remaining_seconds == 1495
        assert controller.active is True
        controller.reset()
        assert controller.state.remaining_seconds == 3000

    def test_paused_midway_waits_for_boundary(self, controller):
        controller.start()
        fire(controller, 5)
        controller.pause()
        controller.apply_settings(TimerSettings(pomodoro_duration=50))
        assert controller.state.remaining_seconds == 1495
        controller.switch_mode(Mode.POMODORO)
        assert controller.state.remaining_seconds == 3000

    def test_own_engine_instance(self, qapp):
        engine = TimerEngine(TimerSettings(short_break_duration=1))
        ctrl = TimerController(engine, interval_ms=10)
        assert ctrl._qt_timer.interval() == 10
        ctrl.shutdown()
