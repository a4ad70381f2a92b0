"""Shared pytest fixtures for VibeFlo tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from vibeflo.database.db import configure_engine, init_db  # noqa: E402
from vibeflo.notifications import (  # noqa: E402
    RecordingNotificationSink, RecordingSoundPlayer,
)
from vibeflo.settings import TimerSettings  # noqa: E402
from vibeflo.stats import InMemoryStatsReporter  # noqa: E402
from vibeflo.timer.engine import TimerEngine  # noqa: E402

from helpers import FakeClock  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reporter():
    return InMemoryStatsReporter()


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def sounds():
    return RecordingSoundPlayer()


@pytest.fixture
def settings():
    """Stock 25/5/15, long break every 4th, nothing auto-starts."""
    return TimerSettings()


@pytest.fixture
def engine(settings, reporter, sink, sounds, clock):
    """Fresh engine wired to in-memory collaborators."""
    return TimerEngine(
        settings,
        stats_reporter=reporter,
        notification_sink=sink,
        sound_player=sounds,
        clock=clock,
    )


@pytest.fixture
def engine_auto(reporter, sink, sounds, clock):
    """Engine that auto-starts both breaks and Pomodoros."""
    return TimerEngine(
        TimerSettings(auto_start_breaks=True, auto_start_pomodoros=True),
        stats_reporter=reporter,
        notification_sink=sink,
        sound_player=sounds,
        clock=clock,
    )
