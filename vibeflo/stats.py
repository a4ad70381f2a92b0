"""Completed-session reporting and the numbers behind the stats view.

Reporters
---------
``DatabaseStatsReporter``   writes each record to ``pomodoro_sessions``.
``InMemoryStatsReporter``   keeps records in a list (headless / tests).

Aggregation
-----------
``load_stats(today)`` returns a ``SessionStats`` snapshot: totals, today,
the last seven days, the current daily streak, average session length
and the most productive weekday.
"""

from __future__ import annotations

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol, runtime_checkable

from sqlalchemy import func

from .database.db import get_session
from .database.models import PomodoroSession
from .timer.engine import PomodoroSessionRecord

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
#  REPORTERS
# ═══════════════════════════════════════════════════════════════════════════


@runtime_checkable
class StatsReporter(Protocol):
    def add_session(self, record: PomodoroSessionRecord) -> bool: ...


class DatabaseStatsReporter:
    """Persists completed Pomodoros.  Database errors propagate to the
    caller; the timer engine logs and drops them."""

    def add_session(self, record: PomodoroSessionRecord) -> bool:
        with get_session() as db:
            db.add(PomodoroSession(
                duration_minutes=record.duration_minutes,
                task=record.task,
                completed_at=record.completed_at,
            ))
        logger.info(
            "Recorded %d-minute session (task=%r)",
            record.duration_minutes, record.task,
        )
        return True


class InMemoryStatsReporter:
    def __init__(self) -> None:
        self.records: list[PomodoroSessionRecord] = []

    def add_session(self, record: PomodoroSessionRecord) -> bool:
        self.records.append(record)
        return True


# ═══════════════════════════════════════════════════════════════════════════
#  AGGREGATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class DayActivity:
    day: date
    count: int = 0
    minutes: int = 0


@dataclass
class SessionStats:
    """Snapshot of everything the stats view shows."""

    total_sessions: int = 0
    total_minutes: int = 0
    today_sessions: int = 0
    today_minutes: int = 0
    current_streak: int = 0
    average_session_minutes: float = 0.0
    most_productive_weekday: str | None = None
    last_week: list[DayActivity] = field(default_factory=list)
    recent_tasks: list[str] = field(default_factory=list)


def _daily_totals(db) -> dict[date, DayActivity]:
    totals: dict[date, DayActivity] = {}
    for completed_at, minutes in db.query(
        PomodoroSession.completed_at, PomodoroSession.duration_minutes
    ):
        day = completed_at.date()
        row = totals.setdefault(day, DayActivity(day))
        row.count += 1
        row.minutes += minutes
    return totals


def current_streak(active_days: set[date], today: date) -> int:
    """Consecutive days with at least one session, ending today.

    A streak that ended yesterday is still alive (today isn't over yet).
    """
    cursor = today if today in active_days else today - timedelta(days=1)
    streak = 0
    while cursor in active_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def load_stats(today: date | None = None, *, recent_limit: int = 5) -> SessionStats:
    """Run the queries in a single session and return a filled snapshot."""
    today = today or date.today()
    stats = SessionStats()

    with get_session() as db:
        stats.total_sessions, total_minutes = db.query(
            func.count(PomodoroSession.id),
            func.coalesce(func.sum(PomodoroSession.duration_minutes), 0),
        ).one()
        stats.total_minutes = int(total_minutes)

        daily = _daily_totals(db)

        recent = (
            db.query(PomodoroSession.task)
            .filter(PomodoroSession.task.is_not(None))
            .order_by(PomodoroSession.completed_at.desc())
            .limit(recent_limit * 4)
            .all()
        )

    # ── today / last week ────────────────────────────────────────────
    if today in daily:
        stats.today_sessions = daily[today].count
        stats.today_minutes = daily[today].minutes
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        stats.last_week.append(daily.get(day, DayActivity(day)))

    # ── all-time ────────────────────────────────────────────────────
    stats.current_streak = current_streak(set(daily), today)
    if stats.total_sessions:
        stats.average_session_minutes = round(
            stats.total_minutes / stats.total_sessions, 1
        )

    by_weekday: defaultdict[int, int] = defaultdict(int)
    for row in daily.values():
        by_weekday[row.day.weekday()] += row.minutes
    if by_weekday:
        best = max(by_weekday, key=lambda wd: (by_weekday[wd], -wd))
        stats.most_productive_weekday = calendar.day_name[best]

    # Distinct, most recent first
    for (task,) in recent:
        if task not in stats.recent_tasks:
            stats.recent_tasks.append(task)
        if len(stats.recent_tasks) >= recent_limit:
            break

    return stats
