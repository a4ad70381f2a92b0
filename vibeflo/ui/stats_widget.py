"""Stats tab: totals, today, streak and the last seven days."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QGridLayout, QLabel, QFrame, QProgressBar,
)

from ..stats import SessionStats, load_stats
from ..timer.formatting import format_focus_minutes


class StatCard(QFrame):
    """Small card with a big value and a caption."""

    def __init__(self, caption: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        self._value = QLabel("0", self)
        self._value.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._value.setStyleSheet("font-size: 22px; font-weight: 700;")
        self._caption = QLabel(caption, self)
        self._caption.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._caption.setStyleSheet("font-size: 11px;")
        layout.addWidget(self._value)
        layout.addWidget(self._caption)

    def set_value(self, text: str) -> None:
        self._value.setText(text)

    @property
    def value(self) -> str:
        return self._value.text()


class StatsWidget(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._stats = SessionStats()
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(12)

        grid = QGridLayout()
        grid.setSpacing(8)
        self._cards: dict[str, StatCard] = {}
        for i, (key, caption) in enumerate((
            ("today", "Today"),
            ("total_sessions", "Pomodoros"),
            ("total_time", "Focus time"),
            ("streak", "Day streak"),
            ("average", "Avg. session"),
            ("best_day", "Best day"),
        )):
            card = StatCard(caption, self)
            self._cards[key] = card
            grid.addWidget(card, i // 3, i % 3)
        layout.addLayout(grid)

        week_header = QLabel("Last 7 days")
        week_header.setStyleSheet("font-size: 13px; font-weight: 600;")
        layout.addWidget(week_header)

        self._week_grid = QGridLayout()
        self._week_rows: list[tuple[QLabel, QProgressBar, QLabel]] = []
        for row in range(7):
            day_lbl = QLabel("", self)
            bar = QProgressBar(self)
            bar.setTextVisible(False)
            bar.setFixedHeight(8)
            minutes_lbl = QLabel("", self)
            minutes_lbl.setAlignment(Qt.AlignmentFlag.AlignRight)
            self._week_grid.addWidget(day_lbl, row, 0)
            self._week_grid.addWidget(bar, row, 1)
            self._week_grid.addWidget(minutes_lbl, row, 2)
            self._week_rows.append((day_lbl, bar, minutes_lbl))
        layout.addLayout(self._week_grid)

        recent_header = QLabel("Recent tasks")
        recent_header.setStyleSheet("font-size: 13px; font-weight: 600;")
        layout.addWidget(recent_header)

        self._recent_label = QLabel("", self)
        self._recent_label.setWordWrap(True)
        layout.addWidget(self._recent_label)
        layout.addStretch()

    def refresh(self) -> None:
        """Reload from the database."""
        self.set_stats(load_stats())

    def set_stats(self, stats: SessionStats) -> None:
        self._stats = stats
        self._cards["today"].set_value(
            f"{stats.today_sessions} · {format_focus_minutes(stats.today_minutes)}"
        )
        self._cards["total_sessions"].set_value(str(stats.total_sessions))
        self._cards["total_time"].set_value(format_focus_minutes(stats.total_minutes))
        self._cards["streak"].set_value(str(stats.current_streak))
        self._cards["average"].set_value(f"{stats.average_session_minutes:g}m")
        self._cards["best_day"].set_value(stats.most_productive_weekday or "-")

        peak = max((d.minutes for d in stats.last_week), default=0) or 1
        for (day_lbl, bar, minutes_lbl), activity in zip(self._week_rows, stats.last_week):
            day_lbl.setText(activity.day.strftime("%a"))
            bar.setRange(0, peak)
            bar.setValue(activity.minutes)
            minutes_lbl.setText(format_focus_minutes(activity.minutes))

        self._recent_label.setText(
            "\n".join(stats.recent_tasks) or "No tasks tracked yet"
        )

    def card_value(self, key: str) -> str:
        return self._cards[key].value

    @property
    def recent_text(self) -> str:
        return self._recent_label.text()
