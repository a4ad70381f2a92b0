"""Settings dialog for VibeFlo.

A modal dialog that edits timer durations, auto-start behaviour and
notifications.  Every change goes straight to the ``SettingsProvider``,
which persists it and forwards the new snapshot to the timer.  A running
countdown keeps its length; the new durations apply from the next
reset or mode switch.
"""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QCheckBox, QPushButton, QFrame, QWidget,
)

from ..settings import SettingsProvider, TimerSettings


class SettingsDialog(QDialog):
    """Modal dialog for timer preferences."""

    def __init__(
        self,
        provider: SettingsProvider,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._provider = provider
        self._populating = False

        self._build_ui()
        self._populate(provider.settings)

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── Timer section ────────────────────────────────────────────
        root.addWidget(self._section_label("Timer"))
        timer_form = QFormLayout()
        timer_form.setContentsMargins(0, 0, 0, 0)
        timer_form.setHorizontalSpacing(20)
        timer_form.setVerticalSpacing(10)

        self._pomodoro_spin = self._minutes_spin(1, 120)
        timer_form.addRow("Pomodoro:", self._pomodoro_spin)

        self._short_spin = self._minutes_spin(1, 60)
        timer_form.addRow("Short break:", self._short_spin)

        self._long_spin = self._minutes_spin(1, 120)
        timer_form.addRow("Long break:", self._long_spin)

        self._until_long_spin = QSpinBox()
        self._until_long_spin.setRange(1, 12)
        self._until_long_spin.valueChanged.connect(self._on_changed)
        timer_form.addRow("Long break every:", self._until_long_spin)

        self._auto_breaks_cb = QCheckBox("Auto-start breaks")
        self._auto_breaks_cb.toggled.connect(self._on_changed)
        timer_form.addRow("", self._auto_breaks_cb)

        self._auto_pomodoros_cb = QCheckBox("Auto-start Pomodoros")
        self._auto_pomodoros_cb.toggled.connect(self._on_changed)
        timer_form.addRow("", self._auto_pomodoros_cb)

        root.addLayout(timer_form)
        root.addWidget(self._separator())

        # ── Sound & Notifications section ────────────────────────────
        root.addWidget(self._section_label("Sound & Notifications"))
        self._sound_cb = QCheckBox("Play a sound when a timer ends")
        self._sound_cb.toggled.connect(self._on_changed)
        root.addWidget(self._sound_cb)

        self._notif_cb = QCheckBox("Desktop notifications")
        self._notif_cb.toggled.connect(self._on_changed)
        root.addWidget(self._notif_cb)

        # ── close button ─────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        close_btn = QPushButton("Close")
        close_btn.setObjectName("secondaryButton")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    # ── helpers ──────────────────────────────────────────────────────

    def _minutes_spin(self, low: int, high: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(low, high)
        spin.setSuffix(" min")
        spin.valueChanged.connect(self._on_changed)
        return spin

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        line.setStyleSheet("background-color: rgba(255,255,255,0.08);")
        return line

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE / SAVE
    # ══════════════════════════════════════════════════════════════════

    def _populate(self, s: TimerSettings) -> None:
        self._populating = True
        try:
            self._pomodoro_spin.setValue(s.pomodoro_duration)
            self._short_spin.setValue(s.short_break_duration)
            self._long_spin.setValue(s.long_break_duration)
            self._until_long_spin.setValue(s.pomodoros_until_long_break)
            self._auto_breaks_cb.setChecked(s.auto_start_breaks)
            self._auto_pomodoros_cb.setChecked(s.auto_start_pomodoros)
            self._sound_cb.setChecked(s.sound_enabled)
            self._notif_cb.setChecked(s.notifications_enabled)
        finally:
            self._populating = False

    def _on_changed(self, *_args) -> None:
        if self._populating:
            return
        self._provider.replace(self.current_values())

    def current_values(self) -> TimerSettings:
        return TimerSettings(
            pomodoro_duration=self._pomodoro_spin.value(),
            short_break_duration=self._short_spin.value(),
            long_break_duration=self._long_spin.value(),
            pomodoros_until_long_break=self._until_long_spin.value(),
            auto_start_breaks=self._auto_breaks_cb.isChecked(),
            auto_start_pomodoros=self._auto_pomodoros_cb.isChecked(),
            sound_enabled=self._sound_cb.isChecked(),
            notifications_enabled=self._notif_cb.isChecked(),
        )
