"""Main timer display widget.

Layout (top → bottom):
    - Mode tabs (Pomodoro / Short Break / Long Break)
    - Big MM:SS countdown + progress bar
    - Start/Pause, Reset, Skip
    - Current task line + task input
    - Completed Pomodoro counter
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QLineEdit, QFrame, QProgressBar, QButtonGroup,
)

from ..timer.controller import TimerController
from ..timer.engine import TimerState
from ..timer.formatting import format_time
from ..timer.modes import Mode, MODE_LABELS


class TimerWidget(QWidget):
    """The timer card shown on the Focus tab."""

    def __init__(
        self, controller: TimerController, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._build_ui()
        self._connect_signals()
        self._on_state_changed(controller.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── mode tabs ────────────────────────────────────────────────
        tab_row = QHBoxLayout()
        tab_row.setSpacing(8)
        self._mode_group = QButtonGroup(self)
        self._mode_group.setExclusive(True)
        self._mode_buttons: dict[Mode, QPushButton] = {}
        for mode in Mode:
            btn = QPushButton(MODE_LABELS[mode], card)
            btn.setCheckable(True)
            btn.setObjectName("modeTab")
            self._mode_group.addButton(btn)
            self._mode_buttons[mode] = btn
            tab_row.addWidget(btn)
        layout.addLayout(tab_row)

        # ── countdown ────────────────────────────────────────────────
        self._time_label = QLabel("25:00", card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label.setStyleSheet("font-size: 72px; font-weight: 700;")
        layout.addWidget(self._time_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        self._progress.setFixedHeight(6)
        layout.addWidget(self._progress)

        # ── main controls ────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("secondaryButton")

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")

        self._skip_btn = QPushButton("Skip", card)
        self._skip_btn.setObjectName("secondaryButton")

        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._skip_btn)
        layout.addLayout(btn_row)

        # ── task ─────────────────────────────────────────────────────
        self._task_label = QLabel("", card)
        self._task_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._task_label.setObjectName("taskLabel")
        layout.addWidget(self._task_label)

        self._task_input = QLineEdit(card)
        self._task_input.setPlaceholderText("What are you working on?")
        self._task_input.setMaxLength(255)
        self._task_input.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._task_input)

        # ── counter ──────────────────────────────────────────────────
        self._count_label = QLabel("#0", card)
        self._count_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._count_label.setObjectName("countLabel")
        layout.addWidget(self._count_label)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._controller.toggle)
        self._reset_btn.clicked.connect(self._controller.reset)
        self._skip_btn.clicked.connect(self._controller.skip)
        for mode, btn in self._mode_buttons.items():
            btn.clicked.connect(lambda _checked=False, m=mode: self._controller.switch_mode(m))
        self._task_input.returnPressed.connect(self._on_task_entered)

        self._controller.tick.connect(self._refresh_time)
        self._controller.state_changed.connect(self._on_state_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_task_entered(self) -> None:
        text = self._task_input.text()
        self._controller.set_task(text)
        self._task_input.clear()

    def _on_state_changed(self, state: TimerState) -> None:
        self._start_pause_btn.setText("Pause" if state.is_running else "Start")

        btn = self._mode_buttons[state.mode]
        if not btn.isChecked():
            btn.setChecked(True)

        if state.current_task:
            self._task_label.setText(f"Working on: {state.current_task}")
        else:
            self._task_label.setText("")
        self._count_label.setText(f"#{state.completed_pomodoros}")
        self._refresh_time(state.remaining_seconds)

    def _refresh_time(self, remaining: int) -> None:
        self._time_label.setText(format_time(remaining))
        pct = self._controller.engine.percent_complete
        self._progress.setValue(int(pct * 1000))

    # ── read-only accessors (tests, main window) ──────────────────────────

    @property
    def time_text(self) -> str:
        return self._time_label.text()

    @property
    def start_button_text(self) -> str:
        return self._start_pause_btn.text()

    @property
    def task_text(self) -> str:
        return self._task_label.text()

    def mode_button(self, mode: Mode) -> QPushButton:
        return self._mode_buttons[mode]
