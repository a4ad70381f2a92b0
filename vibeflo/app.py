"""Main application window for VibeFlo."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QIcon, QImage, QPainter, QColor, QPen, QPixmap, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QTabWidget, QStatusBar,
    QSystemTrayIcon, QMenu, QApplication, QLineEdit,
)

from .audio.sounds import SoundManager
from .notifications import NotificationSink, SoundPlayer, TrayNotificationSink
from .settings import SETTINGS_PATH, SettingsProvider, load_settings
from .stats import DatabaseStatsReporter, StatsReporter
from .tasks import TaskBinding, TaskList
from .timer.controller import TimerController
from .timer.engine import TimerEngine, TimerState, Transition
from .timer.formatting import window_title
from .timer.modes import Mode, mode_label
from .ui.settings_dialog import SettingsDialog
from .ui.stats_widget import StatsWidget
from .ui.task_panel import TaskPanel
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)


# ── tray‑icon image generation ────────────────────────────────────────────


def _make_tray_icon(state: TimerState) -> QIcon:
    """Generate a 32×32 monochrome icon for the tray.

    - stopped:   thin circle outline
    - Pomodoro:  filled circle
    - break:     thin circle with small dot in centre
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)

    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if state.is_running and state.mode == Mode.POMODORO:
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    else:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        if state.is_running:
            p.setPen(Qt.PenStyle.NoPen)
            p.setBrush(colour)
            dot_r = 6
            p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)

    p.end()
    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


class VibeFloApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        *,
        settings_provider: SettingsProvider | None = None,
        stats_reporter: StatsReporter | None = None,
        notification_sink: NotificationSink | None = None,
        sound_player: SoundPlayer | None = None,
        show_tray: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle("VibeFlo")
        self.setMinimumSize(480, 640)

        # ── settings ──────────────────────────────────────────────────
        self._settings_provider = settings_provider or SettingsProvider(
            load_settings(), path=SETTINGS_PATH,
        )

        # ── system tray icon (also the notification sink) ─────────────
        self._tray_icon = QSystemTrayIcon(self)
        if notification_sink is None:
            notification_sink = TrayNotificationSink(self._tray_icon)

        # ── completion sounds ─────────────────────────────────────────
        if sound_player is None:
            sound_player = SoundManager(parent=self)

        # ── timer ─────────────────────────────────────────────────────
        self._engine = TimerEngine(
            self._settings_provider.settings,
            stats_reporter=stats_reporter or DatabaseStatsReporter(),
            notification_sink=notification_sink,
            sound_player=sound_player,
        )
        self._controller = TimerController(self._engine, self)
        self._settings_provider.subscribe(self._controller.apply_settings)

        # ── tasks ─────────────────────────────────────────────────────
        self._task_list = TaskList()
        self._binding = TaskBinding(
            self._engine,
            self._task_list,
            on_change=lambda _task: self._controller.state_changed.emit(
                self._engine.state
            ),
        )
        self._binding.select_first_incomplete()

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)

        self._tabs = QTabWidget(central)
        root_layout.addWidget(self._tabs)

        focus_container = QWidget(self._tabs)
        focus_layout = QVBoxLayout(focus_container)
        focus_layout.setContentsMargins(0, 0, 0, 0)

        self._timer_widget = TimerWidget(self._controller, focus_container)
        focus_layout.addWidget(self._timer_widget)

        self._task_panel = TaskPanel(self._task_list, self._binding, focus_container)
        focus_layout.addWidget(self._task_panel)
        self._tabs.addTab(focus_container, "Focus")

        self._stats_widget = StatsWidget(self._tabs)
        self._tabs.addTab(self._stats_widget, "Stats")

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready to focus!")

        self._tray_icon.setIcon(_make_tray_icon(self._engine.state))
        self._tray_icon.setToolTip("VibeFlo")
        self._tray_icon.activated.connect(self._on_tray_activated)
        self._build_tray_menu()
        if show_tray and QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon.show()

        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.tick.connect(self._on_tick)
        self._controller.transitioned.connect(self._on_transitioned)
        self._tabs.currentChanged.connect(self._on_tab_changed)

        self._on_state_changed(self._engine.state)

    # ── accessors ─────────────────────────────────────────────────────────

    @property
    def controller(self) -> TimerController:
        return self._controller

    @property
    def timer_widget(self) -> TimerWidget:
        return self._timer_widget

    @property
    def task_panel(self) -> TaskPanel:
        return self._task_panel

    # ══════════════════════════════════════════════════════════════════
    #  SYSTEM TRAY
    # ══════════════════════════════════════════════════════════════════

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)

        self._tray_start_action = menu.addAction("Start")
        self._tray_start_action.triggered.connect(self._controller.toggle)

        skip_action = menu.addAction("Skip")
        skip_action.triggered.connect(self._controller.skip)

        menu.addSeparator()
        show_action = menu.addAction("Show VibeFlo")
        show_action.triggered.connect(self._show_window)

        menu.addSeparator()
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self.close)

        self._tray_icon.setContextMenu(menu)

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._show_window()

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    # ══════════════════════════════════════════════════════════════════
    #  MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()
        timer_menu = menu_bar.addMenu("Timer")

        toggle = QAction("Start / Pause", self)
        toggle.setShortcut(QKeySequence("Ctrl+Space"))
        toggle.triggered.connect(self._controller.toggle)
        timer_menu.addAction(toggle)

        reset = QAction("Reset", self)
        reset.setShortcut(QKeySequence("Ctrl+R"))
        reset.triggered.connect(self._controller.reset)
        timer_menu.addAction(reset)

        skip = QAction("Skip", self)
        skip.setShortcut(QKeySequence("Ctrl+N"))
        skip.triggered.connect(self._controller.skip)
        timer_menu.addAction(skip)

        timer_menu.addSeparator()
        for i, mode in enumerate(Mode, start=1):
            action = QAction(mode_label(mode), self)
            action.setShortcut(QKeySequence(f"Ctrl+{i}"))
            action.triggered.connect(
                lambda _checked=False, m=mode: self._controller.switch_mode(m)
            )
            timer_menu.addAction(action)

        timer_menu.addSeparator()
        prefs = QAction("Settings…", self)
        prefs.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs.setShortcut(QKeySequence("Ctrl+,"))
        prefs.triggered.connect(self._open_settings)
        timer_menu.addAction(prefs)

    def _open_settings(self) -> None:
        SettingsDialog(self._settings_provider, self).exec()

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        self.setWindowTitle(window_title(state))
        self._tray_icon.setIcon(_make_tray_icon(state))
        self._tray_icon.setToolTip(window_title(state))
        self._tray_start_action.setText("Pause" if state.is_running else "Start")

    def _on_tick(self, _remaining: int) -> None:
        state = self._engine.state
        self.setWindowTitle(window_title(state))
        self._tray_icon.setToolTip(window_title(state))

    def _on_transitioned(self, transition: Transition) -> None:
        if transition.completed and transition.previous_mode == Mode.POMODORO:
            self._status_bar.showMessage(
                f"Pomodoro #{self._engine.completed_pomodoros} done. "
                f"{mode_label(transition.mode)} next."
            )
            self._task_panel.refresh()
            if self._tabs.currentWidget() is self._stats_widget:
                self._stats_widget.refresh()
        elif transition.completed:
            self._status_bar.showMessage("Break over, let's go!")
        else:
            self._status_bar.showMessage(f"Skipped to {mode_label(transition.mode)}")

    def _on_tab_changed(self, _index: int) -> None:
        if self._tabs.currentWidget() is self._stats_widget:
            self._stats_widget.refresh()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Tear down the tick source before the window goes away."""
        self._controller.shutdown()
        self._settings_provider.unsubscribe(self._controller.apply_settings)
        self._tray_icon.hide()
        event.accept()
        app = QApplication.instance()
        if app is not None and not app.quitOnLastWindowClosed():
            app.quit()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles the timer unless a text field has focus."""
        if event.key() == Qt.Key.Key_Space and not event.modifiers():
            focused = QApplication.focusWidget()
            if not isinstance(focused, QLineEdit):
                self._controller.toggle()
                event.accept()
                return
        super().keyPressEvent(event)
