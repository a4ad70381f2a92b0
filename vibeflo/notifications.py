"""Desktop notification and completion-sound capabilities.

The timer only needs two calls: ``request_permission()`` before firing
and ``notify(title, body)``.  Anything that can't notify (headless runs,
tests, a missing tray) uses ``NullNotificationSink``.

Sounds go through ``SoundPlayer.play(name)``; the Qt implementation is
``vibeflo.audio.sounds.SoundManager``.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class NotificationSink(Protocol):
    def request_permission(self) -> bool: ...

    def notify(self, title: str, body: str) -> None: ...


class NullNotificationSink:
    """Never granted, never shows anything."""

    def request_permission(self) -> bool:
        return False

    def notify(self, title: str, body: str) -> None:
        pass


class RecordingNotificationSink:
    """Keeps every notification in ``sent``.  Handy for tests and for a
    debug console."""

    def __init__(self, *, granted: bool = True) -> None:
        self.granted = granted
        self.sent: list[tuple[str, str]] = []
        self.permission_requests = 0

    def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))


class TrayNotificationSink:
    """Shows notifications as system-tray balloons.

    ``tray_icon`` is a ``QSystemTrayIcon``.  Permission is "granted"
    while the platform has a tray and the icon is visible, and the user
    hasn't muted notifications through ``enabled``.
    """

    def __init__(self, tray_icon, *, enabled: bool = True) -> None:
        self._tray_icon = tray_icon
        self.enabled = enabled

    def request_permission(self) -> bool:
        if not self.enabled:
            return False
        from PyQt6.QtWidgets import QSystemTrayIcon

        if not QSystemTrayIcon.isSystemTrayAvailable():
            return False
        if not QSystemTrayIcon.supportsMessages():
            return False
        return self._tray_icon.isVisible()

    def notify(self, title: str, body: str) -> None:
        self._tray_icon.showMessage(title, body)
        logger.debug("Tray notification: %s | %s", title, body)


# ── sounds ────────────────────────────────────────────────────────────────


@runtime_checkable
class SoundPlayer(Protocol):
    def play(self, name: str) -> None: ...


class NullSoundPlayer:
    """Silent player for headless runs."""

    def play(self, name: str) -> None:
        pass


class RecordingSoundPlayer:
    """Keeps the name of every sound asked for in ``played``."""

    def __init__(self) -> None:
        self.played: list[str] = []

    def play(self, name: str) -> None:
        self.played.append(name)
