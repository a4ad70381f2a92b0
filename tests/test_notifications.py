"""Tests for notification sinks."""

from PyQt6.QtWidgets import QSystemTrayIcon

from vibeflo.notifications import (
    NotificationSink,
    NullNotificationSink,
    RecordingNotificationSink,
    TrayNotificationSink,
)


class TestSinks:

    def test_protocol(self):
        assert isinstance(NullNotificationSink(), NotificationSink)
        assert isinstance(RecordingNotificationSink(), NotificationSink)

    def test_null_sink_never_granted(self):
        sink = NullNotificationSink()
        assert sink.request_permission() is False
        sink.notify("t", "b")

    def test_recording_sink(self):
        sink = RecordingNotificationSink()
        assert sink.request_permission() is True
        sink.notify("Time for a break!", "Short Break: 5 min")
        assert sink.sent == [("Time for a break!", "Short Break: 5 min")]
        assert sink.permission_requests == 1

    def test_recording_sink_denied(self):
        assert RecordingNotificationSink(granted=False).request_permission() is False


class TestTrayNotificationSink:

    def test_disabled_is_never_granted(self, qapp):
        tray = QSystemTrayIcon()
        sink = TrayNotificationSink(tray, enabled=False)
        assert sink.request_permission() is False

    def test_hidden_tray_is_not_granted(self, qapp):
        tray = QSystemTrayIcon()
        assert TrayNotificationSink(tray).request_permission() is False

    def test_notify_shows_message(self):
        class FakeTray:
            def __init__(self):
                self.messages = []

            def showMessage(self, title, body):
                self.messages.append((title, body))

        tray = FakeTray()
        TrayNotificationSink(tray).notify("Title", "Body")
        assert tray.messages == [("Title", "Body")]
