"""Tests for the desktop signal parser."""

from stretchcat.router.controller import FocusChanged, ScreenLocked, ScreenUnlocked
from stretchcat.telemetry.sources.desktop import parse_desktop_event


class TestDesktopParser:
    def test_focus_changed_parsed(self):
        evt = parse_desktop_event({"type": "FOCUS_CHANGED", "data": {"mode": "Work"}})
        assert evt == FocusChanged(mode="Work")

    def test_focus_changed_without_mode_means_none(self):
        assert parse_desktop_event({"type": "FOCUS_CHANGED", "data": {}}) == FocusChanged(None)

    def test_focus_cleared_ignores_payload_mode(self):
        evt = parse_desktop_event({"type": "FOCUS_CLEARED", "data": {"mode": "Work"}})
        assert evt == FocusChanged(None)

    def test_screen_lock_and_sleep(self):
        assert isinstance(parse_desktop_event({"type": "SCREEN_LOCK"}), ScreenLocked)
        assert isinstance(parse_desktop_event({"type": "SCREEN_SLEEP", "data": {}}), ScreenLocked)

    def test_screen_unlock_and_wake(self):
        assert isinstance(parse_desktop_event({"type": "SCREEN_UNLOCK", "data": {}}), ScreenUnlocked)
        assert isinstance(parse_desktop_event({"type": "SCREEN_WAKE", "data": {}}), ScreenUnlocked)

    def test_unknown_returns_none(self):
        assert parse_desktop_event({"type": "BOGUS", "data": {}}) is None
