"""
Desktop Signal Receiver — converts events POSTed by a desktop agent
(focus mode changes, screen lock/unlock) into controller events.
"""

from __future__ import annotations

from typing import Any, Dict

from ...router.controller import ControllerEvent, FocusChanged, ScreenLocked, ScreenUnlocked

_EVENT_MAP: Dict[str, str] = {
    "FOCUS_CHANGED": "focus_changed",
    "FOCUS_CLEARED": "focus_changed",
    "SCREEN_LOCK": "screen_locked",
    "SCREEN_SLEEP": "screen_locked",
    "SCREEN_UNLOCK": "screen_unlocked",
    "SCREEN_WAKE": "screen_unlocked",
}


def parse_desktop_event(payload: Dict[str, Any]) -> ControllerEvent | None:
    """
    Parse a desktop agent event payload. Returns None for unknown types.

    Expected shape:
    {
        "type": "FOCUS_CHANGED",
        "timestamp": 1700000000.123,
        "data": { "mode": "Work" }
    }
    """
    raw_type = payload.get("type", "")
    internal_type = _EVENT_MAP.get(raw_type)
    if not internal_type:
        return None

    data = payload.get("data") or {}

    if internal_type == "screen_locked":
        return ScreenLocked()
    if internal_type == "screen_unlocked":
        return ScreenUnlocked()

    mode = None if raw_type == "FOCUS_CLEARED" else data.get("mode")
    return FocusChanged(mode=mode or None)
