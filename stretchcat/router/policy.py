"""
Auto-Start Policy — decides, from the auto-start mode, the time of day and
the active focus mode, whether the interval timer may start or keep running.

Two predicates are exposed and they are deliberately not the same:

  should_auto_start  — may an idle timer start on its own?
  is_allowed_to_run  — may a running timer keep running?

Manual mode never self-starts but never force-pauses a user-started run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import FrozenSet, Optional, Union


class AutoStartMode(str, Enum):
    MANUAL = "manual"
    TIME_WINDOW = "time_window"
    FOCUS_MODE = "focus_mode"
    TIME_WINDOW_AND_FOCUS_MODE = "time_window_and_focus_mode"


class ReasonCode(str, Enum):
    MANUAL_MODE = "manual_mode"
    WITHIN_WINDOW = "within_window"
    OUTSIDE_WINDOW = "outside_window"
    FOCUS_MODE_MATCHED = "focus_mode_matched"
    NO_FOCUS_MODE = "no_focus_mode"
    FOCUS_MODE_NOT_SELECTED = "focus_mode_not_selected"


_REASON_TEXT = {
    ReasonCode.MANUAL_MODE: "Manual mode: the timer only starts when you press start",
    ReasonCode.WITHIN_WINDOW: "Inside the scheduled time window",
    ReasonCode.OUTSIDE_WINDOW: "Outside the scheduled time window",
    ReasonCode.FOCUS_MODE_MATCHED: "A selected focus mode is active",
    ReasonCode.NO_FOCUS_MODE: "No focus mode is active",
    ReasonCode.FOCUS_MODE_NOT_SELECTED: "The active focus mode is not selected for auto-start",
}


@dataclass(frozen=True)
class TimeOfDay:
    hour: int
    minute: int

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """Parse ``"HH:MM"``."""
        hour, minute = value.strip().split(":")
        return cls(int(hour), int(minute))

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class TimeWindow:
    start: TimeOfDay = TimeOfDay(9, 0)
    end: TimeOfDay = TimeOfDay(18, 0)

    def contains(self, now: Union[datetime, time]) -> bool:
        """
        Inclusive on both ends, compared on minute-of-day only.
        A window whose start is after its end wraps past midnight.
        """
        current = now.hour * 60 + now.minute
        start = self.start.minute_of_day
        end = self.end.minute_of_day
        if start <= end:
            return start <= current <= end
        return current >= start or current <= end


@dataclass(frozen=True)
class AutoStartConfig:
    """Snapshot of the auto-start settings, passed in on every evaluation."""
    mode: AutoStartMode = AutoStartMode.MANUAL
    window: TimeWindow = field(default_factory=TimeWindow)
    focus_modes: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class PolicyDecision:
    satisfied: bool
    reason: ReasonCode

    @property
    def description(self) -> str:
        return _REASON_TEXT[self.reason]


class AutoStartPolicy:
    """
    Pure evaluator over (config, now, focus_mode). Holds no state; every
    call reads the snapshot it is given.
    """

    def evaluate(
        self,
        config: AutoStartConfig,
        now: Union[datetime, time],
        focus_mode: Optional[str],
    ) -> PolicyDecision:
        mode = config.mode

        if mode == AutoStartMode.MANUAL:
            return PolicyDecision(True, ReasonCode.MANUAL_MODE)

        if mode == AutoStartMode.TIME_WINDOW:
            return self._check_window(config.window, now)

        if mode == AutoStartMode.FOCUS_MODE:
            return self._check_focus(config.focus_modes, focus_mode)

        # TIME_WINDOW_AND_FOCUS_MODE: the focus check explains a failure first
        focus = self._check_focus(config.focus_modes, focus_mode)
        if not focus.satisfied:
            return focus
        return self._check_window(config.window, now)

    def should_auto_start(
        self,
        config: AutoStartConfig,
        now: Union[datetime, time],
        focus_mode: Optional[str],
    ) -> bool:
        if config.mode == AutoStartMode.MANUAL:
            return False
        return self.evaluate(config, now, focus_mode).satisfied

    def is_allowed_to_run(
        self,
        config: AutoStartConfig,
        now: Union[datetime, time],
        focus_mode: Optional[str],
    ) -> bool:
        return self.evaluate(config, now, focus_mode).satisfied

    def describe(
        self,
        config: AutoStartConfig,
        now: Union[datetime, time],
        focus_mode: Optional[str],
    ) -> str:
        """Human-readable explanation of the current decision."""
        return self.evaluate(config, now, focus_mode).description

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    @staticmethod
    def _check_window(window: TimeWindow, now: Union[datetime, time]) -> PolicyDecision:
        if window.contains(now):
            return PolicyDecision(True, ReasonCode.WITHIN_WINDOW)
        return PolicyDecision(False, ReasonCode.OUTSIDE_WINDOW)

    @staticmethod
    def _check_focus(selected: FrozenSet[str], focus_mode: Optional[str]) -> PolicyDecision:
        if not focus_mode:
            return PolicyDecision(False, ReasonCode.NO_FOCUS_MODE)
        if focus_mode not in selected:
            return PolicyDecision(False, ReasonCode.FOCUS_MODE_NOT_SELECTED)
        return PolicyDecision(True, ReasonCode.FOCUS_MODE_MATCHED)
