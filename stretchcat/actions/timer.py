"""
Interval Timer — the work/break state machine.

    IDLE ──start──▶ WORKING ──(0s)──▶ BREAKING ──(0s)──▶ WORKING ──▶ …
                      │  ▲               │  ▲
                pause │  │ start   pause │  │ start
                      ▼  │               ▼  │
                     PAUSED (remembers the phase it interrupted)

The timer never throws for a disallowed transition: a stale button press
or a late signal is a silent no-op. `tick()` is driven from outside once
per elapsed second while `clock_running` is true.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    IDLE = "idle"
    WORKING = "working"
    BREAKING = "breaking"
    PAUSED = "paused"


class PausedReason(str, Enum):
    POLICY_BLOCKED = "policy_blocked"
    SCREEN_LOCKED = "screen_locked"
    USER_REQUESTED = "user_requested"


_STATUS_TEXT = {
    TimerState.IDLE: "Ready",
    TimerState.WORKING: "Working…",
    TimerState.BREAKING: "Break time",
    TimerState.PAUSED: "Paused",
}


@dataclass
class TimerSnapshot:
    state: TimerState
    phase: Optional[TimerState]
    paused_reason: Optional[PausedReason]
    remaining_seconds: int
    total_seconds: int
    progress: float
    time_string: str
    status: str
    work_seconds: int
    break_seconds: int


class IntervalTimer:

    def __init__(self, work_minutes: int = 30, break_minutes: int = 2):
        self._work_seconds = max(0, work_minutes) * 60
        self._break_seconds = max(0, break_minutes) * 60
        self.state = TimerState.IDLE
        self.remaining_seconds = self._work_seconds
        self.total_seconds = self._work_seconds
        self.paused_reason: Optional[PausedReason] = None
        self._paused_phase: Optional[TimerState] = None
        self._clock_running = False
        self.on_break_start: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def work_seconds(self) -> int:
        return self._work_seconds

    @property
    def break_seconds(self) -> int:
        return self._break_seconds

    @property
    def clock_running(self) -> bool:
        return self._clock_running

    def update_durations(self, work_minutes: int, break_minutes: int) -> None:
        """Idle timers pick up the new work length now; running ones at the next cycle."""
        self._work_seconds = max(0, work_minutes) * 60
        self._break_seconds = max(0, break_minutes) * 60
        if self.state == TimerState.IDLE:
            self.remaining_seconds = self._work_seconds
            self.total_seconds = self._work_seconds

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self.state == TimerState.IDLE:
            self._enter_work()
        elif self.state == TimerState.PAUSED:
            self.state = self._paused_phase or TimerState.WORKING
            self._paused_phase = None
            self.paused_reason = None
            self._clock_running = True
            logger.debug("Resumed %s with %ss left", self.state.value, self.remaining_seconds)

    def pause(self, reason: PausedReason = PausedReason.USER_REQUESTED) -> None:
        if self.state not in (TimerState.WORKING, TimerState.BREAKING):
            return
        self._clock_running = False
        self._paused_phase = self.state
        self.paused_reason = reason
        self.state = TimerState.PAUSED
        logger.debug("Paused (%s) with %ss left", reason.value, self.remaining_seconds)

    def reset(self) -> None:
        self._clock_running = False
        self.state = TimerState.IDLE
        self._paused_phase = None
        self.paused_reason = None
        self.remaining_seconds = self._work_seconds
        self.total_seconds = self._work_seconds

    def start_break(self) -> None:
        self._paused_phase = None
        self.paused_reason = None
        self.state = TimerState.BREAKING
        self.remaining_seconds = self._break_seconds
        self.total_seconds = self._break_seconds
        self._clock_running = True
        logger.debug("Break started (%ss)", self._break_seconds)
        if self.on_break_start is not None:
            self.on_break_start()

    def skip_break(self) -> None:
        if self.state != TimerState.BREAKING:
            return
        self._enter_work()

    def tick(self) -> None:
        if not self._clock_running:
            return
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds > 0:
            return
        if self.state == TimerState.WORKING:
            self.start_break()
        elif self.state == TimerState.BREAKING:
            self._enter_work()

    def _enter_work(self) -> None:
        self._paused_phase = None
        self.paused_reason = None
        self.state = TimerState.WORKING
        self.remaining_seconds = self._work_seconds
        self.total_seconds = self._work_seconds
        self._clock_running = True
        logger.debug("Work phase started (%ss)", self._work_seconds)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Optional[TimerState]:
        """The phase being counted down, or the one interrupted by a pause."""
        if self.state == TimerState.PAUSED:
            return self._paused_phase
        if self.state == TimerState.IDLE:
            return None
        return self.state

    @property
    def is_running(self) -> bool:
        return self.state in (TimerState.WORKING, TimerState.BREAKING)

    @property
    def progress(self) -> float:
        if self.total_seconds <= 0:
            return 0.0
        return (self.total_seconds - self.remaining_seconds) / self.total_seconds

    @property
    def time_string(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            state=self.state,
            phase=self.phase,
            paused_reason=self.paused_reason,
            remaining_seconds=self.remaining_seconds,
            total_seconds=self.total_seconds,
            progress=self.progress,
            time_string=self.time_string,
            status=_STATUS_TEXT[self.state],
            work_seconds=self._work_seconds,
            break_seconds=self._break_seconds,
        )
