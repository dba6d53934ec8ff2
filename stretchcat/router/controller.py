"""
Schedule Controller — the control loop tying the focus signal, the clock and
the auto-start policy to the interval timer.

Every input arrives as one event on a single queue and is handled to
completion before the next one:

    Tick            periodic re-evaluation (time-window boundaries)
    FocusChanged    the focus source published a new reading
    ConfigChanged   user settings were edited
    ScreenLocked    pause a running timer until unlock
    ScreenUnlocked  resume what the lock paused

Predicates are recomputed from the latest known state on every event, so
late or out-of-order signals only cost a delayed correction.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union

from ..actions.timer import IntervalTimer, PausedReason, TimerState
from ..settings import SettingsSnapshot, snapshot
from ..telemetry.focus_source import FocusSignal, FocusSignalSource
from .policy import AutoStartMode, AutoStartPolicy, PolicyDecision

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class FocusChanged:
    mode: Optional[str] = None


@dataclass(frozen=True)
class ConfigChanged:
    pass


@dataclass(frozen=True)
class ScreenLocked:
    pass


@dataclass(frozen=True)
class ScreenUnlocked:
    pass


ControllerEvent = Union[Tick, FocusChanged, ConfigChanged, ScreenLocked, ScreenUnlocked]


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class ScheduleController:

    def __init__(
        self,
        timer: IntervalTimer,
        policy: AutoStartPolicy,
        focus_source: FocusSignalSource,
        settings_provider: Callable[[], SettingsSnapshot] = snapshot,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.timer = timer
        self.policy = policy
        self.focus_source = focus_source
        self._settings_provider = settings_provider
        self._clock = clock
        self._queue: "asyncio.Queue[ControllerEvent]" = asyncio.Queue()
        self.was_running_before_lock = False
        self.screen_locked = False
        self.last_decision: Optional[PolicyDecision] = None

        focus_source.subscribe(self._on_focus_signal)

    # ------------------------------------------------------------------
    # Event intake
    # ------------------------------------------------------------------

    def _on_focus_signal(self, signal: FocusSignal) -> None:
        self.submit(FocusChanged(signal.current_mode))

    def submit(self, event: ControllerEvent) -> None:
        """Enqueue without waiting. Must be called from the event loop thread."""
        self._queue.put_nowait(event)

    async def process(self, event: ControllerEvent) -> None:
        """Enqueue and wait until the queue has drained past it."""
        self.submit(event)
        await self._queue.join()

    def handle_pending(self) -> int:
        """Drain the queue synchronously; returns the number of events handled."""
        handled = 0
        while not self._queue.empty():
            event = self._queue.get_nowait()
            try:
                self.handle(event)
            finally:
                self._queue.task_done()
            handled += 1
        return handled

    async def run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                self.handle(event)
            except Exception:
                logger.exception("Controller failed handling %r", event)
            finally:
                self._queue.task_done()

    # ------------------------------------------------------------------
    # Handling
    # ------------------------------------------------------------------

    def handle(self, event: ControllerEvent) -> None:
        if isinstance(event, ScreenLocked):
            self._on_lock()
        elif isinstance(event, ScreenUnlocked):
            self._on_unlock()
        self.evaluate()

    def _on_lock(self) -> None:
        self.screen_locked = True
        if self.timer.is_running:
            self.was_running_before_lock = True
            self.timer.pause(PausedReason.SCREEN_LOCKED)
            logger.info("Screen locked: timer paused")

    def _on_unlock(self) -> None:
        self.screen_locked = False
        if not self.was_running_before_lock:
            return
        self.was_running_before_lock = False
        if (
            self.timer.state == TimerState.PAUSED
            and self.timer.paused_reason == PausedReason.SCREEN_LOCKED
        ):
            self.timer.start()
            logger.info("Screen unlocked: timer resumed")

    def evaluate(self) -> Optional[PolicyDecision]:
        """Re-read settings and focus mode, then drive the timer."""
        settings = self._settings_provider()
        focus_mode = self.focus_source.current_focus_mode()
        now = self._clock()
        config = settings.auto_start

        self.timer.update_durations(*settings.durations_for(focus_mode))

        decision = self.policy.evaluate(config, now, focus_mode)
        self.last_decision = decision
        timer = self.timer

        if timer.is_running:
            if not decision.satisfied:
                timer.pause(PausedReason.POLICY_BLOCKED)
                logger.info("Timer paused by policy: %s", decision.reason.value)
        elif timer.state == TimerState.PAUSED:
            if (
                timer.paused_reason == PausedReason.POLICY_BLOCKED
                and config.mode != AutoStartMode.MANUAL
                and decision.satisfied
                and not self.screen_locked
            ):
                timer.start()
                logger.info("Timer resumed by policy: %s", decision.reason.value)
        elif timer.state == TimerState.IDLE and not self.screen_locked:
            if self.policy.should_auto_start(config, now, focus_mode):
                timer.start()
                logger.info("Timer auto-started: %s", decision.reason.value)

        return decision
