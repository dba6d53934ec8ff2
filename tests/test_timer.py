"""Tests for the interval timer state machine."""

import pytest

from stretchcat.actions.timer import IntervalTimer, PausedReason, TimerState


@pytest.fixture
def timer():
    return IntervalTimer(work_minutes=25, break_minutes=5)


def _running(timer: IntervalTimer, state: TimerState, remaining: int) -> IntervalTimer:
    if state == TimerState.WORKING:
        timer.start()
    else:
        timer.start_break()
    timer.remaining_seconds = remaining
    return timer


class TestStart:
    @pytest.mark.parametrize("work,brk", [(1, 1), (25, 5), (30, 2), (90, 15)])
    def test_start_from_idle_loads_full_work_phase(self, work, brk):
        t = IntervalTimer(work, brk)
        t.start()
        assert t.state == TimerState.WORKING
        assert t.remaining_seconds == t.total_seconds == work * 60
        assert t.clock_running

    def test_start_while_working_is_noop(self, timer):
        _running(timer, TimerState.WORKING, 600)
        timer.start()
        assert timer.state == TimerState.WORKING
        assert timer.remaining_seconds == 600

    def test_start_while_breaking_is_noop(self, timer):
        _running(timer, TimerState.BREAKING, 42)
        timer.start()
        assert timer.state == TimerState.BREAKING
        assert timer.remaining_seconds == 42

    def test_resume_returns_to_interrupted_break(self, timer):
        _running(timer, TimerState.BREAKING, 120)
        timer.pause()
        timer.start()
        assert timer.state == TimerState.BREAKING
        assert timer.remaining_seconds == 120
        assert timer.paused_reason is None


class TestPause:
    def test_pause_twice_is_idempotent(self, timer):
        _running(timer, TimerState.WORKING, 900)
        timer.pause()
        first = timer.remaining_seconds
        timer.pause()
        assert timer.state == TimerState.PAUSED
        assert timer.remaining_seconds == first == 900

    def test_second_pause_keeps_original_reason(self, timer):
        _running(timer, TimerState.WORKING, 900)
        timer.pause(PausedReason.POLICY_BLOCKED)
        timer.pause(PausedReason.USER_REQUESTED)
        assert timer.paused_reason == PausedReason.POLICY_BLOCKED

    def test_pause_from_idle_is_noop(self, timer):
        timer.pause()
        assert timer.state == TimerState.IDLE

    def test_paused_clock_ignores_ticks(self, timer):
        _running(timer, TimerState.WORKING, 10)
        timer.pause()
        timer.tick()
        timer.tick()
        assert timer.remaining_seconds == 10

    def test_phase_reports_interrupted_phase(self, timer):
        _running(timer, TimerState.BREAKING, 10)
        timer.pause(PausedReason.SCREEN_LOCKED)
        assert timer.phase == TimerState.BREAKING
        assert timer.paused_reason == PausedReason.SCREEN_LOCKED


class TestReset:
    @pytest.mark.parametrize("state", [TimerState.WORKING, TimerState.BREAKING])
    def test_reset_returns_to_idle_with_work_duration(self, timer, state):
        _running(timer, state, 17)
        timer.reset()
        assert timer.state == TimerState.IDLE
        assert timer.remaining_seconds == timer.total_seconds == 25 * 60
        assert not timer.clock_running

    def test_reset_from_paused(self, timer):
        _running(timer, TimerState.WORKING, 17)
        timer.pause()
        timer.reset()
        assert timer.state == TimerState.IDLE
        assert timer.paused_reason is None


class TestCycle:
    def test_work_expiry_starts_break_and_fires_callback_once(self, timer):
        calls = []
        timer.on_break_start = lambda: calls.append(timer.state)
        _running(timer, TimerState.WORKING, 1)
        timer.tick()
        assert timer.state == TimerState.BREAKING
        assert timer.remaining_seconds == timer.total_seconds == 5 * 60
        assert calls == [TimerState.BREAKING]

    def test_break_expiry_continues_into_work(self, timer):
        _running(timer, TimerState.BREAKING, 1)
        timer.tick()
        assert timer.state == TimerState.WORKING
        assert timer.remaining_seconds == timer.total_seconds == 25 * 60
        assert timer.clock_running

    def test_tick_counts_down(self, timer):
        timer.start()
        for _ in range(3):
            timer.tick()
        assert timer.remaining_seconds == 25 * 60 - 3

    def test_tick_while_idle_is_noop(self, timer):
        timer.tick()
        assert timer.state == TimerState.IDLE
        assert timer.remaining_seconds == 25 * 60

    def test_manual_break_fires_callback(self, timer):
        calls = []
        timer.on_break_start = lambda: calls.append(1)
        timer.start_break()
        assert timer.state == TimerState.BREAKING
        assert calls == [1]

    def test_zero_length_work_phase_expires_on_next_tick(self):
        t = IntervalTimer(0, 1)
        t.start()
        assert t.remaining_seconds == 0
        t.tick()
        assert t.state == TimerState.BREAKING
        assert t.remaining_seconds == 60


class TestSkipBreak:
    def test_skip_break_starts_fresh_work_phase(self, timer):
        _running(timer, TimerState.BREAKING, 200)
        timer.skip_break()
        assert timer.state == TimerState.WORKING
        assert timer.remaining_seconds == timer.total_seconds == 25 * 60
        assert timer.clock_running

    def test_skip_break_while_working_is_noop(self, timer):
        _running(timer, TimerState.WORKING, 200)
        timer.skip_break()
        assert timer.state == TimerState.WORKING
        assert timer.remaining_seconds == 200


class TestDurations:
    def test_update_while_idle_applies_immediately(self, timer):
        timer.update_durations(50, 10)
        assert timer.remaining_seconds == timer.total_seconds == 50 * 60

    def test_update_while_running_waits_for_next_cycle(self, timer):
        _running(timer, TimerState.WORKING, 1)
        timer.update_durations(50, 10)
        assert timer.total_seconds == 25 * 60
        timer.tick()
        assert timer.state == TimerState.BREAKING
        assert timer.total_seconds == 10 * 60


class TestDerived:
    def test_progress(self, timer):
        _running(timer, TimerState.WORKING, 25 * 60 // 2)
        assert timer.progress == pytest.approx(0.5, abs=0.001)

    def test_progress_zero_total(self):
        t = IntervalTimer(0, 0)
        assert t.progress == 0.0

    def test_time_string(self, timer):
        _running(timer, TimerState.WORKING, 65)
        assert timer.time_string == "01:05"

    def test_snapshot(self, timer):
        _running(timer, TimerState.WORKING, 30)
        snap = timer.snapshot()
        assert snap.state == TimerState.WORKING
        assert snap.phase == TimerState.WORKING
        assert snap.status == "Working…"
        assert snap.work_seconds == 25 * 60
