"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..actions.timer import TimerSnapshot
from ..router.policy import AutoStartMode

_HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"

# ── Signals ────────────────────────────────────────────────────────────────

class SignalEventIn(BaseModel):
    source: str = Field(..., description="desktop")
    type: str   = Field(..., description="FOCUS_CHANGED | SCREEN_LOCK | SCREEN_UNLOCK | …")
    timestamp: Optional[float] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class FocusModeIn(BaseModel):
    mode: Optional[str] = None


class FocusStateOut(BaseModel):
    current_mode: Optional[str]
    active: bool
    manual_mode: Optional[str]


class UserModeIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)


class ModeListOut(BaseModel):
    modes: List[str]
    user_defined: List[str]


# ── Timer ──────────────────────────────────────────────────────────────────

class TimerStateOut(BaseModel):
    state: str
    phase: Optional[str]
    paused_reason: Optional[str]
    remaining_seconds: int = Field(..., ge=0)
    total_seconds: int = Field(..., ge=0)
    progress: float = Field(..., ge=0.0, le=1.0)
    time_string: str
    status: str
    work_seconds: int
    break_seconds: int

    @classmethod
    def from_snapshot(cls, snap: TimerSnapshot) -> "TimerStateOut":
        return cls(
            state=snap.state.value,
            phase=snap.phase.value if snap.phase else None,
            paused_reason=snap.paused_reason.value if snap.paused_reason else None,
            remaining_seconds=snap.remaining_seconds,
            total_seconds=snap.total_seconds,
            progress=snap.progress,
            time_string=snap.time_string,
            status=snap.status,
            work_seconds=snap.work_seconds,
            break_seconds=snap.break_seconds,
        )


# ── Policy ─────────────────────────────────────────────────────────────────

class PolicyStateOut(BaseModel):
    mode: str
    satisfied: bool
    reason: str
    description: str
    should_auto_start: bool
    is_allowed_to_run: bool
    focus_mode: Optional[str]
    screen_locked: bool


# ── Settings ───────────────────────────────────────────────────────────────

class ModeDurations(BaseModel):
    work_minutes:  int = Field(30, ge=1, le=240)
    break_minutes: int = Field(2,  ge=1, le=60)


class SettingsPatch(BaseModel):
    work_minutes:          Optional[int]           = Field(None, ge=1, le=240)
    break_minutes:         Optional[int]           = Field(None, ge=1, le=60)
    auto_start_mode:       Optional[AutoStartMode] = None
    start_time:            Optional[str]           = Field(None, pattern=_HHMM)
    end_time:              Optional[str]           = Field(None, pattern=_HHMM)
    selected_focus_modes:  Optional[List[str]]     = None
    use_per_mode_settings: Optional[bool]          = None
    mode_settings:         Optional[Dict[str, ModeDurations]] = None
