"""
User-tunable runtime settings — persisted to data/settings.json.

Import get_settings() anywhere in the engine to read current values.
Import update_settings(patch) to mutate and save.
snapshot() turns the raw dict into the typed values the control loop
evaluates; it is rebuilt on every trigger, never cached.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config import config
from .router.policy import AutoStartConfig, AutoStartMode, TimeOfDay, TimeWindow

logger = logging.getLogger(__name__)

_FILE: Path = config.data_dir / "settings.json"

DEFAULTS: dict[str, Any] = {
    "work_minutes": 30,
    "break_minutes": 2,
    "auto_start_mode": AutoStartMode.MANUAL.value,
    "start_time": "09:00",
    "end_time": "18:00",
    "selected_focus_modes": [],
    "use_per_mode_settings": False,
    "mode_settings": {},              # focus mode → {"work_minutes", "break_minutes"}
    "user_defined_modes": [],
}

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_MODES = {m.value for m in AutoStartMode}

_current: dict[str, Any] = {}


def _accepts(key: str, value: Any) -> bool:
    """True if *value* is usable for *key*; never coerce across types."""
    default = DEFAULTS[key]
    if key in ("start_time", "end_time"):
        return isinstance(value, str) and bool(_HHMM.match(value))
    if key == "auto_start_mode":
        return value in _MODES
    if key == "mode_settings":
        return isinstance(value, dict) and all(
            isinstance(d, dict) and all(type(n) is int for n in d.values())
            for d in value.values()
        )
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, type(default))


def _clean(raw: dict[str, Any], origin: str) -> dict[str, Any]:
    """Known keys with acceptable values; anything else is dropped with a warning."""
    out: dict[str, Any] = {}
    for k, v in raw.items():
        if k not in DEFAULTS:
            continue
        if not _accepts(k, v):
            logger.warning("Ignoring invalid %s in %s: %r", k, origin, v)
            continue
        out[k] = int(v) if type(DEFAULTS[k]) is int else v
    return out


def _load() -> None:
    global _current
    _current = dict(DEFAULTS)
    if _FILE.exists():
        try:
            saved = json.loads(_FILE.read_text())
        except (OSError, ValueError):
            logger.warning("Malformed settings file %s, using defaults", _FILE)
            return
        if not isinstance(saved, dict):
            logger.warning("Malformed settings file %s, using defaults", _FILE)
            return
        _current.update(_clean(saved, str(_FILE)))


def get_settings() -> dict[str, Any]:
    """Return a copy of the current settings dict."""
    if not _current:
        _load()
    return dict(_current)


def update_settings(patch: dict[str, Any]) -> dict[str, Any]:
    """Apply *patch* (unknown keys ignored), persist to disk, return full settings."""
    if not _current:
        _load()
    _current.update(_clean(patch, "update"))
    _FILE.parent.mkdir(parents=True, exist_ok=True)
    _FILE.write_text(json.dumps(_current, indent=2))
    return dict(_current)


# ---------------------------------------------------------------------------
# Typed snapshot for the control loop
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SettingsSnapshot:
    auto_start: AutoStartConfig
    work_minutes: int = 30
    break_minutes: int = 2
    use_per_mode_settings: bool = False
    mode_settings: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def durations_for(self, focus_mode: Optional[str]) -> Tuple[int, int]:
        """(work_minutes, break_minutes) in effect for the given focus mode."""
        if not self.use_per_mode_settings or not focus_mode:
            return self.work_minutes, self.break_minutes
        per_mode = self.mode_settings.get(focus_mode, {})
        return (
            int(per_mode.get("work_minutes", 30)),
            int(per_mode.get("break_minutes", 2)),
        )


def snapshot(settings: Optional[dict[str, Any]] = None) -> SettingsSnapshot:
    s = dict(DEFAULTS)
    s.update(_clean(get_settings() if settings is None else settings, "settings"))
    return SettingsSnapshot(
        auto_start=AutoStartConfig(
            mode=AutoStartMode(s["auto_start_mode"]),
            window=TimeWindow(
                start=TimeOfDay.parse(s["start_time"]),
                end=TimeOfDay.parse(s["end_time"]),
            ),
            focus_modes=frozenset(s["selected_focus_modes"]),
        ),
        work_minutes=int(s["work_minutes"]),
        break_minutes=int(s["break_minutes"]),
        use_per_mode_settings=bool(s["use_per_mode_settings"]),
        mode_settings=dict(s["mode_settings"]),
    )


# Eagerly load on import
_load()
