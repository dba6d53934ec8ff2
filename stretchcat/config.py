"""
Central configuration for the StretchCat engine.
All values can be overridden via environment variables or a local config.json.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"
_DND_DB = Path.home() / "Library" / "DoNotDisturb" / "DB"


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8766

    # Control loop
    timer_tick_s: float = 1.0                # interval timer countdown step
    policy_interval_s: float = 60.0          # catches time-window boundary crossings

    # Focus signal
    focus_source: str = "assertions"         # "assertions" | "manual"
    focus_poll_interval_s: float = 5.0
    assertions_path: Path = field(default_factory=lambda: _DND_DB / "Assertions.json")
    mode_configurations_path: Path = field(default_factory=lambda: _DND_DB / "ModeConfigurations.json")

    # Presentation
    notifications_enabled: bool = True

    # Storage
    data_dir: Path = field(default_factory=lambda: _ROOT / "data")

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.assertions_path = Path(self.assertions_path)
        self.mode_configurations_path = Path(self.mode_configurations_path)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load(cls) -> "Config":
        cfg = cls()
        if _CONFIG_FILE.exists():
            overrides = json.loads(_CONFIG_FILE.read_text())
            for k, v in overrides.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, _coerce(getattr(cfg, k), v))
        # environment variable overrides (STRETCHCAT_*)
        for k in cfg.__dataclass_fields__:  # type: ignore[attr-defined]
            env_key = f"STRETCHCAT_{k.upper()}"
            if env_key in os.environ:
                setattr(cfg, k, _coerce(getattr(cfg, k), os.environ[env_key]))
        return cfg


def _coerce(current, value):
    if isinstance(current, bool) and isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return type(current)(value)


# Module-level singleton
config = Config.load()
