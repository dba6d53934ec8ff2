"""
Signal Simulator — drives a running StretchCat engine with synthetic focus
mode changes and screen lock/unlock events, printing the timer after each
step, so you can watch the control loop without a real desktop agent.

Usage:
    # Make sure the engine is running first:
    #   python -m stretchcat.main
    # Then in a separate terminal:
    python scripts/simulate.py                   # default: run all scenarios
    python scripts/simulate.py --scenario lock   # specific scenario
    python scripts/simulate.py --speed 2.0       # 2× faster
"""

from __future__ import annotations

import argparse
import json
import time
import urllib.error
import urllib.request
from typing import Iterator

API = "http://127.0.0.1:8766"


# ---------------------------------------------------------------------------
# Low-level HTTP helpers
# ---------------------------------------------------------------------------

def _request(method: str, path: str, body: list | dict | None = None) -> dict | None:
    try:
        data = json.dumps(body).encode() if body is not None else None
        req = urllib.request.Request(
            f"{API}{path}",
            data=data,
            headers={"Content-Type": "application/json"},
            method=method,
        )
        with urllib.request.urlopen(req, timeout=3) as r:
            return json.loads(r.read())
    except (urllib.error.URLError, OSError) as e:
        print(f"  [!] Engine unreachable: {e}")
        return None


def _evt(event_type: str, data: dict | None = None) -> dict:
    return {
        "source": "desktop",
        "type": event_type,
        "timestamp": time.time(),
        "data": data or {},
    }


# ---------------------------------------------------------------------------
# Scenarios — each yields (label, method, path, body, pause_s)
# ---------------------------------------------------------------------------

def scenario_focus(speed: float = 1.0) -> Iterator[tuple]:
    """Focus mode turns on, off, and back on."""
    yield ("Configure focus-mode auto-start", "PUT", "/settings",
           {"auto_start_mode": "focus_mode", "selected_focus_modes": ["Work"]}, 0.5 / speed)
    yield ("Reset timer", "POST", "/timer/reset", None, 0.5 / speed)
    yield ("Focus: Work on → timer starts", "POST", "/signals/event",
           _evt("FOCUS_CHANGED", {"mode": "Work"}), 3.0 / speed)
    yield ("Focus cleared → timer pauses", "POST", "/signals/event",
           _evt("FOCUS_CLEARED"), 2.0 / speed)
    yield ("Focus: Work on → timer resumes", "POST", "/signals/event",
           _evt("FOCUS_CHANGED", {"mode": "Work"}), 2.0 / speed)
    yield ("Focus: Sleep → not selected, timer pauses", "POST", "/signals/event",
           _evt("FOCUS_CHANGED", {"mode": "Sleep"}), 2.0 / speed)


def scenario_lock(speed: float = 1.0) -> Iterator[tuple]:
    """A manual run survives a screen lock."""
    yield ("Manual mode", "PUT", "/settings", {"auto_start_mode": "manual"}, 0.5 / speed)
    yield ("Reset timer", "POST", "/timer/reset", None, 0.5 / speed)
    yield ("User presses start", "POST", "/timer/start", None, 3.0 / speed)
    yield ("Screen locks → paused", "POST", "/signals/event", _evt("SCREEN_LOCK"), 3.0 / speed)
    yield ("Screen unlocks → resumed", "POST", "/signals/event", _evt("SCREEN_UNLOCK"), 2.0 / speed)


def scenario_window(speed: float = 1.0) -> Iterator[tuple]:
    """A time window that contains now, then one that does not."""
    now = time.localtime()
    start = f"{max(now.tm_hour - 1, 0):02d}:00"
    end = f"{min(now.tm_hour + 1, 23):02d}:59"
    yield ("Reset timer", "POST", "/timer/reset", None, 0.5 / speed)
    yield (f"Window {start}-{end} contains now → timer starts", "PUT", "/settings",
           {"auto_start_mode": "time_window", "start_time": start, "end_time": end}, 3.0 / speed)
    past = f"{(now.tm_hour + 2) % 24:02d}:00"
    yield (f"Window {past}-{past} excludes now → timer pauses", "PUT", "/settings",
           {"start_time": past, "end_time": past}, 2.0 / speed)


def scenario_break(speed: float = 1.0) -> Iterator[tuple]:
    """Take a break by hand, then skip it."""
    yield ("Manual mode", "PUT", "/settings", {"auto_start_mode": "manual"}, 0.5 / speed)
    yield ("Break now", "POST", "/timer/break", None, 3.0 / speed)
    yield ("Skip break → straight back to work", "POST", "/timer/skip", None, 2.0 / speed)


SCENARIOS = {
    "focus": scenario_focus,
    "lock": scenario_lock,
    "window": scenario_window,
    "break": scenario_break,
}


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def _print_timer() -> None:
    timer = _request("GET", "/timer")
    policy = _request("GET", "/policy")
    if not timer or not policy:
        return
    reason = f" ({timer['paused_reason']})" if timer["paused_reason"] else ""
    print(f"    timer : {timer['state']:<9}{reason} {timer['time_string']}")
    print(f"    policy: {policy['mode']} → {policy['description']}")


def run_scenario(name: str, speed: float) -> None:
    print(f"\n▶ Scenario: {name}")
    for label, method, path, body, pause in SCENARIOS[name](speed):
        print(f"  • {label}")
        if _request(method, path, body) is None:
            return
        _print_timer()
        time.sleep(pause)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="StretchCat signal simulator")
    parser.add_argument("--scenario", choices=list(SCENARIOS), help="Run one scenario")
    parser.add_argument("--speed", type=float, default=1.0, help="Playback speed multiplier")
    args = parser.parse_args()

    if _request("GET", "/health") is None:
        print("Start the engine first:  python -m stretchcat.main")
        return

    names = [args.scenario] if args.scenario else list(SCENARIOS)
    try:
        for name in names:
            run_scenario(name, args.speed)
    except KeyboardInterrupt:
        print("\nStopped.")


if __name__ == "__main__":
    main()
