"""
Focus Signal Sources — supply "which focus mode is active right now" to the
control loop and notify subscribers when it changes.

Reading is split from publishing so the slow part can run off the event loop:

    signal = await loop.run_in_executor(None, source.read)   # may touch disk
    source.update(signal)                                    # on the loop

A source that cannot resolve a reading reports no focus mode; that is a
normal value, not an error.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from .focus_modes import extract_mode_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FocusSignal:
    current_mode: Optional[str] = None
    active: bool = False


class FocusSignalSource:
    """Base source: caches the latest signal and fans out change callbacks."""

    def __init__(self):
        self._signal = FocusSignal()
        self._manual_mode: Optional[str] = None
        self._listeners: List[Callable[[FocusSignal], None]] = []

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def current_focus_mode(self) -> Optional[str]:
        return self._signal.current_mode

    def signal(self) -> FocusSignal:
        return self._signal

    def subscribe(self, fn: Callable[[FocusSignal], None]) -> None:
        """Register a callback(signal) fired whenever the reading changes."""
        self._listeners.append(fn)

    def read(self) -> FocusSignal:
        """Resolve a fresh reading. Subclasses override; may block."""
        return self._fallback()

    def update(self, signal: FocusSignal) -> bool:
        """Cache *signal*; notify subscribers if it differs. Returns True on change."""
        if signal == self._signal:
            return False
        self._signal = signal
        logger.info("Focus mode changed: %s", signal.current_mode or "none")
        for listener in self._listeners:
            listener(signal)
        return True

    def refresh(self) -> bool:
        """Synchronous read + update."""
        return self.update(self.read())

    def push(self, mode: Optional[str]) -> bool:
        """Accept a reading delivered by an external agent; the next poll may replace it."""
        if mode:
            return self.update(FocusSignal(current_mode=mode, active=True))
        return self.update(self._fallback())

    # ------------------------------------------------------------------
    # Manual override
    # ------------------------------------------------------------------

    @property
    def manual_mode(self) -> Optional[str]:
        return self._manual_mode

    def set_current_focus_mode(self, mode: Optional[str]) -> bool:
        """Set (or clear with None) the manual focus mode and publish it."""
        self._manual_mode = mode or None
        return self.update(self._fallback())

    def _fallback(self) -> FocusSignal:
        return FocusSignal(current_mode=self._manual_mode, active=False)


class ManualFocusSource(FocusSignalSource):
    """Focus mode comes only from set_current_focus_mode() or pushed events."""

    def push(self, mode: Optional[str]) -> bool:
        return self.set_current_focus_mode(mode)


class AssertionsFileSource(FocusSignalSource):
    """
    Reads the macOS DoNotDisturb assertions database. The first assertion
    whose mode identifier resolves to a name is the active focus mode.
    Without one, falls back to the manual override.
    """

    def __init__(self, path: Path, identifier_map: Optional[Dict[str, str]] = None):
        super().__init__()
        self.path = Path(path)
        self.identifier_map: Dict[str, str] = dict(identifier_map or {})

    def read(self) -> FocusSignal:
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read focus assertions %s: %s", self.path, exc)
            return self._fallback()

        if not isinstance(payload, dict):
            return self._fallback()

        for identifier in _assertion_identifiers(payload):
            name = extract_mode_name(identifier, self.identifier_map)
            if name:
                return FocusSignal(current_mode=name, active=True)
        return self._fallback()


def _assertion_identifiers(payload: Dict[str, Any]) -> Iterator[str]:
    """
    Yield mode identifiers in document order.

    {"data": [{"storeAssertionRecords": [
        {"assertionDetails": {"assertionDetailsModeIdentifier": "..."}},
        {"storeAssertionRecordDetails": {"modeIdentifier": "..."}}
     ],
     "storeAssertionRecordDetails": {"modeIdentifier": "..."}}]}
    """
    data = payload.get("data")
    if not isinstance(data, list):
        return
    for assertion in data:
        if not isinstance(assertion, dict):
            continue
        for record in assertion.get("storeAssertionRecords") or []:
            if not isinstance(record, dict):
                continue
            details = record.get("assertionDetails")
            if isinstance(details, dict):
                for key in ("assertionDetailsModeIdentifier", "modeIdentifier"):
                    if isinstance(details.get(key), str):
                        yield details[key]
            legacy = record.get("storeAssertionRecordDetails")
            if isinstance(legacy, dict) and isinstance(legacy.get("modeIdentifier"), str):
                yield legacy["modeIdentifier"]
        legacy = assertion.get("storeAssertionRecordDetails")
        if isinstance(legacy, dict) and isinstance(legacy.get("modeIdentifier"), str):
            yield legacy["modeIdentifier"]
