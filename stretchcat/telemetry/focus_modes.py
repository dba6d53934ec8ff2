"""
Focus Mode Catalog — the list of focus modes a user can opt into, read from
the system's mode configuration file when available.

Expected ModeConfigurations.json shape:
{
    "data": [
        {"modeConfigurations": {
            "<uuid>": {"mode": {"name": "Work", "modeIdentifier": "com.apple.focus.work"}}
        }}
    ]
}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

DEFAULT_MODES: List[str] = [
    "Do Not Disturb",
    "Work",
    "Personal",
    "Sleep",
    "Gaming",
    "Fitness",
    "Reading",
    "Driving",
]

# Identifier keyword → display name, used when the identifier is not mapped
_KEYWORD_MAP: Dict[str, str] = {
    "default": "Do Not Disturb",
    "work": "Work",
    "personal": "Personal",
    "sleep": "Sleep",
    "gaming": "Gaming",
    "fitness": "Fitness",
    "reading": "Reading",
    "driving": "Driving",
}


@dataclass
class ModeCatalog:
    names: List[str] = field(default_factory=list)
    identifier_map: Dict[str, str] = field(default_factory=dict)   # identifier → name


def parse_mode_configurations(payload: Dict[str, Any]) -> ModeCatalog:
    catalog = ModeCatalog()
    data = payload.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return catalog
    configurations = data[0].get("modeConfigurations")
    if not isinstance(configurations, dict):
        return catalog

    for entry in configurations.values():
        mode = entry.get("mode") if isinstance(entry, dict) else None
        if not isinstance(mode, dict):
            continue
        name = mode.get("name") or ""
        identifier = mode.get("modeIdentifier") or ""
        if name and identifier:
            catalog.names.append(name)
            catalog.identifier_map[identifier] = name
    return catalog


def load_mode_catalog(path: Path, user_defined: Iterable[str] = ()) -> ModeCatalog:
    """
    Read the system catalog, fall back to DEFAULT_MODES when it is missing or
    empty, and merge user-defined modes (sorted, unique).
    """
    catalog = ModeCatalog()
    try:
        catalog = parse_mode_configurations(json.loads(Path(path).read_text()))
    except (OSError, ValueError) as exc:
        logger.debug("Mode configurations unavailable at %s: %s", path, exc)

    names = catalog.names or list(DEFAULT_MODES)
    catalog.names = sorted(set(names) | set(user_defined))
    return catalog


def extract_mode_name(identifier: str, identifier_map: Dict[str, str]) -> str:
    """Resolve a mode identifier to its display name, or "" if unknown."""
    if identifier in identifier_map:
        return identifier_map[identifier]
    lowered = identifier.lower()
    for keyword, name in _KEYWORD_MAP.items():
        if keyword in lowered:
            return name
    return ""
