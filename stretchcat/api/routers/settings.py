"""
/settings — read and update user-tunable runtime settings.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...api.schemas import SettingsPatch
from ...router.controller import ConfigChanged
from ...settings import DEFAULTS, get_settings, update_settings

router = APIRouter(prefix="/settings", tags=["settings"])


def _get_controller(request: Request):
    return request.app.state.controller


@router.get("")
async def read_settings():
    """Return current settings with their defaults for reference."""
    current = get_settings()
    return {"settings": current, "defaults": DEFAULTS}


@router.put("")
async def write_settings(patch: SettingsPatch, controller=Depends(_get_controller)):
    """Apply a partial update, persist to data/settings.json, re-evaluate the schedule."""
    data = patch.model_dump(mode="json", exclude_none=True)
    if "selected_focus_modes" in data:
        data["selected_focus_modes"] = sorted(set(data["selected_focus_modes"]))
    result = update_settings(data)
    await controller.process(ConfigChanged())
    return {"settings": result}
