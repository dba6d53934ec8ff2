"""
/policy — explain why the timer is (or is not) allowed to run right now.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Request

from ...api.schemas import PolicyStateOut
from ...settings import snapshot

router = APIRouter(prefix="/policy", tags=["policy"])


def _get_controller(request: Request):
    return request.app.state.controller


@router.get("", response_model=PolicyStateOut)
async def get_policy(controller=Depends(_get_controller)):
    config = snapshot().auto_start
    focus_mode = controller.focus_source.current_focus_mode()
    now = datetime.now()
    decision = controller.policy.evaluate(config, now, focus_mode)
    return PolicyStateOut(
        mode=config.mode.value,
        satisfied=decision.satisfied,
        reason=decision.reason.value,
        description=decision.description,
        should_auto_start=controller.policy.should_auto_start(config, now, focus_mode),
        is_allowed_to_run=controller.policy.is_allowed_to_run(config, now, focus_mode),
        focus_mode=focus_mode,
        screen_locked=controller.screen_locked,
    )
