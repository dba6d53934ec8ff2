"""
/timer — read and drive the interval timer, plus a WebSocket stream.

Handlers are async so they execute on the event loop alongside the clock.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect

from ...actions.timer import PausedReason
from ...api.schemas import TimerStateOut

router = APIRouter(prefix="/timer", tags=["timer"])


def _get_timer(request: Request):
    return request.app.state.timer


@router.get("", response_model=TimerStateOut)
async def get_timer(timer=Depends(_get_timer)):
    return TimerStateOut.from_snapshot(timer.snapshot())


@router.post("/start", response_model=TimerStateOut)
async def start_timer(timer=Depends(_get_timer)):
    """Start from idle, or resume whatever phase was paused."""
    timer.start()
    return TimerStateOut.from_snapshot(timer.snapshot())


@router.post("/pause", response_model=TimerStateOut)
async def pause_timer(timer=Depends(_get_timer)):
    timer.pause(PausedReason.USER_REQUESTED)
    return TimerStateOut.from_snapshot(timer.snapshot())


@router.post("/reset", response_model=TimerStateOut)
async def reset_timer(timer=Depends(_get_timer)):
    timer.reset()
    return TimerStateOut.from_snapshot(timer.snapshot())


@router.post("/break", response_model=TimerStateOut)
async def start_break(timer=Depends(_get_timer)):
    """Take a break now."""
    timer.start_break()
    return TimerStateOut.from_snapshot(timer.snapshot())


@router.post("/skip", response_model=TimerStateOut)
async def skip_break(timer=Depends(_get_timer)):
    timer.skip_break()
    return TimerStateOut.from_snapshot(timer.snapshot())


@router.websocket("/ws")
async def timer_websocket(websocket: WebSocket):
    """Pushes the timer state once per second."""
    await websocket.accept()
    timer = websocket.app.state.timer
    try:
        while True:
            await websocket.send_json(
                TimerStateOut.from_snapshot(timer.snapshot()).model_dump()
            )
            await asyncio.sleep(1)
    except WebSocketDisconnect:
        pass
