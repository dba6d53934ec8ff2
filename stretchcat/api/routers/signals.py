"""
/signals — ingest desktop agent events (focus changes, screen lock/unlock),
set the manual focus mode, and manage the focus mode list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...api.schemas import FocusModeIn, FocusStateOut, ModeListOut, SignalEventIn, UserModeIn
from ...router.controller import FocusChanged
from ...settings import get_settings, update_settings
from ...telemetry.focus_modes import load_mode_catalog
from ...telemetry.sources.desktop import parse_desktop_event

router = APIRouter(prefix="/signals", tags=["signals"])

_KNOWN_SOURCES = {"desktop"}


def _get_controller(request: Request):
    return request.app.state.controller


def _to_payload(event: SignalEventIn) -> dict:
    payload = {"type": event.type, "data": event.data}
    if event.timestamp is not None:
        payload["timestamp"] = event.timestamp
    return payload


async def _dispatch(controller, parsed) -> None:
    if isinstance(parsed, FocusChanged):
        controller.focus_source.push(parsed.mode)
    await controller.process(parsed)


def _focus_state(source) -> FocusStateOut:
    signal = source.signal()
    return FocusStateOut(
        current_mode=signal.current_mode,
        active=signal.active,
        manual_mode=source.manual_mode,
    )


# ── Events ──────────────────────────────────────────────────────────────────

@router.post("/event", status_code=status.HTTP_202_ACCEPTED)
async def ingest_event(event: SignalEventIn, controller=Depends(_get_controller)):
    """Accept a single signal from the desktop agent."""
    if event.source not in _KNOWN_SOURCES:
        raise HTTPException(status_code=400, detail=f"Unknown source: {event.source!r}")

    parsed = parse_desktop_event(_to_payload(event))
    if parsed is None:
        raise HTTPException(status_code=422, detail=f"Unrecognised event type: {event.type!r}")

    await _dispatch(controller, parsed)
    return {"status": "accepted"}


@router.post("/batch", status_code=status.HTTP_202_ACCEPTED)
async def ingest_batch(events: list[SignalEventIn], controller=Depends(_get_controller)):
    """Accept a batch of signals, applied in order; unknown ones are skipped."""
    accepted = 0
    for event in events:
        if event.source not in _KNOWN_SOURCES:
            continue
        parsed = parse_desktop_event(_to_payload(event))
        if parsed:
            await _dispatch(controller, parsed)
            accepted += 1
    return {"accepted": accepted, "total": len(events)}


# ── Focus mode ──────────────────────────────────────────────────────────────

@router.get("/focus", response_model=FocusStateOut)
async def get_focus(controller=Depends(_get_controller)):
    return _focus_state(controller.focus_source)


@router.put("/focus", response_model=FocusStateOut)
async def set_focus(req: FocusModeIn, controller=Depends(_get_controller)):
    """Set or clear (null) the manual focus mode."""
    source = controller.focus_source
    source.set_current_focus_mode(req.mode)
    await controller.process(FocusChanged(source.current_focus_mode()))
    return _focus_state(source)


# ── Mode list ───────────────────────────────────────────────────────────────

def _mode_list(request: Request) -> ModeListOut:
    user_defined = get_settings()["user_defined_modes"]
    catalog = load_mode_catalog(
        request.app.state.config.mode_configurations_path, user_defined
    )
    return ModeListOut(modes=catalog.names, user_defined=list(user_defined))


@router.get("/modes", response_model=ModeListOut)
async def list_modes(request: Request):
    return _mode_list(request)


@router.post("/modes", response_model=ModeListOut, status_code=201)
async def add_mode(req: UserModeIn, request: Request):
    name = req.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Mode name must not be blank")
    user_defined = get_settings()["user_defined_modes"]
    if name not in user_defined:
        update_settings({"user_defined_modes": user_defined + [name]})
    return _mode_list(request)


@router.delete("/modes/{name}", response_model=ModeListOut)
async def remove_mode(name: str, request: Request):
    user_defined = get_settings()["user_defined_modes"]
    if name not in user_defined:
        raise HTTPException(status_code=404, detail="Mode not found")
    update_settings({"user_defined_modes": [m for m in user_defined if m != name]})
    return _mode_list(request)
