"""
FastAPI application — local StretchCat engine API.
Runs on http://127.0.0.1:8766 by default.

Singletons (timer, focus source, controller) live on app.state so that each
call to create_app() produces a fully independent instance with no shared
module-level globals. Everything that touches timer state runs on the one
event loop: the clock loop, the policy loop, the controller loop and the
async route handlers.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..actions.notifications import BreakNotifier
from ..actions.timer import IntervalTimer
from ..config import Config, config as default_config
from ..router.controller import ScheduleController, Tick
from ..router.policy import AutoStartPolicy
from ..settings import get_settings
from ..telemetry.focus_modes import load_mode_catalog
from ..telemetry.focus_source import AssertionsFileSource, FocusSignalSource, ManualFocusSource
from ..telemetry.poller import FocusPoller

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Background loops
# ---------------------------------------------------------------------------

async def _clock_loop(timer: IntervalTimer, interval_s: float) -> None:
    while True:
        await asyncio.sleep(interval_s)
        try:
            timer.tick()
        except Exception:
            logger.exception("Timer tick failed")


async def _policy_loop(controller: ScheduleController, interval_s: float) -> None:
    while True:
        await asyncio.sleep(interval_s)
        controller.submit(Tick())


def _build_focus_source(cfg: Config) -> FocusSignalSource:
    if cfg.focus_source == "assertions":
        catalog = load_mode_catalog(cfg.mode_configurations_path)
        return AssertionsFileSource(cfg.assertions_path, catalog.identifier_map)
    return ManualFocusSource()


# ---------------------------------------------------------------------------
# Lifespan — initialises and tears down all per-app state
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Config = app.state.config
    s = get_settings()

    timer = IntervalTimer(s["work_minutes"], s["break_minutes"])
    notifier = BreakNotifier(enabled=cfg.notifications_enabled)
    focus_source = _build_focus_source(cfg)
    controller = ScheduleController(timer, AutoStartPolicy(), focus_source)
    poller = FocusPoller(focus_source, cfg.focus_poll_interval_s)

    loop = asyncio.get_running_loop()

    def _on_break_start():
        logger.info("Break started")
        loop.run_in_executor(None, notifier.notify)

    timer.on_break_start = _on_break_start

    app.state.timer = timer
    app.state.notifier = notifier
    app.state.focus_source = focus_source
    app.state.controller = controller
    app.state.poller = poller

    tasks = [
        asyncio.create_task(controller.run()),
        asyncio.create_task(_clock_loop(timer, cfg.timer_tick_s)),
        asyncio.create_task(_policy_loop(controller, cfg.policy_interval_s)),
    ]
    if cfg.focus_source == "assertions":
        tasks.append(asyncio.create_task(poller.run()))

    # Initial evaluation so an in-window / in-focus start happens at launch
    await controller.process(Tick())

    yield

    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(cfg: Optional[Config] = None) -> FastAPI:
    app = FastAPI(
        title="StretchCat",
        description="Work/break interval timer driven by time windows and focus modes",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = cfg or default_config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000", "null"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import policy, settings, signals, timer

    app.include_router(timer.router)
    app.include_router(policy.router)
    app.include_router(settings.router)
    app.include_router(signals.router)

    @app.get("/health")
    def health(request: Request):
        source = getattr(request.app.state, "focus_source", None)
        if source is None:
            focus = "unknown"
        else:
            focus = "assertions" if isinstance(source, AssertionsFileSource) else "manual"
        return {"status": "ok", "version": "0.1.0", "focus_source": focus}

    return app


app = create_app()
