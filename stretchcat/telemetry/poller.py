"""
Focus Poller — background task that re-reads the focus source on a fixed
cadence. The read runs in the default executor; the cached value is updated
back on the event loop, which is where change callbacks fire.
"""

from __future__ import annotations

import asyncio
import logging

from .focus_source import FocusSignalSource

logger = logging.getLogger(__name__)


class FocusPoller:

    def __init__(self, source: FocusSignalSource, interval_s: float = 5.0):
        self.source = source
        self.interval_s = interval_s
        self.polls = 0

    async def poll_once(self) -> bool:
        loop = asyncio.get_running_loop()
        signal = await loop.run_in_executor(None, self.source.read)
        self.polls += 1
        return self.source.update(signal)

    async def run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Focus poll failed")
            await asyncio.sleep(self.interval_s)
