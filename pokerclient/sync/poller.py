"""Recurring refresh loop."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..config import settings

logger = logging.getLogger(__name__)


class Poller:
    """Calls ``on_tick`` every ``interval_ms`` until stopped.

    The delay is measured from the end of one tick to the start of the
    next, so a slow tick never overlaps the following one.
    """

    def __init__(
        self,
        on_tick: Callable[[], Awaitable[None]],
        interval_ms: int = settings.poll_interval_ms,
    ):
        self.interval_ms = interval_ms
        self.ticks = 0
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None
        self._stopped: Optional[asyncio.Event] = None

    def start(self) -> None:
        """Start ticking. No-op if already running or the interval is disabled."""
        if self.interval_ms <= 0 or self.is_running:
            return
        logger.debug(f"[POLL] Starting, interval={self.interval_ms}ms")
        self._stopped = asyncio.Event()
        self._task = asyncio.create_task(self._tick_loop(self.interval_ms, self._stopped))

    def stop(self) -> None:
        """Stop scheduling ticks without waiting.

        A tick already in progress runs to completion; the loop exits
        instead of sleeping again. Safe to call from inside a tick.
        """
        task, self._task = self._task, None
        stopped, self._stopped = self._stopped, None
        if task is not None and not task.done():
            logger.debug("[POLL] Stopping")
            stopped.set()

    async def cancel(self) -> None:
        """Stop and wait for the loop to finish (teardown)."""
        task, self._task = self._task, None
        stopped, self._stopped = self._stopped, None
        if task is None:
            return
        stopped.set()
        task.cancel()
        if task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _tick_loop(self, interval_ms: int, stopped: asyncio.Event) -> None:
        try:
            while not stopped.is_set():
                try:
                    await asyncio.wait_for(stopped.wait(), interval_ms / 1000)
                    break
                except asyncio.TimeoutError:
                    pass
                self.ticks += 1
                await self._on_tick()
        except asyncio.CancelledError:
            pass

    @property
    def is_running(self) -> bool:
        """Check if the loop is currently scheduled."""
        return self._task is not None and not self._task.done()
