"""Periodic, mutually exclusive poll cycles."""

import asyncio
import contextlib
import time
from enum import Enum
from typing import Callable, List, Optional

from .store import DashboardState, StateStore
from ..utils.logger import get_logger
from config.settings import settings

logger = get_logger(__name__)

StateListener = Callable[[DashboardState], None]


class SchedulerState(str, Enum):
    IDLE = 'idle'
    REFRESHING = 'refreshing'


class PollScheduler:
    """Drives poll cycles against a backend client and commits to a StateStore.

    A cycle issues the four reads concurrently on worker threads, waits for
    all of them, then commits the results in one step. At most one cycle is
    in flight: ticks that arrive while Refreshing are dropped. Writes use
    ``request_refresh`` instead, which runs one follow-up cycle after the
    in-flight one so the written change is picked up.

    Must be used from a single event loop.
    """

    def __init__(self, client, store: StateStore, interval: float = None):
        self.client = client
        self.store = store
        self.interval = interval if interval is not None else settings.get_poll_interval()
        self._state = SchedulerState.IDLE
        self._refresh_pending = False
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[StateListener] = []
        self.dropped_ticks = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_refreshing(self) -> bool:
        return self._state is SchedulerState.REFRESHING

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_listener(self, listener: StateListener):
        """Call ``listener(state)`` after every commit."""
        self._listeners.append(listener)

    async def trigger(self) -> bool:
        """Run a poll cycle unless one is already in flight.

        Returns True if a cycle ran.
        """
        if self._state is SchedulerState.REFRESHING:
            self.dropped_ticks += 1
            logger.debug("Poll tick dropped, previous cycle still in flight")
            return False

        self._state = SchedulerState.REFRESHING
        try:
            await self._run_cycle()
            while self._refresh_pending:
                self._refresh_pending = False
                await self._run_cycle()
        finally:
            self._state = SchedulerState.IDLE
        return True

    async def request_refresh(self) -> bool:
        """Refresh after a write.

        Runs a cycle now when idle. When a cycle is in flight, schedules one
        more cycle right after it and returns False.
        """
        if self._state is SchedulerState.REFRESHING:
            self._refresh_pending = True
            return False
        return await self.trigger()

    async def _run_cycle(self):
        started = time.monotonic()
        devices, history, status, reported_totals = await asyncio.gather(
            asyncio.to_thread(self.client.fetch_clients),
            asyncio.to_thread(self.client.fetch_history),
            asyncio.to_thread(self.client.fetch_status),
            asyncio.to_thread(self.client.fetch_totals),
        )
        failures = len(self.client.read_errors)

        state = self.store.commit(
            devices=devices,
            history=history,
            status=status,
            reported_totals=reported_totals,
            failures=failures,
        )
        logger.debug(
            f"Poll #{state.poll_count}: {len(devices)} devices, {len(state.history)} history points, "
            f"{failures} failed reads, {time.monotonic() - started:.3f}s"
        )

        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed")

    async def _loop(self):
        while True:
            try:
                await self.trigger()
            except Exception:
                logger.exception("Poll cycle failed")
            await asyncio.sleep(self.interval)

    def start(self):
        """Start polling: one cycle now, then one per interval."""
        if self.is_running:
            return
        logger.info(f"Polling started, interval={self.interval}s")
        self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self):
        """Cancel the timer and wait for the loop to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Polling stopped")
