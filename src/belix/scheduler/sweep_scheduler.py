"""Fixed-interval background sweeps for the in-memory stores.

Provides a reusable async task runner that calls a synchronous sweep function on a
fixed interval, independent of access patterns. Handles lifecycle (start/shutdown)
and keeps running when a single sweep cycle fails.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from belix.util.logger import get_logger

logger = get_logger("sweep_scheduler")


class PeriodicSweeper:
    """
    Runs ``sweep_fn`` every ``interval_seconds`` inside an asyncio task.

    The sweep function is synchronous, so a cycle never yields to the event loop
    halfway through and checks never observe a half-swept store.

    Args:
        name: Human-readable name for logging (e.g., "cache", "cooldowns").
        sweep_fn: Callable performing one sweep cycle; its return value is the
            number of evicted items and is only used for logging.
        interval_seconds: Delay between two cycles.
    """

    def __init__(self, name: str, sweep_fn: Callable[[], int], interval_seconds: float) -> None:
        self._name = name
        self._sweep_fn = sweep_fn
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """Run a single sweep cycle, logging instead of raising on failure."""
        try:
            removed = self._sweep_fn()
        except Exception as exc:
            logger.error("[SWEEP] [%s] Sweep cycle failed: %s", self._name, exc, exc_info=True)
            return 0
        if removed:
            logger.debug("[SWEEP] [%s] Removed %d stale entries", self._name, removed)
        return removed

    async def _run_loop(self) -> None:
        """Infinite loop: sleep, sweep, repeat."""
        logger.debug("[SWEEP] [%s] Starting periodic sweep (interval=%.1fs)", self._name, self._interval)
        try:
            while True:
                await asyncio.sleep(self._interval)
                self.run_once()
        except asyncio.CancelledError:
            logger.debug("[SWEEP] [%s] Periodic sweep cancelled", self._name)
            raise

    def start(self) -> None:
        """Start the background sweep task if not already running.

        Must be called from within a running event loop.
        """
        if self.running:
            logger.warning("[SWEEP] [%s] Sweep task already running", self._name)
            return
        self._task = asyncio.create_task(self._run_loop(), name=f"sweep:{self._name}")

    async def shutdown(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug("[SWEEP] [%s] Sweeper shutdown complete", self._name)
