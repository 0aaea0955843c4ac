# survival_server/services/tick_service.py
"""
Fixed-rate tick loop.
Runs the simulation pipeline and publishes a snapshot after every tick.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from survival_server.config.settings import TICK_RATE
from survival_server.services.game_service import GameService

logger = logging.getLogger(__name__)

Publisher = Callable[[Dict[str, Any]], None]


@dataclass
class TickStats:
    """Statistics for tick timing."""

    tick_number: int
    duration_ms: float
    simulated: bool


class TickScheduler:
    """
    Drives the game service at a fixed cadence.
    The world lock is held while a tick mutates state and while the snapshot
    is copied; delivery of that snapshot happens outside the lock.
    """

    def __init__(
        self,
        game_service: GameService,
        publish: Publisher,
        lock: Optional[asyncio.Lock] = None,
        tick_rate: int = TICK_RATE,
    ) -> None:
        self._game = game_service
        self._publish = publish
        self._lock = lock or asyncio.Lock()
        self._tick_rate_ms = 1000 / tick_rate

        self._is_running = False
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

        self._recent_stats: List[TickStats] = []
        self._max_stats_history = 100

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def tick_number(self) -> int:
        return self._game.tick_number

    async def start(self) -> None:
        """Start the tick loop."""
        if self._task is not None:
            return

        self._is_running = True
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Tick loop started (rate: {self._tick_rate_ms:.1f}ms)")

    async def stop(self) -> None:
        """Stop the tick loop."""
        if self._task is None:
            return

        self._is_running = False
        self._stop_event.set()

        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.TimeoutError:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self._task = None
        logger.info("Tick loop stopped")

    async def _run_loop(self) -> None:
        while self._is_running:
            tick_start = time.perf_counter()

            await self.process_tick()

            # An overrun fires the next tick immediately; there is no catch-up
            tick_duration = (time.perf_counter() - tick_start) * 1000
            sleep_time = max(0, (self._tick_rate_ms - tick_duration) / 1000)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=sleep_time)
                break
            except asyncio.TimeoutError:
                pass

    async def process_tick(self) -> Dict[str, Any]:
        """Run one tick and publish the resulting snapshot."""
        tick_start = time.perf_counter()
        simulated = False

        async with self._lock:
            try:
                simulated = self._game.tick()
            except Exception:
                # One bad tick must not take the loop down with it
                logger.exception(f"Tick {self._game.tick_number} failed")
            snapshot = self._game.get_snapshot()

        try:
            self._publish(snapshot)
        except Exception:
            logger.exception("Snapshot publication failed")

        tick_duration = (time.perf_counter() - tick_start) * 1000
        self._recent_stats.append(
            TickStats(
                tick_number=self._game.tick_number,
                duration_ms=tick_duration,
                simulated=simulated,
            )
        )
        if len(self._recent_stats) > self._max_stats_history:
            self._recent_stats.pop(0)

        if tick_duration > self._tick_rate_ms:
            logger.warning(
                f"Tick {self._game.tick_number} took {tick_duration:.1f}ms "
                f"(target: {self._tick_rate_ms:.1f}ms)"
            )
        return snapshot

    def get_recent_stats(self) -> List[TickStats]:
        """Get recent tick statistics."""
        return list(self._recent_stats)
