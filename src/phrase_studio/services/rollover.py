"""Daily reset of the premium usage ledger.

The free ledger is lifetime-scoped and is never touched here. Instead of
polling the wall clock every minute, the worker computes the next local
midnight and sleeps until then.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, time, timedelta

from phrase_studio.services.quota import QuotaLedger

# Configure logger for this module
logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def next_midnight(now: datetime) -> datetime:
    """Return the first local 00:00 strictly after ``now``."""
    return datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)


class DailyResetScheduler:
    """Background task that clears the premium ledger at each local midnight."""

    def __init__(self, ledger: QuotaLedger, clock: Clock = datetime.now) -> None:
        self.ledger = ledger
        self.clock = clock
        self.rollovers = 0
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def seconds_until_rollover(self, now: datetime | None = None) -> float:
        now = now or self.clock()
        return max(0.0, (next_midnight(now) - now).total_seconds())

    def rollover(self) -> None:
        """Start a new premium epoch for every token."""
        try:
            self.ledger.clear()
        except Exception:  # pragma: no cover - in-memory clear does not fail
            logger.exception("Premium usage reset failed; retrying at next rollover")
            return
        self.rollovers += 1
        logger.info("Premium daily usage has been reset")

    async def start(self) -> None:
        """Start the background rollover loop."""
        if self._task is None or self._task.done():
            self._stopping = asyncio.Event()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background rollover loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stopping.is_set():
            target = next_midnight(self.clock())
            # Sleeps can return a little early; recompute until midnight has passed
            while not self._stopping.is_set():
                delay = (target - self.clock()).total_seconds()
                if delay <= 0:
                    break
                try:
                    await asyncio.wait_for(self._stopping.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    continue
            if self._stopping.is_set():
                return
            self.rollover()
