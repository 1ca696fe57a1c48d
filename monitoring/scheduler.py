"""
============================================================================
HEALTH CHECKER - PERIODIC TICKER
============================================================================
Fixed-period timer shared by the check loops and the reporter.

Deadlines are computed on the event loop's monotonic clock from the
previous deadline, not from "now", so a loop whose work takes a few
milliseconds does not drift. If the work overruns one or more periods
the missed boundaries are dropped rather than fired back to back.

Waiting is done on the stop event itself, with the remaining time as a
timeout, so a stop request wakes the waiter immediately instead of at
the next boundary.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import math
from typing import Optional

from exceptions.base import ContractViolationError


class PeriodicTicker:
    """
    Usage
    -----
        ticker = PeriodicTicker(5.0, stop_event)
        while await ticker.wait():
            ...  # runs once per period until stop_event is set
    """

    def __init__(self, interval: float, stop_event: asyncio.Event):
        if not interval or interval <= 0:
            raise ContractViolationError(
                f"Ticker interval must be positive, got {interval!r}",
                invariant="positive interval",
            )
        self.interval = float(interval)
        self._stop_event = stop_event
        self._deadline: Optional[float] = None
        self.ticks = 0
        self.skipped = 0

    def _next_deadline(self, now: float) -> float:
        if self._deadline is None:
            return now + self.interval

        deadline = self._deadline + self.interval
        if deadline <= now:
            missed = math.floor((now - deadline) / self.interval) + 1
            self.skipped += missed
            deadline += missed * self.interval
        return deadline

    async def wait(self) -> bool:
        """
        Sleep until the next period boundary.

        Returns:
            True when the boundary was reached, False once the stop event
            is set (immediately, if it already was).
        """
        if self._stop_event.is_set():
            return False

        loop = asyncio.get_running_loop()
        self._deadline = self._next_deadline(loop.time())
        delay = max(0.0, self._deadline - loop.time())

        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            self.ticks += 1
            return True
        return False
