"""
============================================================================
HEALTH CHECKER - METRICS REPORTER
============================================================================
Periodically snapshots every endpoint's record and logs one summary line
per endpoint that has been checked at least once. Only snapshots are
read, so the reporter holds each record lock for a handful of attribute
reads and never blocks a writer for longer than that.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
from typing import List, Tuple

from exceptions.base import ContractViolationError
from monitoring.metrics import MetricsStore, StatsSnapshot
from monitoring.scheduler import PeriodicTicker
from utils.logger import get_logger


logger = get_logger("Reporter")


class ReporterLoop:
    """Periodic metrics summary for all endpoints, in configured order."""

    def __init__(self, store: MetricsStore, interval: float, stop_event: asyncio.Event):
        self.store = store
        self.stop_event = stop_event
        self._ticker = PeriodicTicker(interval, stop_event)
        self.reports = 0

    def report_once(self) -> List[Tuple[str, StatsSnapshot]]:
        """
        Log one line per endpoint with at least one check.

        Returns:
            The (endpoint, snapshot) pairs that were reported
        """
        reported = []
        for endpoint in self.store.endpoints:
            snapshot = self.store.snapshot(endpoint)
            if snapshot.total_checks == 0:
                continue

            average = snapshot.average_response_ms
            fields = {
                "url": endpoint,
                "total_checks": snapshot.total_checks,
                "successful_checks": snapshot.successful_checks,
                "avg_response_time": f"{average}ms" if average is not None else "n/a",
            }
            logger.bind(**fields).info(
                "metrics " + " ".join(f"{key}={value}" for key, value in fields.items())
            )
            reported.append((endpoint, snapshot))

        self.reports += 1
        return reported

    async def run(self) -> None:
        """Report until the stop event is set. A failed report never stops the checks."""
        try:
            while await self._ticker.wait():
                self.report_once()

        except ContractViolationError:
            raise
        except Exception as e:
            logger.opt(exception=e).error(f"health check metrics stopped unexpectedly: {e}")
            return

        logger.info("stopping health check metrics reason=shutdown requested")
