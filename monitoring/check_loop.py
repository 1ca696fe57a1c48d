"""
============================================================================
HEALTH CHECKER - CHECK LOOP
============================================================================
Drives the prober for a single endpoint on a fixed period and folds each
measurement into the metrics store. Exactly one CheckLoop writes to a
given endpoint's record, so checks for one endpoint are strictly
sequential.

State machine
-------------
IDLE ──run()──► RUNNING ──tick──► PROBING ──recorded──► RUNNING
                   │                  │
                   └──── stop ────────┴──────────────► STOPPED

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio

from config.constants import LoopState
from exceptions.base import ContractViolationError, HealthCheckerException
from monitoring.measurement import Measurement
from monitoring.metrics import MetricsStore
from monitoring.scheduler import PeriodicTicker
from utils.logger import get_logger


logger = get_logger("CheckLoop")


class CheckLoop:
    """Periodic checker for one endpoint."""

    def __init__(
        self,
        endpoint: str,
        prober,
        store: MetricsStore,
        interval: float,
        stop_event: asyncio.Event,
    ):
        if endpoint not in store:
            raise ContractViolationError(
                f"No metrics record for {endpoint}",
                invariant="record exists before loop starts",
            )
        self.endpoint = endpoint
        self.prober = prober
        self.store = store
        self.stop_event = stop_event
        # raises ContractViolationError for a non-positive interval
        self._ticker = PeriodicTicker(interval, stop_event)
        self.state = LoopState.IDLE
        self.checks_completed = 0

    async def run(self) -> None:
        """Check until the stop event is set. Never raises except on a broken invariant."""
        self.state = LoopState.RUNNING
        logger.debug(f"starting health check for URL {self.endpoint}")
        try:
            while await self._ticker.wait():
                self.state = LoopState.PROBING
                measurement = await self.prober.probe(self.endpoint, self.stop_event)
                if measurement is not None:
                    self.store.record(self.endpoint, measurement)
                    self.checks_completed += 1
                    self._log_measurement(measurement)
                self.state = LoopState.RUNNING

        except ContractViolationError:
            self.state = LoopState.STOPPED
            raise
        except HealthCheckerException as e:
            self.state = LoopState.STOPPED
            logger.bind(**{"url": self.endpoint, **e.log_fields()}).error(
                f"health check for URL {self.endpoint} stopped unexpectedly: {e.log_format()}"
            )
            return
        except Exception as e:
            self.state = LoopState.STOPPED
            logger.opt(exception=e).bind(url=self.endpoint).error(
                f"health check for URL {self.endpoint} stopped unexpectedly: {e}"
            )
            return

        self.state = LoopState.STOPPED
        logger.bind(url=self.endpoint, reason="shutdown requested").info(
            f"stopping health check for URL url={self.endpoint} reason=shutdown requested"
        )

    def _log_measurement(self, measurement: Measurement) -> None:
        fields = {
            "url": measurement.endpoint,
            "status": measurement.status_label,
            "healthy": measurement.healthy,
            "response_time": f"{measurement.elapsed_ms}ms",
        }
        line = " ".join(f"{key}={value}" for key, value in fields.items())
        bound = logger.bind(**fields)

        if measurement.healthy:
            bound.info(line)
        elif measurement.error:
            bound.error(f"{line} error={measurement.error}")
        else:
            bound.error(line)
