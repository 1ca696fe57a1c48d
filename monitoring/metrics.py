"""
============================================================================
HEALTH CHECKER - METRICS STORE
============================================================================
Per-endpoint running statistics shared between the check loops (one
writer per endpoint) and the reporter (reader of every endpoint).

Every ``EndpointStats`` carries its own lock, so a write to one endpoint
never waits on another endpoint. The mapping itself is built once and is
read-only afterwards; no lock guards the mapping.

Critical sections are plain attribute updates. Nothing awaits, sleeps or
does I/O while a record lock is held.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

from config.constants import CheckOutcome
from exceptions.base import ContractViolationError
from monitoring.measurement import Measurement


# ============================================================================
# SNAPSHOT VALUE
# ============================================================================

@dataclass(frozen=True)
class StatsSnapshot:
    """Consistent copy of one endpoint's counters, taken under its lock."""

    total_checks: int = 0
    successful_checks: int = 0
    response_count: int = 0
    total_response_time: float = 0.0

    @property
    def failed_checks(self) -> int:
        return self.total_checks - self.successful_checks

    @property
    def average_response_ms(self) -> Optional[int]:
        """Mean latency in whole milliseconds over checks that got a response."""
        if self.response_count == 0:
            return None
        return int(self.total_response_time * 1000 / self.response_count)


# ============================================================================
# STATISTICS RECORD
# ============================================================================

class EndpointStats:
    """
    Mutable statistics record for a single endpoint.

    Shared by reference only: copying would duplicate the lock and let two
    copies be mutated independently, so ``copy`` is refused.
    """

    __slots__ = (
        "endpoint", "total_checks", "successful_checks",
        "response_count", "total_response_time", "_lock",
    )

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self.total_checks = 0
        self.successful_checks = 0
        self.response_count = 0
        self.total_response_time = 0.0
        self._lock = threading.Lock()

    def apply(self, measurement: Measurement) -> None:
        """Fold one measurement into the counters."""
        with self._lock:
            self.total_checks += 1
            if measurement.outcome is CheckOutcome.HEALTHY:
                self.successful_checks += 1
            if measurement.got_response:
                self.response_count += 1
                self.total_response_time += measurement.elapsed

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                total_checks=self.total_checks,
                successful_checks=self.successful_checks,
                response_count=self.response_count,
                total_response_time=self.total_response_time,
            )

    def __copy__(self):
        raise TypeError("EndpointStats must be shared by reference, not copied")

    def __deepcopy__(self, memo):
        raise TypeError("EndpointStats must be shared by reference, not copied")

    def __repr__(self) -> str:
        return f"EndpointStats(endpoint={self.endpoint!r})"


# ============================================================================
# STORE
# ============================================================================

class MetricsStore:
    """
    Fixed mapping from endpoint identity to its ``EndpointStats``.

    The key set is decided at construction and never changes; looking up
    an endpoint that was not registered is a ``ContractViolationError``.
    """

    def __init__(self, endpoints: Iterable[str]):
        records = {}
        for endpoint in endpoints:
            if endpoint in records:
                raise ContractViolationError(
                    f"Endpoint registered twice: {endpoint}",
                    invariant="unique endpoint keys",
                )
            records[endpoint] = EndpointStats(endpoint)

        if not records:
            raise ContractViolationError(
                "MetricsStore needs at least one endpoint",
                invariant="non-empty key set",
            )

        self._records: Mapping[str, EndpointStats] = MappingProxyType(records)
        self._order: Tuple[str, ...] = tuple(records)

    @property
    def endpoints(self) -> Tuple[str, ...]:
        """Endpoints in registration order."""
        return self._order

    def _get(self, endpoint: str) -> EndpointStats:
        try:
            return self._records[endpoint]
        except KeyError:
            raise ContractViolationError(
                f"Unknown endpoint: {endpoint}",
                invariant="fixed key set",
            ) from None

    def record(self, endpoint: str, measurement: Measurement) -> None:
        """Fold ``measurement`` into ``endpoint``'s record."""
        if measurement.endpoint != endpoint:
            raise ContractViolationError(
                f"Measurement for {measurement.endpoint} recorded under {endpoint}",
                invariant="measurement matches key",
            )
        self._get(endpoint).apply(measurement)

    def snapshot(self, endpoint: str) -> StatsSnapshot:
        """Copy of ``endpoint``'s counters. Never mutates."""
        return self._get(endpoint).snapshot()

    def snapshots(self) -> List[Tuple[str, StatsSnapshot]]:
        """Per-endpoint snapshots in registration order."""
        return [(endpoint, self._records[endpoint].snapshot()) for endpoint in self._order]

    def __contains__(self, endpoint: object) -> bool:
        return endpoint in self._records

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)
