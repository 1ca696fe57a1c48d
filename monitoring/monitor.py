"""
============================================================================
HEALTH CHECKER - MONITORING ENGINE
============================================================================
The heart of the checker: the HTTP prober and the engine that runs one
check loop per endpoint plus the metrics reporter, all on one event loop.

Architecture
------------
HealthCheckEngine         ← owns the metrics store and the HTTP client
├── ReporterLoop          ← periodic metrics summary (monitoring.reporter)
└── CheckLoop × N         ← one per endpoint (monitoring.check_loop)
    └── EndpointProber    ← one timed GET per tick via httpx
        └── MetricsStore  ← per-endpoint locked counters (monitoring.metrics)

Shutdown
--------
A single ``asyncio.Event`` is handed to every loop. Setting it wakes idle
loops immediately and aborts in-flight requests; ``run()`` returns only
after every loop task has finished.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import time
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.constants import CheckOutcome, Defaults, StatusCodes
from config.loader import CheckerConfig
from config.settings import Settings
from exceptions.base import ConfigurationError, ContractViolationError
from exceptions.monitoring import ProbeError
from monitoring.check_loop import CheckLoop
from monitoring.measurement import Measurement
from monitoring.metrics import MetricsStore
from monitoring.reporter import ReporterLoop
from utils.logger import get_logger


logger = get_logger("MonitoringEngine")


# ============================================================================
# HTTP PROBER
# ============================================================================

class EndpointProber:
    """
    Performs a single HTTP GET against an endpoint using a shared
    ``httpx.AsyncClient``.

    • One attempt per call; the check loop's cadence is the only retry
    • Latency covers dispatch up to the response headers; the body is
      never read and the response is closed on every path
    • A stop request aborts the in-flight request and yields no result
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def probe(self, endpoint: str, stop_event: asyncio.Event) -> Optional[Measurement]:
        """
        Execute one check against *endpoint*.

        Parameters
        ----------
        endpoint : str
            Pre-validated URL.
        stop_event : asyncio.Event
            Shared stop signal.

        Returns
        -------
        Measurement | None
            ``None`` only when the check was abandoned because of shutdown.

        Raises
        ------
        ProbeError
            The request could not be built for this URL.
        """
        if stop_event.is_set():
            return None

        request_task = asyncio.create_task(self._fetch(endpoint, stop_event))
        stop_task = asyncio.create_task(stop_event.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, stop_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            stop_task.cancel()
            if not request_task.done():
                request_task.cancel()
                # let the cancelled request unwind so its connection goes back to the pool
                await asyncio.gather(request_task, return_exceptions=True)

        if request_task not in done:
            logger.debug(f"[HTTP] {endpoint} check abandoned, shutdown in progress")
            return None

        return request_task.result()

    async def _fetch(self, endpoint: str, stop_event: asyncio.Event) -> Optional[Measurement]:
        start_time = time.perf_counter()
        try:
            async with self._client.stream("GET", endpoint) as response:
                elapsed = time.perf_counter() - start_time
                status_code = response.status_code

        except httpx.RequestError as e:
            elapsed = time.perf_counter() - start_time
            if stop_event.is_set():
                return None
            return Measurement(
                endpoint=endpoint,
                elapsed=elapsed,
                outcome=CheckOutcome.TRANSPORT_FAILURE,
                error=f"{type(e).__name__}: {str(e)[:200]}",
            )
        except httpx.InvalidURL as e:
            raise ProbeError(
                f"Cannot build request for {endpoint}: {e}",
                url=endpoint,
                cause=e,
            ) from e

        outcome = (
            CheckOutcome.HEALTHY
            if StatusCodes.is_success(status_code)
            else CheckOutcome.UNHEALTHY
        )
        return Measurement(
            endpoint=endpoint,
            elapsed=elapsed,
            outcome=outcome,
            status_code=status_code,
        )


# ============================================================================
# MONITORING ENGINE
# ============================================================================

class HealthCheckEngine:
    """
    Runs one ``CheckLoop`` per endpoint and one ``ReporterLoop`` until the
    stop event is set.

    Lifecycle
    ---------
    1.  ``engine = HealthCheckEngine(...)``   validates, builds the store
    2.  ``await engine.run(stop_event)``       blocks until full drain

    Thread-safety
    -------------
    Loops run as tasks on one event loop. The only shared mutable state is
    the metrics store, whose records carry their own locks.
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        check_interval: float,
        timeout: float,
        *,
        report_interval: Optional[float] = None,
        max_endpoints: int = Defaults.MAX_ENDPOINTS,
        client: Optional[httpx.AsyncClient] = None,
        client_options: Optional[Dict[str, Any]] = None,
    ):
        """
        Parameters
        ----------
        endpoints : Sequence[str]
            Validated, unique endpoint URLs in reporting order.
        check_interval : float
            Seconds between two checks of the same endpoint.
        timeout : float
            Per-request timeout for the shared HTTP client.
        report_interval : float | None
            Seconds between metrics reports; defaults to ``check_interval``.
        max_endpoints : int
            Safety ceiling on the number of endpoints.
        client : httpx.AsyncClient | None
            Pre-built client. The engine never closes a client it did not
            create.
        client_options : dict | None
            ``MonitoringSettings.client_options()`` for the built client.
        """
        endpoints = tuple(endpoints)
        if not endpoints:
            raise ConfigurationError("No endpoints configured", config_key="Urls")
        if len(endpoints) > max_endpoints:
            raise ConfigurationError(
                f"Too many endpoints: {len(endpoints)} > {max_endpoints}",
                config_key="max_endpoints",
            )
        if check_interval is None or check_interval <= 0:
            raise ConfigurationError(
                "Interval seconds must be positive",
                config_key="check_interval_seconds",
            )
        if timeout is None or timeout <= 0:
            raise ConfigurationError(
                "Timeout seconds must be positive",
                config_key="timeout_seconds",
            )
        if report_interval is not None and report_interval <= 0:
            raise ConfigurationError(
                "Report interval must be positive",
                config_key="report_interval",
            )
        if len(set(endpoints)) != len(endpoints):
            raise ConfigurationError("Duplicate endpoints configured", config_key="Urls")

        self.endpoints = endpoints
        self.check_interval = float(check_interval)
        self.report_interval = float(report_interval or check_interval)
        self.timeout = float(timeout)
        self._client = client
        self._client_options = dict(client_options or {})

        # built before any loop exists, so no loop can miss its record
        self.store = MetricsStore(self.endpoints)

        logger.info(
            f"HealthCheckEngine created: endpoints={len(self.endpoints)}, "
            f"interval={self.check_interval}s, timeout={self.timeout}s, "
            f"report_interval={self.report_interval}s"
        )

    @classmethod
    def from_config(
        cls,
        config: CheckerConfig,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "HealthCheckEngine":
        monitoring = settings.monitoring
        return cls(
            endpoints=config.urls,
            check_interval=config.check_interval_seconds,
            timeout=config.timeout_seconds,
            report_interval=monitoring.report_interval,
            max_endpoints=monitoring.max_endpoints,
            client=client,
            client_options=monitoring.client_options(),
        )

    # ------------------------------------------------------------------
    # HTTP CLIENT
    # ------------------------------------------------------------------

    def _build_client(self) -> httpx.AsyncClient:
        options = self._client_options
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(
                max_connections=options.get("max_connections", 100),
                max_keepalive_connections=options.get("max_keepalive_connections", 20),
            ),
            headers={"User-Agent": options.get("user_agent", Defaults.USER_AGENT)},
            follow_redirects=options.get("follow_redirects", True),
        )

    # ------------------------------------------------------------------
    # RUN / DRAIN
    # ------------------------------------------------------------------

    async def run(self, stop_event: asyncio.Event) -> MetricsStore:
        """
        Run every loop until ``stop_event`` is set and all loops have
        returned.

        Returns
        -------
        MetricsStore
            The store, with its final counters.

        Raises
        ------
        ContractViolationError
            A loop hit a broken invariant. The remaining loops are stopped
            and drained before this propagates.
        """
        owns_client = self._client is None
        client = self._client or self._build_client()
        prober = EndpointProber(client)

        try:
            tasks = self._spawn(prober, stop_event)
            await self._drain(tasks, stop_event)
        finally:
            if owns_client:
                await client.aclose()

        logger.info("All healthchecks stopped")
        return self.store

    def _spawn(self, prober: EndpointProber, stop_event: asyncio.Event) -> List[asyncio.Task]:
        reporter = ReporterLoop(self.store, self.report_interval, stop_event)
        tasks = [asyncio.create_task(reporter.run(), name="reporter")]
        for endpoint in self.endpoints:
            loop = CheckLoop(endpoint, prober, self.store, self.check_interval, stop_event)
            tasks.append(asyncio.create_task(loop.run(), name=f"check:{endpoint}"))

        logger.info(f"✓ Started {len(tasks) - 1} check loop(s) and the reporter")
        return tasks

    async def _drain(self, tasks: List[asyncio.Task], stop_event: asyncio.Event) -> None:
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            if pending:
                # a loop died before shutdown was requested
                logger.error("[Engine] A loop failed, stopping all loops")
                stop_event.set()
                await asyncio.wait(pending)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in tasks:
            if task.cancelled():
                continue
            error = task.exception()
            if error is not None:
                logger.opt(exception=error).critical(
                    f"[Engine] Task {task.get_name()} raised: {error}"
                )
                if isinstance(error, ContractViolationError):
                    raise error
