"""
Unit Tests for CheckLoop
"""

import asyncio

import pytest

from config.constants import CheckOutcome, LoopState
from exceptions.base import ContractViolationError
from exceptions.monitoring import ProbeError
from monitoring.check_loop import CheckLoop
from monitoring.measurement import Measurement
from monitoring.metrics import MetricsStore
from monitoring.monitor import EndpointProber
from tests.helpers import measurement, mock_client, status_handler, wait_until

URL = "https://api.example.com/health"
OTHER = "https://other.example.com"


class FakeProber:
    """Returns canned results in order, repeating the last one."""

    def __init__(self, results):
        self.results = list(results)
        self.calls = 0

    async def probe(self, endpoint, stop_event):
        result = self.results[min(self.calls, len(self.results) - 1)]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


def _messages(records, level=None):
    return [
        r["message"] for r in records
        if level is None or r["level"].name == level
    ]


@pytest.mark.unit
class TestConstruction:

    def test_unknown_endpoint_rejected(self, stop_event):
        store = MetricsStore([URL])
        with pytest.raises(ContractViolationError):
            CheckLoop(OTHER, FakeProber([None]), store, 1.0, stop_event)

    @pytest.mark.parametrize("interval", [0, -2])
    def test_non_positive_interval_rejected(self, interval, stop_event):
        store = MetricsStore([URL])
        with pytest.raises(ContractViolationError):
            CheckLoop(URL, FakeProber([None]), store, interval, stop_event)

    def test_starts_idle(self, stop_event):
        loop = CheckLoop(URL, FakeProber([None]), MetricsStore([URL]), 1.0, stop_event)
        assert loop.state is LoopState.IDLE
        assert loop.checks_completed == 0


@pytest.mark.unit
class TestRun:
    """Record/log behaviour of a running loop."""

    @pytest.mark.asyncio
    async def test_records_and_logs_healthy_checks(self, stop_event, log_records):
        store = MetricsStore([URL])
        prober = FakeProber([measurement(URL, CheckOutcome.HEALTHY, elapsed=0.042)])
        loop = CheckLoop(URL, prober, store, 0.01, stop_event)

        task = asyncio.create_task(loop.run())
        await wait_until(lambda: loop.checks_completed >= 2)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1.0)

        snap = store.snapshot(URL)
        assert snap.total_checks == loop.checks_completed
        assert snap.successful_checks == snap.total_checks
        assert loop.state is LoopState.STOPPED

        lines = _messages(log_records, "INFO")
        assert f"url={URL} status=200 healthy=True response_time=42ms" in lines

        check_record = next(r for r in log_records if r["message"].startswith(f"url={URL}"))
        assert check_record["extra"]["url"] == URL
        assert check_record["extra"]["status"] == 200
        assert check_record["extra"]["healthy"] is True

    @pytest.mark.asyncio
    async def test_unhealthy_checks_log_at_error(self, stop_event, log_records):
        store = MetricsStore([URL])
        prober = FakeProber([measurement(URL, CheckOutcome.UNHEALTHY, elapsed=0.005)])
        loop = CheckLoop(URL, prober, store, 0.01, stop_event)

        task = asyncio.create_task(loop.run())
        await wait_until(lambda: loop.checks_completed >= 1)
        stop_event.set()
        await task

        errors = _messages(log_records, "ERROR")
        assert f"url={URL} status=500 healthy=False response_time=5ms" in errors
        assert store.snapshot(URL).successful_checks == 0

    @pytest.mark.asyncio
    async def test_transport_failure_logs_no_status(self, stop_event, log_records):
        store = MetricsStore([URL])
        failure = Measurement(
            endpoint=URL,
            elapsed=0.001,
            outcome=CheckOutcome.TRANSPORT_FAILURE,
            error="ConnectError: refused",
        )
        loop = CheckLoop(URL, FakeProber([failure]), store, 0.01, stop_event)

        task = asyncio.create_task(loop.run())
        await wait_until(lambda: loop.checks_completed >= 1)
        stop_event.set()
        await task

        errors = _messages(log_records, "ERROR")
        assert any(
            line.startswith(f"url={URL} status=NONE healthy=False")
            and line.endswith("error=ConnectError: refused")
            for line in errors
        )
        snap = store.snapshot(URL)
        assert snap.total_response_time == 0.0
        assert snap.response_count == 0

    @pytest.mark.asyncio
    async def test_abandoned_checks_are_not_recorded(self, stop_event):
        store = MetricsStore([URL])
        prober = FakeProber([None])
        loop = CheckLoop(URL, prober, store, 0.01, stop_event)

        task = asyncio.create_task(loop.run())
        await wait_until(lambda: prober.calls >= 3)
        stop_event.set()
        await task

        assert store.snapshot(URL).total_checks == 0
        assert loop.checks_completed == 0


@pytest.mark.unit
class TestShutdown:
    """Stop requests end the loop promptly."""

    @pytest.mark.asyncio
    async def test_idle_loop_stops_promptly(self, stop_event, log_records):
        store = MetricsStore([URL])
        prober = FakeProber([measurement(URL, CheckOutcome.HEALTHY)])
        loop = CheckLoop(URL, prober, store, 10.0, stop_event)

        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.02)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1.0)

        assert prober.calls == 0
        assert loop.state is LoopState.STOPPED
        assert (
            f"stopping health check for URL url={URL} reason=shutdown requested"
            in _messages(log_records)
        )

    @pytest.mark.asyncio
    async def test_in_flight_check_is_abandoned(self, stop_event):
        store = MetricsStore([URL])
        calls = []
        async with mock_client(status_handler([200], delay=5.0, calls=calls)) as client:
            loop = CheckLoop(URL, EndpointProber(client), store, 0.01, stop_event)
            task = asyncio.create_task(loop.run())
            await wait_until(lambda: len(calls) >= 1)

            stop_event.set()
            await asyncio.wait_for(task, timeout=1.0)

        assert store.snapshot(URL).total_checks == 0
        assert loop.state is LoopState.STOPPED


@pytest.mark.unit
class TestFailures:
    """Errors inside the loop."""

    @pytest.mark.asyncio
    async def test_probe_error_stops_loop_without_raising(self, stop_event, log_records):
        store = MetricsStore([URL])
        prober = FakeProber([ProbeError("cannot build request", url=URL)])
        loop = CheckLoop(URL, prober, store, 0.01, stop_event)

        await asyncio.wait_for(loop.run(), timeout=1.0)

        assert loop.state is LoopState.STOPPED
        assert not stop_event.is_set()
        assert any("stopped unexpectedly" in m for m in _messages(log_records, "ERROR"))

    @pytest.mark.asyncio
    async def test_contract_violation_propagates(self, stop_event):
        store = MetricsStore([URL, OTHER])
        # measurement for a different endpoint than the one the loop owns
        prober = FakeProber([measurement(OTHER, CheckOutcome.HEALTHY)])
        loop = CheckLoop(URL, prober, store, 0.01, stop_event)

        with pytest.raises(ContractViolationError):
            await asyncio.wait_for(loop.run(), timeout=1.0)

        assert loop.state is LoopState.STOPPED
        assert store.snapshot(OTHER).total_checks == 0
