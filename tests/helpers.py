"""
Shared helpers for the test-suite: mocked HTTP transports and polling.
"""

import asyncio
import time
from typing import Awaitable, Callable, Iterable, Optional

import httpx

from config.constants import CheckOutcome
from monitoring.measurement import Measurement


async def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, step: float = 0.005) -> None:
    """Poll ``predicate`` until it is true or fail after ``timeout`` seconds."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(step)


def mock_client(handler: Callable[[httpx.Request], Awaitable[httpx.Response]]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=httpx.Timeout(5.0))


def status_handler(statuses: Iterable[int], delay: float = 0.0, calls: Optional[list] = None):
    """
    Handler answering with the given status codes in order; the last one
    repeats once the sequence is exhausted.
    """
    statuses = list(statuses)

    async def handler(request: httpx.Request) -> httpx.Response:
        index = len(calls) if calls is not None else 0
        if calls is not None:
            calls.append(request)
        if delay:
            await asyncio.sleep(delay)
        return httpx.Response(statuses[min(index, len(statuses) - 1)])

    return handler


def measurement(
    endpoint: str,
    outcome: CheckOutcome,
    elapsed: float = 0.01,
    status_code: Optional[int] = None,
) -> Measurement:
    if status_code is None and outcome is not CheckOutcome.TRANSPORT_FAILURE:
        status_code = 200 if outcome is CheckOutcome.HEALTHY else 500
    return Measurement(endpoint=endpoint, elapsed=elapsed, outcome=outcome, status_code=status_code)
