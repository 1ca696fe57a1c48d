"""
Result value of a single check.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from config.constants import CheckOutcome, Defaults


@dataclass(frozen=True)
class Measurement:
    """
    Outcome of one check against one endpoint.

    Produced by the prober, folded into the metrics store by the owning
    check loop, then discarded.
    """

    endpoint: str
    elapsed: float  # seconds
    outcome: CheckOutcome
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def healthy(self) -> bool:
        return self.outcome is CheckOutcome.HEALTHY

    @property
    def got_response(self) -> bool:
        return self.outcome.got_response

    @property
    def elapsed_ms(self) -> int:
        return int(self.elapsed * 1000)

    @property
    def status_label(self) -> Union[int, str]:
        return self.status_code if self.status_code is not None else Defaults.NO_STATUS
