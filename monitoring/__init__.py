"""
============================================================================
HEALTH CHECKER - MONITORING PACKAGE
============================================================================
Runtime monitoring infrastructure:
    • HealthCheckEngine - spawns and drains every loop
    • EndpointProber    - one timed HTTP GET per call
    • CheckLoop         - per-endpoint periodic checker
    • ReporterLoop      - periodic metrics summary
    • MetricsStore      - per-endpoint locked statistics
    • PeriodicTicker    - stop-aware fixed-period timer

File layout
-----------
monitoring/
├── __init__.py          ← this file
├── monitor.py           ← HealthCheckEngine + EndpointProber
├── check_loop.py        ← CheckLoop
├── reporter.py          ← ReporterLoop
├── metrics.py           ← MetricsStore, EndpointStats, StatsSnapshot
├── measurement.py       ← Measurement
└── scheduler.py         ← PeriodicTicker

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from monitoring.measurement import Measurement
from monitoring.metrics import MetricsStore, EndpointStats, StatsSnapshot
from monitoring.scheduler import PeriodicTicker
from monitoring.check_loop import CheckLoop
from monitoring.reporter import ReporterLoop
from monitoring.monitor import HealthCheckEngine, EndpointProber

__all__ = [
    # Engine
    "HealthCheckEngine",
    "EndpointProber",

    # Loops
    "CheckLoop",
    "ReporterLoop",
    "PeriodicTicker",

    # Metrics
    "Measurement",
    "MetricsStore",
    "EndpointStats",
    "StatsSnapshot",
]
