"""
============================================================================
HEALTH CHECKER - MAIN APPLICATION
============================================================================
Polls every configured endpoint on a fixed interval, logs one line per
check and a periodic metrics summary, and shuts down cleanly on
SIGINT / SIGTERM.

Startup Order
-------------
1.  Load settings & configure logging
2.  Load and validate the JSON checker config
3.  Build the HealthCheckEngine (metrics store, limits)
4.  Install signal handlers
5.  Run the engine until the stop event is set and every loop has drained

Exit codes
----------
0  clean shutdown
1  configuration error (nothing was started) or broken invariant

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import signal
import sys
from typing import Optional

from pydantic import ValidationError

from config.loader import load_checker_config
from config.settings import Settings, get_settings
from exceptions.base import ConfigurationError, ContractViolationError
from monitoring.monitor import HealthCheckEngine
from utils.logger import get_logger, setup_logging


logger = get_logger("Main")


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class HealthCheckerApplication:
    """
    Top-level application orchestrator.

    Owns the engine and the stop event, and is the single place that
    knows the startup / shutdown order.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine: Optional[HealthCheckEngine] = None
        self.stop_event: Optional[asyncio.Event] = None

    def startup(self) -> HealthCheckEngine:
        """
        Load the checker config and build the engine.

        Raises:
            ConfigurationError: if the configuration cannot be used
        """
        logger.info(f"{self.settings.app_name} v{self.settings.app_version} starting")
        config = load_checker_config(settings=self.settings)
        self.engine = HealthCheckEngine.from_config(config, self.settings)
        return self.engine

    def request_shutdown(self, reason: str = "received shutdown signal") -> None:
        """Set the stop event. Safe to call any number of times."""
        if self.stop_event is None:
            return
        logger.info(reason)
        self.stop_event.set()

    async def run(self) -> None:
        """Run the engine until shutdown is requested and all loops have drained."""
        if self.engine is None:
            self.startup()

        self.stop_event = asyncio.Event()
        _install_signal_handlers(asyncio.get_running_loop(), self)

        await self.engine.run(self.stop_event)


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(loop: asyncio.AbstractEventLoop, app: HealthCheckerApplication) -> None:
    """
    Install SIGTERM / SIGINT handlers that set the application's stop
    event.
    """
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, app.request_shutdown)
        except (NotImplementedError, OSError, RuntimeError):
            # Signal handlers aren't supported on Windows or off the main
            # thread; fall back to KeyboardInterrupt
            logger.debug(f"Cannot install handler for {sig.name}")


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

async def main(settings: Optional[Settings] = None) -> int:
    """
    Create the app, start it and run until shutdown.

    Returns:
        Process exit code
    """
    app = HealthCheckerApplication(settings)

    try:
        app.startup()
    except ConfigurationError as e:
        logger.bind(**e.log_fields()).error(f"Error getting config: {e.log_format()}")
        return 1

    try:
        await app.run()
    except ContractViolationError as e:
        logger.bind(**e.log_fields()).critical(f"Invariant violated, exiting: {e.log_format()}")
        return 1

    return 0


def cli() -> None:
    """Console script entry point."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid environment settings: {e}")
        sys.exit(1)

    setup_logging(settings)
    try:
        exit_code = asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received")
        exit_code = 0
    sys.exit(exit_code)


# ============================================================================
# SCRIPT ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    cli()
