"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import asyncio
import os
import sys

import pytest
from loguru import logger

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def log_records():
    """
    Capture loguru records emitted during the test.

    Yields the list of loguru record dicts (message, level, extra, ...).
    """
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def write_config(tmp_path):
    """Write a checker config file and return its path."""
    import json

    def _write(data, name="config.json"):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_settings():
    """Build Settings pointing at a given config file, without touching the cache."""
    from config.settings import MonitoringSettings, Settings

    def _make(config_path=None, **monitoring):
        if config_path is not None:
            monitoring["config_path"] = config_path
        return Settings(monitoring=MonitoringSettings(**monitoring))

    return _make


@pytest.fixture
def stop_event():
    """Fresh stop event (bound lazily to the running loop on first wait)."""
    return asyncio.Event()
