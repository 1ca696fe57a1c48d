"""
Module header conventions
"""

import importlib

import pytest

BANNER_MODULES = [
    "main",
    "monitoring",
    "monitoring.check_loop",
    "monitoring.metrics",
    "monitoring.monitor",
    "monitoring.reporter",
    "monitoring.scheduler",
    "utils.logger",
    "utils.validators",
]


@pytest.mark.unit
@pytest.mark.parametrize("name", BANNER_MODULES)
def test_banner_carries_license_footer(name):
    doc = importlib.import_module(name).__doc__
    footer = doc.strip().splitlines()[-4:]

    assert footer[0] == "Author: Professional Development Team"
    assert footer[1] == "Version: 1.0.0"
    assert footer[2] == "License: MIT"
    assert footer[3].startswith("=====")
