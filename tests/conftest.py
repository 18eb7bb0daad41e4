"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from cowarc import CowSettings, get_stats, set_settings


@pytest.fixture(autouse=True)
def default_settings():
    """Every test starts from default settings and zeroed counters."""
    set_settings(CowSettings())
    get_stats().reset()
    yield
    set_settings(None)
    get_stats().reset()


@pytest.fixture
def tracked():
    """Enable stats tracking and return the counters."""
    set_settings(CowSettings(track_stats=True))
    return get_stats()
