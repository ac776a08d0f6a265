"""Pytest fixtures for day length calculator tests.

This module provides test fixtures that ensure:
1. No geolocation requests leave the process
2. Settings are re-read for every test
"""

import os
from datetime import date

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("DAYLENGTH_GEOLOCATION_URL", "https://geolocation.invalid/json/")
os.environ.setdefault("DAYLENGTH_GEOLOCATION_TIMEOUT_SECONDS", "1")

from daylength.models.location import Coordinates, TimeContext


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from daylength.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Location Fixtures
# =============================================================================


@pytest.fixture
def london() -> Coordinates:
    """Greenwich-ish coordinates used for the mid-latitude scenarios."""
    return Coordinates(latitude=51.5, longitude=0.0)


@pytest.fixture
def equator() -> Coordinates:
    return Coordinates(latitude=0.0, longitude=0.0)


@pytest.fixture
def arctic() -> Coordinates:
    """85°N, inside the Arctic circle all year."""
    return Coordinates(latitude=85.0, longitude=0.0)


@pytest.fixture
def summer_solstice() -> TimeContext:
    return TimeContext(day=date(2025, 6, 21), timezone_hours=0.0)


@pytest.fixture
def winter_solstice() -> TimeContext:
    return TimeContext(day=date(2025, 12, 21), timezone_hours=0.0)
