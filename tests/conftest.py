"""
Pytest fixtures for custom curve tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from curvesmith.time_range import Flight, ScheduledEvent


@pytest.fixture
def half_day_flight() -> Flight:
    """
    Twelve-hour flight with a 100 impression goal.

    2024-03-27 00:00 → 2024-03-27 12:00
    """
    return Flight("2024-03-27T00:00:00", "2024-03-27T12:00:00", 100)


@pytest.fixture
def ten_day_flight() -> Flight:
    """
    Ten-day flight with a 100k impression goal (10k per day if paced evenly).

    2024-01-01 00:00 → 2024-01-11 00:00
    """
    return Flight("2024-01-01T00:00:00", "2024-01-11T00:00:00", 100_000)


@pytest.fixture
def morning_event() -> ScheduledEvent:
    """06:00-09:00 event on the half-day flight claiming 20%."""
    return ScheduledEvent("2024-03-27T06:00:00", "2024-03-27T09:00:00", 20, "A")
