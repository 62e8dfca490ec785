"""Shared fixtures for the Odour Dispersion Prediction Engine test suite."""

import sys
import os
from datetime import datetime, timezone

import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from data.sources import EmissionSource
from data.weather import WeatherObservation


@pytest.fixture
def now():
    """A fixed, timezone-aware run time."""
    return datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def center_source():
    """A point source in the middle of the site map with default strength."""
    return EmissionSource(
        id="src-1",
        site_id="site-1",
        name="Test Source",
        geometry={"type": "point", "x": 50.0, "y": 50.0},
        base_intensity=3,
    )


@pytest.fixture
def west_wind(now):
    """Moderate west wind (plume travels toward +x), neutral stability."""
    return WeatherObservation(
        site_id="site-1",
        recorded_at=now,
        wind_speed_mps=5.0,
        wind_direction_deg=270.0,
        stability_class="D",
    )


@pytest.fixture
def site_sources():
    """Three sources for 'site-1': a point, a polygon and one without usable geometry."""
    return [
        EmissionSource(
            id="src-point",
            site_id="site-1",
            geometry={"type": "point", "x": 20.0, "y": 30.0},
            base_intensity=4,
        ),
        EmissionSource(
            id="src-poly",
            site_id="site-1",
            geometry={
                "type": "polygon",
                "coordinates": [
                    {"x": 40.0, "y": 40.0},
                    {"x": 60.0, "y": 40.0},
                    {"x": 60.0, "y": 60.0},
                    {"x": 40.0, "y": 60.0},
                ],
            },
        ),
        EmissionSource(
            id="src-broken",
            site_id="site-1",
            geometry={"type": "polygon", "coordinates": []},
        ),
    ]
