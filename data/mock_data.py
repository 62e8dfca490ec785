"""
Mock Data for the Odour Dispersion Prediction Engine.

Provides a synthetic wastewater treatment site with odour sources drawn on
its site map and a day of hourly weather snapshots.  Designed to be swapped
out for the live datastore later.
"""

from datetime import datetime, timedelta, timezone
from typing import List

import numpy as np

from data.sources import EmissionSource
from data.weather import WeatherObservation

DEMO_SITE_ID = "demo-wwtp"


def get_emission_sources(site_id: str = DEMO_SITE_ID) -> List[EmissionSource]:
    """
    Return the odour sources of the demo treatment plant.

    Coordinates are map percentages (origin top-left).  Tanks and basins
    are outlined as polygons; point sources are single markers.
    """
    if site_id != DEMO_SITE_ID:
        return []
    return [
        EmissionSource(
            id="src-inlet",
            site_id=site_id,
            name="Inlet Works",
            geometry={"type": "point", "x": 18.0, "y": 42.0},
            base_intensity=5,
        ),
        EmissionSource(
            id="src-primary",
            site_id=site_id,
            name="Primary Clarifier",
            geometry={
                "type": "polygon",
                "coordinates": [
                    {"x": 30.0, "y": 30.0},
                    {"x": 38.0, "y": 30.0},
                    {"x": 38.0, "y": 38.0},
                    {"x": 30.0, "y": 38.0},
                ],
            },
            base_intensity=4,
        ),
        EmissionSource(
            id="src-aeration",
            site_id=site_id,
            name="Aeration Basin",
            geometry={
                "type": "polygon",
                "coordinates": [
                    {"x": 48.0, "y": 45.0},
                    {"x": 66.0, "y": 45.0},
                    {"x": 66.0, "y": 55.0},
                    {"x": 48.0, "y": 55.0},
                ],
            },
            base_intensity=2,
        ),
        EmissionSource(
            id="src-thickener",
            site_id=site_id,
            name="Sludge Thickener",
            geometry={"type": "point", "x": 72.0, "y": 28.0},
            base_intensity=4,
        ),
        EmissionSource(
            id="src-biofilter",
            site_id=site_id,
            name="Biofilter Stack",
            geometry={"type": "point", "x": 80.0, "y": 70.0},
        ),
    ]


def get_weather_history(
    site_id: str = DEMO_SITE_ID,
    hours: int = 24,
    end: datetime = None,
) -> List[WeatherObservation]:
    """
    Return ``hours`` hourly snapshots ending at ``end``, newest first.

    The wind backs slowly from south-west to north-west over the day, with
    stable conditions overnight and unstable conditions around midday.
    """
    if site_id != DEMO_SITE_ID:
        return []
    end = end or datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)

    observations = []
    for h in range(hours):
        recorded_at = end - timedelta(hours=h)
        hour = recorded_at.hour
        phase = 2.0 * np.pi * (hour - 6) / 24.0
        speed = 3.0 + 2.0 * max(0.0, float(np.sin(phase)))
        direction = (225.0 + 90.0 * (hours - h) / max(hours, 1)) % 360.0
        if 10 <= hour <= 15:
            stability = "B"
        elif 7 <= hour <= 18:
            stability = "C"
        elif 19 <= hour <= 21 or 5 <= hour <= 6:
            stability = "D"
        else:
            stability = "F"
        observations.append(
            WeatherObservation(
                site_id=site_id,
                recorded_at=recorded_at,
                wind_speed_mps=round(speed, 1),
                wind_direction_deg=round(direction, 0),
                stability_class=stability,
                temperature_c=round(12.0 + 6.0 * float(np.sin(phase)), 1),
            )
        )
    return observations


def get_wind_scenarios() -> List[dict]:
    """
    Return preset wind scenarios for the dashboard.

    Returns:
        List of dicts with keys: 'name', 'speed', 'direction', 'stability_class'.
    """
    return [
        {"name": "Calm Night (Stable)", "speed": 1.0, "direction": 200, "stability_class": "F"},
        {"name": "Westerly Breeze", "speed": 5.0, "direction": 270, "stability_class": "D"},
        {"name": "Sunny Afternoon", "speed": 3.0, "direction": 180, "stability_class": "B"},
        {"name": "Strong Northerly", "speed": 9.0, "direction": 0, "stability_class": "D"},
        {"name": "Overcast Easterly", "speed": 4.0, "direction": 90, "stability_class": "E"},
    ]
