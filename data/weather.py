"""
Weather observations for odour prediction.

A WeatherObservation is a timestamped snapshot for a site.  Snapshots are
produced by an external ingestion job, so any of the wind fields may be
missing; the prediction engine only runs on a complete observation.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


@dataclass
class WeatherObservation:
    """A single weather snapshot for a site.

    Args:
        site_id: Site the snapshot belongs to.
        recorded_at: Observation time.
        wind_speed_mps: Wind speed (m/s), None if not reported.
        wind_direction_deg: Meteorological degrees (direction wind comes FROM).
        stability_class: Pasquill-Gifford class A-F, None if not reported.
        temperature_c: Optional ambient temperature.
    """

    site_id: str
    recorded_at: datetime
    wind_speed_mps: Optional[float] = None
    wind_direction_deg: Optional[float] = None
    stability_class: Optional[str] = None
    temperature_c: Optional[float] = None

    def __post_init__(self):
        if self.wind_speed_mps is not None and self.wind_speed_mps < 0:
            raise ValueError("Wind speed must be >= 0")
        if self.stability_class is not None:
            self.stability_class = str(self.stability_class).strip().upper() or None

    @property
    def is_complete(self) -> bool:
        """True when speed, direction and stability class are all present."""
        return (
            self.wind_speed_mps is not None
            and self.wind_direction_deg is not None
            and bool(self.stability_class)
        )

    def summary(self) -> dict:
        return {
            "wind_speed": self.wind_speed_mps,
            "wind_direction": self.wind_direction_deg,
            "stability_class": self.stability_class,
        }


def latest_observation(
    observations: Iterable[WeatherObservation],
) -> Optional[WeatherObservation]:
    """Return the most recently recorded observation, or None if there are none."""
    return max(observations, key=lambda o: o.recorded_at, default=None)


def wind_direction_text(direction_deg: float) -> str:
    """16-point compass label for a meteorological direction (e.g. 270 -> 'W')."""
    index = int(round((direction_deg % 360.0) / 22.5)) % 16
    return COMPASS_POINTS[index]


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed); naive values are taken as UTC."""
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def weather_from_record(record: dict) -> WeatherObservation:
    """Build a WeatherObservation from a stored row (``weather_snapshots`` shape)."""
    return WeatherObservation(
        site_id=str(record["site_id"]),
        recorded_at=parse_timestamp(record["recorded_at"]),
        wind_speed_mps=record.get("wind_speed_mps"),
        wind_direction_deg=record.get("wind_direction_deg"),
        stability_class=record.get("stability_class"),
        temperature_c=record.get("temperature_c"),
    )
