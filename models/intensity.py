"""
Odour Intensity Model.

Two independently versioned ways of turning source strength and wind into a
plume extent and a peak intensity:

  gaussian-v1  length grows linearly with wind speed and is scaled by the
               Scheme A spread factor; width follows sigma_y.
  plume-v2     length is the distance odour travels in a fixed time window,
               converted to map units and capped; width follows the
               Scheme B spread fraction.  Intensity decays exponentially
               with distance along the plume.

The versions encode different physical assumptions and are kept separate.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Union

import numpy as np

from config import (
    DECAY_LENGTH_FRACTION,
    DEFAULT_DURATION_MINUTES,
    GAUSSIAN_BASE_LENGTH,
    GAUSSIAN_LENGTH_PER_MPS,
    GAUSSIAN_PEAK_WIND_FACTOR,
    INTENSITY_PROFILE_SAMPLES,
    MAX_PLUME_DISTANCE,
    METERS_TO_MAP_PERCENT,
    PLUME_PEAK_WIND_FACTOR,
)
from models.stability import get_gaussian_parameters, get_spread_fraction


@dataclass(frozen=True)
class PlumeExtent:
    """Plume length and full width at the tip, both in map percent."""

    length: float
    max_width: float


# ── gaussian-v1 ──────────────────────────────────────────────────────────────

def gaussian_extent(base_intensity: float, wind_speed: float, stability_class: str) -> PlumeExtent:
    """
    length    = (15 + 4*ws) * (base/3) * spread_factor
    max_width = length * sigma_y * 2
    """
    params = get_gaussian_parameters(stability_class)
    length = (
        (GAUSSIAN_BASE_LENGTH + GAUSSIAN_LENGTH_PER_MPS * wind_speed)
        * (base_intensity / 3.0)
        * params.spread_factor
    )
    return PlumeExtent(length=length, max_width=length * params.sigma_y * 2.0)


def gaussian_peak_intensity(base_intensity: float, wind_speed: float) -> float:
    return base_intensity * (1.0 + GAUSSIAN_PEAK_WIND_FACTOR * wind_speed)


# ── plume-v2 ─────────────────────────────────────────────────────────────────

def travel_distance(
    wind_speed: float,
    duration_minutes: float = DEFAULT_DURATION_MINUTES,
) -> float:
    """
    Distance odour travels in ``duration_minutes``, in map percent.

    distance_m = ws * duration * 60, scaled by METERS_TO_MAP_PERCENT and
    capped at MAX_PLUME_DISTANCE.
    """
    distance_m = wind_speed * duration_minutes * 60.0
    return min(distance_m * METERS_TO_MAP_PERCENT, MAX_PLUME_DISTANCE)


def plume_extent(
    wind_speed: float,
    stability_class: str,
    duration_minutes: float = DEFAULT_DURATION_MINUTES,
) -> PlumeExtent:
    distance = travel_distance(wind_speed, duration_minutes)
    return PlumeExtent(length=distance, max_width=distance * get_spread_fraction(stability_class))


def plume_peak_intensity(base_intensity: float, wind_speed: float) -> float:
    return base_intensity * (1.0 + PLUME_PEAK_WIND_FACTOR * wind_speed)


def intensity_at_distance(
    base_intensity: float,
    distance: Union[float, np.ndarray],
    max_distance: float,
) -> Union[float, np.ndarray]:
    """
    Exponential decay law:  I(d) = base * exp(-d / (0.6 * D)).

    A zero-length plume (calm wind) has no decay scale; the curve is flat
    at ``base_intensity``.

    Args:
        base_intensity: Source strength on the 1..5 scale.
        distance: Distance(s) along the plume (map percent).
        max_distance: Full plume distance D (map percent).
    """
    if max_distance <= 0:
        return np.full_like(np.asarray(distance, dtype=float), base_intensity)[()]
    decay_length = DECAY_LENGTH_FRACTION * max_distance
    return base_intensity * np.exp(-np.asarray(distance, dtype=float) / decay_length)[()]


def intensity_profile(
    base_intensity: float,
    max_distance: float,
    samples: int = INTENSITY_PROFILE_SAMPLES,
) -> List[Dict[str, float]]:
    """Sample the decay curve at ``samples`` equally spaced points from 0 to D."""
    distances = np.linspace(0.0, max_distance, samples)
    intensities = np.atleast_1d(intensity_at_distance(base_intensity, distances, max_distance))
    return [
        {"distance": float(d), "intensity": float(i)}
        for d, i in zip(distances, intensities)
    ]


def round_intensity(value: float) -> float:
    """Round to one decimal place, halves away from zero (1.25 -> 1.3)."""
    return math.floor(value * 10.0 + 0.5) / 10.0
