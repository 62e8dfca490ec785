"""
Dispersion model dispatch.

Each model version is a separate strategy with the same contract:

    strategy(center, base_intensity, weather, params) -> PredictionGeometry

Versions are selected by name and stamped on every stored prediction as
``model_version``.  Old predictions are never converted between versions;
they are regenerated.
"""

import enum
from dataclasses import dataclass
from typing import Callable, Dict, Tuple, Union

from config import DEFAULT_DURATION_MINUTES, PLUME_SEGMENTS
from data.weather import WeatherObservation
from models.contours import extract_contours
from models.intensity import (
    gaussian_extent,
    gaussian_peak_intensity,
    intensity_profile,
    plume_extent,
    plume_peak_intensity,
)
from models.plume_geometry import PlumeShape
from models.prediction import PredictionGeometry


class ModelVersion(str, enum.Enum):
    GAUSSIAN_V1 = "gaussian-v1"
    PLUME_V2 = "plume-v2"


@dataclass(frozen=True)
class ModelParams:
    """Tunable inputs shared by all strategies."""

    duration_minutes: float = DEFAULT_DURATION_MINUTES
    segments: int = PLUME_SEGMENTS


Strategy = Callable[[Tuple[float, float], float, WeatherObservation, ModelParams], PredictionGeometry]


def gaussian_v1(
    center: Tuple[float, float],
    base_intensity: float,
    weather: WeatherObservation,
    params: ModelParams,
) -> PredictionGeometry:
    """Sigma-based footprint without contours."""
    extent = gaussian_extent(base_intensity, weather.wind_speed_mps, weather.stability_class)
    shape = PlumeShape(
        source_x=center[0],
        source_y=center[1],
        wind_from_deg=weather.wind_direction_deg,
        length=extent.length,
        max_width=extent.max_width,
        segments=params.segments,
    )
    return PredictionGeometry(
        coordinates=shape.cone(1.0),
        peak_intensity=gaussian_peak_intensity(base_intensity, weather.wind_speed_mps),
        length=extent.length,
        max_width=extent.max_width,
    )


def plume_v2(
    center: Tuple[float, float],
    base_intensity: float,
    weather: WeatherObservation,
    params: ModelParams,
) -> PredictionGeometry:
    """Travel-time footprint with exponential decay and nested contours."""
    extent = plume_extent(weather.wind_speed_mps, weather.stability_class, params.duration_minutes)
    shape = PlumeShape(
        source_x=center[0],
        source_y=center[1],
        wind_from_deg=weather.wind_direction_deg,
        length=extent.length,
        max_width=extent.max_width,
        segments=params.segments,
    )
    return PredictionGeometry(
        coordinates=shape.cone(1.0),
        contours=extract_contours(shape, base_intensity),
        peak_intensity=plume_peak_intensity(base_intensity, weather.wind_speed_mps),
        length=extent.length,
        max_width=extent.max_width,
        intensity_profile=intensity_profile(base_intensity, extent.length),
    )


STRATEGIES: Dict[ModelVersion, Strategy] = {
    ModelVersion.GAUSSIAN_V1: gaussian_v1,
    ModelVersion.PLUME_V2: plume_v2,
}


def resolve_model_version(version: Union[str, ModelVersion]) -> ModelVersion:
    try:
        return ModelVersion(version)
    except ValueError:
        valid = ", ".join(v.value for v in ModelVersion)
        raise ValueError(f"Unknown model version '{version}'. Use one of: {valid}.") from None


def compute_prediction_geometry(
    version: Union[str, ModelVersion],
    center: Tuple[float, float],
    base_intensity: float,
    weather: WeatherObservation,
    params: ModelParams = ModelParams(),
) -> PredictionGeometry:
    """
    Run the named model version for one source.

    Args:
        version: "gaussian-v1" or "plume-v2".
        center: Source center (map percent).
        base_intensity: Source strength.
        weather: A complete weather observation.
        params: Shared tunables.

    Returns:
        PredictionGeometry with the outer polygon, contours (v2 only) and
        peak intensity.
    """
    if not weather.is_complete:
        raise ValueError("Weather observation is incomplete")
    strategy = STRATEGIES[resolve_model_version(version)]
    return strategy(center, base_intensity, weather, params)
