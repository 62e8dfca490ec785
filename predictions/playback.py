"""
Historical plume playback.

Replays the dispersion model over a site's recent weather snapshots so an
operator can step through how footprints moved (e.g. when investigating a
complaint).  Frames are computed on demand and never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Sequence, Union

from config import DEFAULT_MODEL_VERSION, DEFAULT_VALIDITY_HOURS
from data.sources import EmissionSource
from data.weather import WeatherObservation
from models.dispersion import ModelVersion
from models.prediction import OdourPrediction
from predictions.lifecycle import build_predictions


@dataclass
class PlaybackFrame:
    """Footprints for every usable source under one historical snapshot."""

    recorded_at: datetime
    weather: WeatherObservation
    predictions: List[OdourPrediction] = field(default_factory=list)


def build_playback_frames(
    site_id: str,
    sources: Sequence[EmissionSource],
    observations: Iterable[WeatherObservation],
    model_version: Union[str, ModelVersion] = DEFAULT_MODEL_VERSION,
    validity_hours: float = DEFAULT_VALIDITY_HOURS,
) -> List[PlaybackFrame]:
    """
    Build one frame per complete snapshot, ordered oldest to newest.

    Snapshots missing wind speed, direction or stability class are left out.
    Each frame's validity window starts at its snapshot time.
    """
    ordered = sorted(
        (o for o in observations if o.is_complete),
        key=lambda o: o.recorded_at,
    )
    frames = []
    for obs in ordered:
        batch = build_predictions(
            site_id, sources, obs, obs.recorded_at,
            validity_hours=validity_hours, model_version=model_version,
        )
        frames.append(PlaybackFrame(recorded_at=obs.recorded_at, weather=obs, predictions=batch.predictions))
    return frames
