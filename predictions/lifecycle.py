"""
Prediction Lifecycle Manager.

Orchestrates one regeneration pass for a site:

  1. Load the site's emission sources (none -> empty, successful run).
  2. Load the latest weather observation (missing/incomplete -> abort).
  3. Build one prediction per source whose geometry resolves to a center;
     sources that do not resolve are skipped and counted.
  4. Delete the site's expired predictions (best effort, failures logged).
  5. Atomically store the new batch (failures are fatal).

The numeric work in step 3 lives in ``build_predictions``, which takes the
weather explicitly and touches no I/O.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from config import DEFAULT_MODEL_VERSION, DEFAULT_VALIDITY_HOURS
from data.interfaces import SiteDataProvider
from data.prediction_store import PredictionStore
from data.sources import EmissionSource
from data.weather import WeatherObservation, parse_timestamp
from models.dispersion import ModelParams, ModelVersion, compute_prediction_geometry, resolve_model_version
from models.intensity import round_intensity
from models.prediction import OdourPrediction
from predictions.serialization import prediction_to_record

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PredictionError(Exception):
    """Base class for failures of a whole generation run."""


class MissingSiteError(PredictionError, ValueError):
    """No site identifier was supplied."""


class IncompleteWeatherError(PredictionError):
    """The site has no weather observation, or it lacks wind speed, direction or stability."""


class PersistenceError(PredictionError):
    """The new batch could not be stored."""


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------

@dataclass
class SourceOutcome:
    """Per-source result: a prediction, or the reason the source was skipped."""

    source_id: str
    prediction: Optional[OdourPrediction] = None
    skip_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.prediction is not None


@dataclass
class BatchOutcome:
    predictions: List[OdourPrediction] = field(default_factory=list)
    skipped: List[SourceOutcome] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Summary of one generation run, returned to the caller."""

    site_id: str
    predictions: List[OdourPrediction] = field(default_factory=list)
    weather: Optional[WeatherObservation] = None
    skipped: List[SourceOutcome] = field(default_factory=list)
    expired_removed: Optional[int] = None

    @property
    def generated(self) -> int:
        return len(self.predictions)

    @property
    def message(self) -> str:
        if self.weather is None:
            return "No odour sources found"
        if not self.predictions:
            return "No predictions generated"
        return f"Generated {self.generated} plume predictions"

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "message": self.message,
            "generated": self.generated,
            "predictions": [prediction_to_record(p) for p in self.predictions],
            "skipped": [o.source_id for o in self.skipped],
        }
        if self.weather is not None:
            result["weather"] = self.weather.summary()
        return result


# ---------------------------------------------------------------------------
# Pure batch construction
# ---------------------------------------------------------------------------

def predict_source(
    site_id: str,
    source: EmissionSource,
    weather: WeatherObservation,
    valid_from: datetime,
    valid_to: datetime,
    model_version: ModelVersion,
    params: ModelParams,
) -> SourceOutcome:
    """Build the prediction for a single source, or a skip outcome."""
    center = source.center
    if center is None:
        return SourceOutcome(source_id=source.id, skip_reason="invalid geometry")

    geometry = compute_prediction_geometry(
        model_version, center, source.effective_intensity, weather, params,
    )
    prediction = OdourPrediction(
        site_id=site_id,
        source_id=source.id,
        valid_from=valid_from,
        valid_to=valid_to,
        geometry=geometry,
        peak_intensity=round_intensity(geometry.peak_intensity),
        model_version=model_version.value,
    )
    return SourceOutcome(source_id=source.id, prediction=prediction)


def build_predictions(
    site_id: str,
    sources: Sequence[EmissionSource],
    weather: WeatherObservation,
    now: datetime,
    validity_hours: float = DEFAULT_VALIDITY_HOURS,
    model_version: Union[str, ModelVersion] = DEFAULT_MODEL_VERSION,
    params: ModelParams = ModelParams(),
) -> BatchOutcome:
    """
    Run the dispersion model for every source under one weather observation.

    Args:
        site_id: Site the predictions belong to.
        sources: Emission sources of the site.
        weather: A complete weather observation.
        now: Start of the validity window.
        validity_hours: Window length; valid_to = now + validity_hours.
        model_version: "gaussian-v1" or "plume-v2".
        params: Shared model tunables.

    Returns:
        BatchOutcome with the predictions and the skipped sources.
    """
    if not weather.is_complete:
        raise IncompleteWeatherError("Incomplete weather data")
    if validity_hours <= 0:
        raise ValueError("validity_hours must be positive")

    version = resolve_model_version(model_version)
    valid_to = now + timedelta(hours=validity_hours)

    outcome = BatchOutcome()
    for source in sources:
        result = predict_source(site_id, source, weather, now, valid_to, version, params)
        if result.ok:
            outcome.predictions.append(result.prediction)
        else:
            logger.info("Skipping source %s: %s", source.id, result.skip_reason)
            outcome.skipped.append(result)
    return outcome


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def generate_predictions(
    site_id: str,
    provider: SiteDataProvider,
    store: PredictionStore,
    validity_hours: float = DEFAULT_VALIDITY_HOURS,
    model_version: Union[str, ModelVersion] = DEFAULT_MODEL_VERSION,
    now: Optional[datetime] = None,
    params: ModelParams = ModelParams(),
) -> GenerationResult:
    """
    Regenerate odour predictions for one site.

    Args:
        site_id: Site to regenerate.
        provider: Source and weather lookups.
        store: Prediction persistence.
        validity_hours: Length of the validity window (default 1 hour).
        model_version: Dispersion model version to run.
        now: Run time (defaults to the current UTC time; naive values are taken as UTC).
        params: Shared model tunables.

    Returns:
        GenerationResult; ``generated == 0`` when the site has no sources.

    Raises:
        MissingSiteError: ``site_id`` is empty.
        IncompleteWeatherError: No weather, or wind speed/direction/stability missing.
        PersistenceError: The new batch could not be stored.
    """
    if not site_id:
        raise MissingSiteError("site_id is required")
    if validity_hours <= 0:
        raise ValueError("validity_hours must be positive")
    version = resolve_model_version(model_version)
    now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)

    logger.info("Generating plume predictions for site %s", site_id)

    sources = provider.get_emission_sources(site_id)
    if not sources:
        logger.info("No odour sources found for site %s", site_id)
        return GenerationResult(site_id=site_id)
    logger.info("Found %d odour sources", len(sources))

    weather = provider.get_latest_weather(site_id)
    if weather is None:
        logger.info("No weather data available for site %s", site_id)
        raise IncompleteWeatherError("No weather data available")
    if not weather.is_complete:
        raise IncompleteWeatherError("Incomplete weather data")
    logger.info(
        "Weather: wind %s m/s, dir %s deg, stability %s",
        weather.wind_speed_mps, weather.wind_direction_deg, weather.stability_class,
    )

    batch = build_predictions(
        site_id, sources, weather, now,
        validity_hours=validity_hours, model_version=version, params=params,
    )

    expired_removed = None
    try:
        expired_removed = store.delete_expired(site_id, now)
    except Exception:
        logger.warning("Error deleting expired predictions for site %s", site_id, exc_info=True)

    stored: List[OdourPrediction] = []
    if batch.predictions:
        try:
            stored = store.replace_current(site_id, batch.predictions)
        except Exception as exc:
            logger.error("Error storing predictions for site %s: %s", site_id, exc)
            raise PersistenceError(f"Failed to store predictions for site {site_id}") from exc

    logger.info(
        "Generated %d predictions for site %s (%d skipped, model %s)",
        len(stored), site_id, len(batch.skipped), version.value,
    )
    return GenerationResult(
        site_id=site_id,
        predictions=stored,
        weather=weather,
        skipped=batch.skipped,
        expired_removed=expired_removed,
    )
