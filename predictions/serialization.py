"""
Prediction record serialization.

Converts OdourPrediction objects to and from the persisted/returned
artifact shape:

    {site_id, source_id, valid_from, valid_to,
     geometry: {type: "polygon", coordinates: [{x, y}, ...],
                contours: [{level, threshold, intensity, coordinates}, ...]},
     peak_intensity, model_version}

Timestamps are ISO-8601 strings in UTC.  The diagnostic intensity profile
is not persisted.
"""

from typing import Any, Dict, List

import numpy as np

from data.weather import parse_timestamp
from models.prediction import ContourPolygon, OdourPrediction, PredictionGeometry


def points_to_coordinates(points: np.ndarray) -> List[Dict[str, float]]:
    return [{"x": float(x), "y": float(y)} for x, y in np.asarray(points)]


def coordinates_to_points(coordinates: List[Dict[str, float]]) -> np.ndarray:
    return np.array([[c["x"], c["y"]] for c in coordinates], dtype=float).reshape(-1, 2)


def geometry_to_record(geometry: PredictionGeometry) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "type": "polygon",
        "coordinates": points_to_coordinates(geometry.coordinates),
    }
    if geometry.contours:
        record["contours"] = [
            {
                "level": c.level,
                "threshold": c.threshold,
                "intensity": c.intensity,
                "coordinates": points_to_coordinates(c.coordinates),
            }
            for c in geometry.contours
        ]
    return record


def prediction_to_record(prediction: OdourPrediction) -> Dict[str, Any]:
    """Serialize a prediction to its JSON-compatible artifact dict."""
    return {
        "site_id": prediction.site_id,
        "source_id": prediction.source_id,
        "valid_from": prediction.valid_from.isoformat(),
        "valid_to": prediction.valid_to.isoformat(),
        "geometry": geometry_to_record(prediction.geometry),
        "peak_intensity": prediction.peak_intensity,
        "model_version": prediction.model_version,
    }


def prediction_from_record(record: Dict[str, Any]) -> OdourPrediction:
    """
    Deserialize an artifact dict back into an OdourPrediction.

    Raises:
        KeyError: If a required field is missing.
        ValueError: If the validity window is empty or inverted.
    """
    geom = record["geometry"]
    contours = [
        ContourPolygon(
            level=c["level"],
            threshold=c["threshold"],
            intensity=c["intensity"],
            coordinates=coordinates_to_points(c["coordinates"]),
        )
        for c in geom.get("contours") or []
    ]
    peak = record.get("peak_intensity")
    return OdourPrediction(
        site_id=record["site_id"],
        source_id=record["source_id"],
        valid_from=parse_timestamp(record["valid_from"]),
        valid_to=parse_timestamp(record["valid_to"]),
        geometry=PredictionGeometry(
            coordinates=coordinates_to_points(geom["coordinates"]),
            contours=contours,
            peak_intensity=peak or 0.0,
        ),
        peak_intensity=peak,
        model_version=record.get("model_version"),
    )
