"""
Odour prediction data model.

An OdourPrediction is the engine's output for one emission source at one
point in time: an outer footprint polygon, nested intensity contours, a
peak intensity and the validity window during which it is current.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np


@dataclass
class ContourPolygon:
    """A nested iso-intensity ring inside the full footprint.

    Args:
        level: Display label ("high", "medium", "low").
        threshold: Fraction of peak intensity this ring represents.
        intensity: Absolute intensity at the ring (base * threshold, 1 d.p.).
        coordinates: (N, 2) array of [x, y] map-percent vertices.
        distance_fraction: Fraction of the plume length covered by the ring.
    """

    level: str
    threshold: float
    intensity: float
    coordinates: np.ndarray = field(repr=False, compare=False)
    distance_fraction: Optional[float] = None


@dataclass
class PredictionGeometry:
    """Footprint polygon plus optional contours and diagnostic decay curve."""

    coordinates: np.ndarray = field(repr=False, compare=False)
    contours: List[ContourPolygon] = field(default_factory=list)
    peak_intensity: float = 0.0
    length: float = 0.0
    max_width: float = 0.0
    intensity_profile: List[Dict[str, float]] = field(default_factory=list, repr=False)


@dataclass
class OdourPrediction:
    """A stored footprint for one source, valid over [valid_from, valid_to)."""

    site_id: str
    source_id: str
    valid_from: datetime
    valid_to: datetime
    geometry: PredictionGeometry
    peak_intensity: float
    model_version: str

    def __post_init__(self):
        if self.valid_to <= self.valid_from:
            raise ValueError("valid_to must be after valid_from")

    def is_current(self, at: datetime) -> bool:
        return self.valid_from <= at < self.valid_to

    def is_expired(self, at: datetime) -> bool:
        """Ended strictly before ``at``; a window closing exactly at ``at`` is kept."""
        return self.valid_to < at
