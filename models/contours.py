"""
Contour Extractor.

Inverts the plume-v2 decay law to find where intensity falls to fixed
fractions of the peak, and draws a nested cone for each of them.

For I(d) = I0 * exp(-d / (0.6 * D)), solving I(d) = tau * I0 gives
d = -ln(tau) * 0.6 * D, i.e. a distance fraction of -ln(tau) * 0.6.
"""

import math
from typing import List, Sequence, Tuple

from config import CONTOUR_LEVELS, DECAY_LENGTH_FRACTION, MIN_CONTOUR_FRACTION
from models.intensity import round_intensity
from models.plume_geometry import PlumeShape
from models.prediction import ContourPolygon


def contour_distance_fraction(threshold: float) -> float:
    """Fraction of the plume length at which intensity drops to ``threshold`` of peak."""
    if not 0.0 < threshold <= 1.0:
        raise ValueError(f"Contour threshold must be in (0, 1], got {threshold}")
    return min(1.0, -math.log(threshold) * DECAY_LENGTH_FRACTION)


def extract_contours(
    shape: PlumeShape,
    base_intensity: float,
    levels: Sequence[Tuple[float, str]] = CONTOUR_LEVELS,
) -> List[ContourPolygon]:
    """
    Build one contour polygon per threshold level, in table order.

    Levels whose distance fraction is at or below MIN_CONTOUR_FRACTION are
    too small to draw and are left out entirely.

    Args:
        shape: Full-extent plume the contours nest inside.
        base_intensity: Source strength; contour intensity = base * tau.
        levels: (threshold, label) pairs.

    Returns:
        List of ContourPolygon, high to low.
    """
    contours = []
    for threshold, label in levels:
        fraction = contour_distance_fraction(threshold)
        if fraction <= MIN_CONTOUR_FRACTION:
            continue
        contours.append(
            ContourPolygon(
                level=label,
                threshold=threshold,
                intensity=round_intensity(base_intensity * threshold),
                coordinates=shape.cone(fraction),
                distance_fraction=fraction,
            )
        )
    return contours
