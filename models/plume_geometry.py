"""
Plume Geometry Generator.

Builds the closed teardrop polygon that approximates an odour footprint on
the site map.  The polygon is anchored at the source, points along the
direction the wind blows TOWARD, and widens linearly with distance.

Convention:
  - Wind direction uses METEOROLOGICAL convention (direction wind comes FROM).
  - Map coordinates are percentages of the site-map image with the origin at
    the top-left: x grows to the right (East), y grows downwards (South).
  - Every emitted vertex is clamped to [0, 100]; a footprint running off the
    map edge is truncated there.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from config import MAP_MAX, MAP_MIN, PLUME_HALF_WIDTH_FACTOR, PLUME_SEGMENTS


def travel_direction_rad(wind_from_deg: float) -> float:
    """Convert a meteorological wind direction to the travel bearing in radians."""
    return float(np.radians((wind_from_deg + 180.0) % 360.0))


def direction_vectors(wind_from_deg: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return (along, across) unit vectors in map coordinates.

    ``along`` points downwind.  Because the map y axis points down, a bearing
    of 0 (north) maps to (0, -1).  ``across`` is the "right" side of the
    plume when looking along the bearing on a north-up compass.
    """
    theta = travel_direction_rad(wind_from_deg)
    along = np.array([np.sin(theta), -np.cos(theta)])
    across = np.array([np.cos(theta), np.sin(theta)])
    return along, across


def clamp_to_map(points: np.ndarray) -> np.ndarray:
    """Clip polygon vertices to the map bounds on both axes."""
    return np.clip(points, MAP_MIN, MAP_MAX)


def cone_at_fraction(
    source_x: float,
    source_y: float,
    wind_from_deg: float,
    length: float,
    max_width: float,
    fraction: float = 1.0,
    segments: int = PLUME_SEGMENTS,
) -> np.ndarray:
    """
    Generate the footprint polygon scaled to ``fraction`` of the full plume.

    Vertex order:
        source, right edge (i = 1..segments), tip, left edge (i = segments..1)

    At step ``t = i / segments`` the centerline point lies ``length*f*t``
    downwind and the edge is offset by ``(max_width*f) * t * 0.5``.

    Args:
        source_x, source_y: Source center (map percent).
        wind_from_deg: Meteorological wind direction (degrees).
        length: Full plume length (map percent).
        max_width: Full plume width at the tip (map percent).
        fraction: Distance fraction in (0, 1]; 1.0 gives the full footprint.
        segments: Number of steps along each edge.

    Returns:
        (2 * segments + 2, 2) array of [x, y] vertices clamped to [0, 100].
    """
    if not 0.0 < fraction <= 1.0:
        raise ValueError(f"Distance fraction must be in (0, 1], got {fraction}")
    if segments < 1:
        raise ValueError("segments must be >= 1")

    along, across = direction_vectors(wind_from_deg)
    source = np.array([source_x, source_y], dtype=float)
    cone_length = length * fraction
    cone_width = max_width * fraction

    t = np.arange(1, segments + 1) / segments
    centers = source + np.outer(cone_length * t, along)
    offsets = np.outer(cone_width * t * PLUME_HALF_WIDTH_FACTOR, across)

    right_edge = centers + offsets
    left_edge = (centers - offsets)[::-1]
    tip = source + along * cone_length

    points = np.vstack([source, right_edge, tip, left_edge])
    return clamp_to_map(points)


@dataclass(frozen=True)
class PlumeShape:
    """Full-extent plume description; contours are cones at smaller fractions."""

    source_x: float
    source_y: float
    wind_from_deg: float
    length: float
    max_width: float
    segments: int = PLUME_SEGMENTS

    def cone(self, fraction: float = 1.0) -> np.ndarray:
        return cone_at_fraction(
            self.source_x,
            self.source_y,
            self.wind_from_deg,
            self.length,
            self.max_width,
            fraction=fraction,
            segments=self.segments,
        )

    @property
    def tip(self) -> Tuple[float, float]:
        """Unclamped downwind end of the full plume centerline."""
        along, _ = direction_vectors(self.wind_from_deg)
        x = self.source_x + along[0] * self.length
        y = self.source_y + along[1] * self.length
        return float(x), float(y)


def polygon_area(points: np.ndarray) -> float:
    """Shoelace area of a closed ring (map percent squared)."""
    x = points[:, 0]
    y = points[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))
