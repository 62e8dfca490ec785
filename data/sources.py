"""
Emission source data model.

An emission source is an odour-generating location drawn on a site map,
either as a single point or as a polygon outline.  Coordinates are map
percentages in [0, 100].
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from config import DEFAULT_BASE_INTENSITY


@dataclass
class EmissionSource:
    """An odour source on the site map.

    Args:
        id: Source identifier.
        site_id: Owning site.
        geometry: ``{"type": "point", "x", "y"}`` or
            ``{"type": "polygon", "coordinates": [{"x", "y"}, ...]}``.
        name: Optional display name.
        base_intensity: Nominal 1..5 strength; missing or zero means default (3).
    """

    id: str
    site_id: str
    geometry: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None
    base_intensity: Optional[float] = None

    @property
    def effective_intensity(self) -> float:
        return self.base_intensity or DEFAULT_BASE_INTENSITY

    @property
    def center(self) -> Optional[Tuple[float, float]]:
        return resolve_source_center(self.geometry)


def resolve_source_center(geometry: Any) -> Optional[Tuple[float, float]]:
    """
    Resolve a source geometry to a single (x, y) center.

    Point geometry resolves to itself; polygon geometry to the arithmetic
    mean of its vertices.  Anything else (unknown type, missing coordinates,
    empty or malformed polygon) returns None.
    """
    if not isinstance(geometry, dict):
        return None

    geom_type = geometry.get("type")
    try:
        if geom_type == "point":
            x, y = geometry.get("x"), geometry.get("y")
            if x is None or y is None:
                return None
            return float(x), float(y)

        if geom_type == "polygon":
            coords = geometry.get("coordinates") or []
            if not coords:
                return None
            xs = [float(c["x"]) for c in coords]
            ys = [float(c["y"]) for c in coords]
            return sum(xs) / len(xs), sum(ys) / len(ys)
    except (KeyError, TypeError, ValueError):
        return None

    return None


def source_from_record(record: Dict[str, Any]) -> EmissionSource:
    """Build an EmissionSource from a stored row (``odour_sources`` shape)."""
    return EmissionSource(
        id=str(record["id"]),
        site_id=str(record["site_id"]),
        geometry=record.get("geometry") or {},
        name=record.get("name"),
        base_intensity=record.get("base_intensity"),
    )
