"""
Wind Compass Widget: sidebar SVG showing wind, stability and dispersion outlook.

Rendered via st.components.v1.html(); display-only (the sidebar inputs and
the stored weather observation remain the source of truth).
"""

import math
from typing import Optional

from data.weather import wind_direction_text
from models.stability import dispersion_outlook, resolve_stability_class

STABILITY_RING_COLORS = {
    "A": "rgb(239,68,68)",
    "B": "rgb(249,115,22)",
    "C": "rgb(234,179,8)",
    "D": "rgb(156,163,175)",
    "E": "rgb(59,130,246)",
    "F": "rgb(99,102,241)",
}


def _polar(cx: float, cy: float, radius: float, deg: float):
    """Point at compass bearing ``deg`` on an SVG canvas (y down)."""
    rad = math.radians(deg)
    return cx + radius * math.sin(rad), cy - radius * math.cos(rad)


def _ticks(cx: float, cy: float, r: float) -> str:
    parts = []
    for i in range(16):
        deg = i * 22.5
        major = i % 4 == 0
        x1, y1 = _polar(cx, cy, r - (10 if major else 5), deg)
        x2, y2 = _polar(cx, cy, r, deg)
        parts.append(
            f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            f'stroke="{"#ffffff" if major else "rgba(255,255,255,0.35)"}" '
            f'stroke-width="{2 if major else 1}"/>'
        )
    for label, deg in (("N", 0), ("E", 90), ("S", 180), ("W", 270)):
        lx, ly = _polar(cx, cy, r - 20, deg)
        parts.append(
            f'<text x="{lx:.1f}" y="{ly:.1f}" text-anchor="middle" dominant-baseline="central" '
            f'fill="#ffffff" font-size="12" font-weight="bold" font-family="sans-serif">{label}</text>'
        )
    return "".join(parts)


def _needle(cx: float, cy: float, r: float, toward_deg: float) -> str:
    tip_x, tip_y = _polar(cx, cy, r - 30, toward_deg)
    tail_x, tail_y = _polar(cx, cy, 12, toward_deg + 180.0)
    base_x, base_y = _polar(tip_x, tip_y, 16, toward_deg + 180.0)
    w1x, w1y = _polar(base_x, base_y, 10, toward_deg + 90.0)
    w2x, w2y = _polar(base_x, base_y, 10, toward_deg - 90.0)
    return (
        f'<line x1="{tail_x:.1f}" y1="{tail_y:.1f}" x2="{tip_x:.1f}" y2="{tip_y:.1f}" '
        f'stroke="deepskyblue" stroke-width="3" stroke-linecap="round"/>'
        f'<polygon points="{tip_x:.1f},{tip_y:.1f} {w1x:.1f},{w1y:.1f} {w2x:.1f},{w2y:.1f}" '
        f'fill="deepskyblue"/>'
    )


def compass_html(
    wind_direction_deg: float,
    wind_speed: float,
    stability_class: Optional[str] = None,
    size: int = 180,
) -> str:
    """
    Return an HTML string containing an SVG wind compass.

    The needle points where the wind blows TOWARD (meteorological direction
    + 180), i.e. the way an odour plume travels.  The outer ring is coloured
    by stability class and the caption gives the dispersion outlook.

    Args:
        wind_direction_deg: Meteorological wind direction (degrees, where wind comes FROM).
        wind_speed: Wind speed in m/s.
        stability_class: Pasquill-Gifford class; unknown values show as D.
        size: Pixel width of the compass.

    Returns:
        HTML string with embedded SVG.
    """
    cx = cy = size / 2
    r = size / 2 - 12
    sc = resolve_stability_class(stability_class)
    ring = STABILITY_RING_COLORS[sc]
    toward_deg = (wind_direction_deg + 180.0) % 360.0

    readout = (
        f'<circle cx="{cx}" cy="{cy}" r="18" fill="#1a1a2e" stroke="deepskyblue" stroke-width="1.5"/>'
        f'<text x="{cx}" y="{cy - 3}" text-anchor="middle" dominant-baseline="central" '
        f'fill="deepskyblue" font-size="11" font-weight="bold" font-family="sans-serif">'
        f'{wind_speed:.1f}</text>'
        f'<text x="{cx}" y="{cy + 10}" text-anchor="middle" dominant-baseline="central" '
        f'fill="rgba(255,255,255,0.6)" font-size="8" font-family="sans-serif">m/s</text>'
    )
    caption = (
        f'<text x="{cx}" y="{size + 14}" text-anchor="middle" '
        f'fill="rgba(255,255,255,0.6)" font-size="10" font-family="sans-serif">'
        f'From {wind_direction_text(wind_direction_deg)} ({wind_direction_deg:.0f}°) | Class {sc}</text>'
        f'<text x="{cx}" y="{size + 28}" text-anchor="middle" '
        f'fill="{ring}" font-size="10" font-family="sans-serif">{dispersion_outlook(sc)}</text>'
    )

    svg = (
        f'<svg width="{size}" height="{size + 34}" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="{size}" height="{size + 34}" rx="8" fill="#0e1117"/>'
        f'<circle cx="{cx}" cy="{cy}" r="{r:.1f}" fill="none" stroke="{ring}" stroke-width="2.5"/>'
        f'{_ticks(cx, cy, r)}'
        f'{_needle(cx, cy, r, toward_deg)}'
        f'{readout}'
        f'{caption}'
        f'</svg>'
    )
    return f'<div style="display:flex;justify-content:center;">{svg}</div>'
