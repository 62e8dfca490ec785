"""
Visualization module for the Odour Dispersion Prediction Engine.

Provides Plotly-based interactive plots for the Streamlit interface.  Maps
are drawn in map-percent coordinates with the origin at the top-left, so the
y axis is reversed to match the site-map image.
"""

import numpy as np
import plotly.graph_objects as go
from typing import Dict, List, Optional, Sequence

from config import CONTOUR_COLORS, MAP_MAX, MAP_MIN, PLUME_FILL_COLOR, WIND_ARROW_POSITION
from data.sources import EmissionSource
from data.weather import WeatherObservation, wind_direction_text
from models.plume_geometry import direction_vectors
from models.prediction import OdourPrediction
from models.stability import stability_label


def _closed(points: np.ndarray) -> np.ndarray:
    """Append the first vertex so Plotly draws a closed ring."""
    points = np.asarray(points, dtype=float)
    if len(points) == 0:
        return points
    return np.vstack([points, points[:1]])


def _add_prediction_polygons(
    fig: go.Figure,
    predictions: Sequence[OdourPrediction],
    source_names: Dict[str, str],
) -> None:
    """Outer footprints first, then contours from low to high so the core sits on top."""
    for i, pred in enumerate(predictions):
        name = source_names.get(pred.source_id, pred.source_id)
        ring = _closed(pred.geometry.coordinates)
        fig.add_trace(
            go.Scatter(
                x=ring[:, 0],
                y=ring[:, 1],
                mode="lines",
                fill="toself",
                fillcolor=PLUME_FILL_COLOR,
                line=dict(color="rgba(156,163,175,0.8)", width=1),
                name="Footprint",
                legendgroup="footprint",
                showlegend=i == 0,
                hovertemplate=(
                    f"{name}<br>Peak: {pred.peak_intensity}"
                    f"<br>{pred.model_version}<extra></extra>"
                ),
            )
        )

    shown = set()
    for pred in predictions:
        for contour in reversed(pred.geometry.contours):
            ring = _closed(contour.coordinates)
            color = CONTOUR_COLORS.get(contour.level, PLUME_FILL_COLOR)
            fig.add_trace(
                go.Scatter(
                    x=ring[:, 0],
                    y=ring[:, 1],
                    mode="lines",
                    fill="toself",
                    fillcolor=color,
                    line=dict(color=color, width=1),
                    name=f"{contour.level.title()} ({contour.threshold:.0%} of peak)",
                    legendgroup=contour.level,
                    showlegend=contour.level not in shown,
                    hovertemplate=f"{contour.level}: {contour.intensity}<extra></extra>",
                )
            )
            shown.add(contour.level)


def _add_source_markers(fig: go.Figure, sources: Sequence[EmissionSource]) -> None:
    xs, ys, names = [], [], []
    for src in sources:
        center = src.center
        if center is None:
            continue
        xs.append(center[0])
        ys.append(center[1])
        names.append(src.name or src.id)

    fig.add_trace(
        go.Scatter(
            x=xs,
            y=ys,
            mode="markers+text",
            marker=dict(size=10, color="lime", symbol="diamond", line=dict(width=1, color="black")),
            text=names,
            textposition="top center",
            textfont=dict(size=10, color="white"),
            name="Odour Sources",
            hovertemplate="%{text}<br>(%{x:.1f}, %{y:.1f})<extra></extra>",
        )
    )


def _add_wind_indicator(fig: go.Figure, weather: WeatherObservation) -> None:
    """Arrow pointing where the wind blows TOWARD, with a speed/stability label."""
    cx, cy = WIND_ARROW_POSITION
    along, _ = direction_vectors(weather.wind_direction_deg)
    arrow_len = 6.0
    fig.add_annotation(
        x=cx + along[0] * arrow_len,
        y=cy + along[1] * arrow_len,
        ax=cx - along[0] * arrow_len,
        ay=cy - along[1] * arrow_len,
        xref="x", yref="y", axref="x", ayref="y",
        showarrow=True,
        arrowhead=3,
        arrowsize=1.5,
        arrowwidth=3,
        arrowcolor="deepskyblue",
    )
    fig.add_annotation(
        x=cx,
        y=cy + arrow_len + 4,
        xref="x", yref="y",
        text=(
            f"{weather.wind_speed_mps:.1f} m/s from {wind_direction_text(weather.wind_direction_deg)}"
            f" | {weather.stability_class} ({stability_label(weather.stability_class)})"
        ),
        showarrow=False,
        font=dict(size=10, color="deepskyblue"),
        xanchor="left" if cx < MAP_MAX / 2 else "right",
    )


def create_prediction_map_figure(
    predictions: Sequence[OdourPrediction],
    sources: Sequence[EmissionSource],
    weather: Optional[WeatherObservation] = None,
    title: Optional[str] = None,
    background_image: Optional[str] = None,
) -> go.Figure:
    """
    Draw footprints, contours and sources on the site map.

    Args:
        predictions: Predictions to draw.
        sources: Sources to mark (also used to label footprints).
        weather: Observation behind the predictions; adds a wind arrow.
        title: Optional figure title.
        background_image: Optional site-map image URL/data URI stretched over [0, 100]^2.

    Returns:
        Plotly Figure.
    """
    fig = go.Figure()
    source_names = {s.id: (s.name or s.id) for s in sources}

    if background_image:
        fig.add_layout_image(
            dict(
                source=background_image,
                xref="x", yref="y",
                x=MAP_MIN, y=MAP_MIN,
                sizex=MAP_MAX - MAP_MIN, sizey=MAP_MAX - MAP_MIN,
                xanchor="left", yanchor="top",
                sizing="stretch",
                layer="below",
            )
        )

    _add_prediction_polygons(fig, predictions, source_names)
    _add_source_markers(fig, sources)
    if weather is not None and weather.is_complete:
        _add_wind_indicator(fig, weather)

    fig.update_layout(
        title=title,
        height=650,
        template="plotly_dark",
        legend=dict(
            orientation="h",
            yanchor="bottom",
            y=-0.15,
            xanchor="center",
            x=0.5,
        ),
        margin=dict(l=60, r=60, t=50, b=80),
    )
    fig.update_xaxes(title_text="Map x (%)", range=[MAP_MIN, MAP_MAX], constrain="domain")
    fig.update_yaxes(
        title_text="Map y (%)",
        range=[MAP_MAX, MAP_MIN],
        scaleanchor="x",
        scaleratio=1,
    )
    return fig


def create_intensity_profile_figure(
    profiles: Dict[str, List[Dict[str, float]]],
) -> go.Figure:
    """Line chart of intensity vs. distance, one trace per source."""
    fig = go.Figure()
    if not any(profiles.values()):
        fig.add_annotation(text="No intensity profile available", showarrow=False)
        fig.update_layout(template="plotly_dark", height=300)
        return fig

    for name, profile in profiles.items():
        if not profile:
            continue
        fig.add_trace(
            go.Scatter(
                x=[p["distance"] for p in profile],
                y=[p["intensity"] for p in profile],
                mode="lines+markers",
                name=name,
                hovertemplate="d = %{x:.1f}%<br>I = %{y:.2f}<extra></extra>",
            )
        )

    fig.update_layout(
        title="Intensity Decay Along Plume",
        xaxis_title="Distance downwind (map %)",
        yaxis_title="Intensity",
        template="plotly_dark",
        height=320,
    )
    return fig


def create_footprint_comparison_figure(rows: List[dict]) -> go.Figure:
    """
    Grouped bar chart of footprint area per stability class and model version.

    Args:
        rows: Dicts with keys 'stability_class', 'model_version', 'area'.
    """
    fig = go.Figure()
    versions = sorted({r["model_version"] for r in rows})
    for version in versions:
        subset = [r for r in rows if r["model_version"] == version]
        fig.add_trace(
            go.Bar(
                x=[r["stability_class"] for r in subset],
                y=[r["area"] for r in subset],
                name=version,
                hovertemplate="Class %{x}<br>Area: %{y:.1f} %²<extra></extra>",
            )
        )

    fig.update_layout(
        title="Footprint Area by Stability Class",
        xaxis_title="Stability class",
        yaxis_title="Area (map %²)",
        barmode="group",
        template="plotly_dark",
        height=350,
    )
    return fig
