"""Smoke tests for visualization functions.

Each test verifies that the function returns a valid Plotly Figure (or
HTML string) without raising exceptions.  These are not pixel-perfect
tests; they confirm the functions work end-to-end with representative
inputs.
"""

import sys
import os

import plotly.graph_objects as go
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from data.weather import WeatherObservation
from predictions.lifecycle import build_predictions
from visualization.compass_widget import compass_html
from visualization.plots import (
    create_footprint_comparison_figure,
    create_intensity_profile_figure,
    create_prediction_map_figure,
)


@pytest.fixture
def v2_batch(site_sources, west_wind, now):
    return build_predictions("site-1", site_sources, west_wind, now, model_version="plume-v2")


class TestPredictionMap:
    def test_returns_figure(self, v2_batch, site_sources, west_wind):
        fig = create_prediction_map_figure(v2_batch.predictions, site_sources, weather=west_wind, title="t")
        assert isinstance(fig, go.Figure)
        # 2 footprints + 3 contours each + source markers
        assert len(fig.data) == 2 + 6 + 1

    def test_y_axis_reversed(self, v2_batch, site_sources):
        fig = create_prediction_map_figure(v2_batch.predictions, site_sources)
        assert tuple(fig.layout.yaxis.range) == (100.0, 0.0)

    def test_footprint_rings_are_closed(self, v2_batch, site_sources):
        fig = create_prediction_map_figure(v2_batch.predictions, site_sources)
        ring = fig.data[0]
        assert ring.x[0] == ring.x[-1]
        assert ring.y[0] == ring.y[-1]

    def test_wind_annotation_only_with_weather(self, v2_batch, site_sources, west_wind):
        without = create_prediction_map_figure(v2_batch.predictions, site_sources)
        with_wind = create_prediction_map_figure(v2_batch.predictions, site_sources, weather=west_wind)
        assert len(without.layout.annotations) == 0
        assert len(with_wind.layout.annotations) == 2

    def test_incomplete_weather_has_no_arrow(self, site_sources, now):
        weather = WeatherObservation("site-1", now, wind_speed_mps=None)
        fig = create_prediction_map_figure([], site_sources, weather=weather)
        assert len(fig.layout.annotations) == 0

    def test_empty(self):
        fig = create_prediction_map_figure([], [])
        assert isinstance(fig, go.Figure)

    def test_background_image(self, site_sources):
        fig = create_prediction_map_figure([], site_sources, background_image="data:image/png;base64,AAAA")
        assert len(fig.layout.images) == 1

    def test_gaussian_v1_has_no_contours(self, site_sources, west_wind, now):
        batch = build_predictions("site-1", site_sources, west_wind, now, model_version="gaussian-v1")
        fig = create_prediction_map_figure(batch.predictions, site_sources)
        assert len(fig.data) == 2 + 1


class TestIntensityProfile:
    def test_returns_figure(self, v2_batch):
        profiles = {p.source_id: p.geometry.intensity_profile for p in v2_batch.predictions}
        fig = create_intensity_profile_figure(profiles)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 2

    def test_empty_profiles(self):
        fig = create_intensity_profile_figure({"a": []})
        assert len(fig.data) == 0
        assert len(fig.layout.annotations) == 1


class TestFootprintComparison:
    def test_grouped_bars(self):
        rows = [
            {"stability_class": sc, "model_version": mv, "area": 10.0 * i}
            for i, sc in enumerate("ABC")
            for mv in ("gaussian-v1", "plume-v2")
        ]
        fig = create_footprint_comparison_figure(rows)
        assert len(fig.data) == 2
        assert fig.layout.barmode == "group"


class TestCompassWidget:
    def test_returns_svg(self):
        html = compass_html(270.0, 5.0, "D")
        assert "<svg" in html
        assert "From W (270°)" in html
        assert "Moderate dispersion" in html

    def test_unknown_stability_shows_neutral(self):
        html = compass_html(90.0, 1.0, None)
        assert "Class D" in html

    def test_sixteen_ticks(self):
        html = compass_html(0.0, 2.0, "A")
        assert html.count("<line") == 16 + 1
