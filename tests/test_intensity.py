"""Tests for the versioned plume extent and intensity formulas."""

import math

import numpy as np
import pytest

from config import MAX_PLUME_DISTANCE
from models.intensity import (
    gaussian_extent,
    gaussian_peak_intensity,
    intensity_at_distance,
    intensity_profile,
    plume_extent,
    plume_peak_intensity,
    round_intensity,
    travel_distance,
)


class TestGaussianV1:
    """Scheme A extent and peak intensity."""

    def test_reference_extent(self):
        """base 3, 5 m/s, class D -> length 35, width 5.6."""
        extent = gaussian_extent(3, 5.0, "D")
        assert extent.length == pytest.approx(35.0)
        assert extent.max_width == pytest.approx(5.6)

    def test_length_scales_with_base_intensity(self):
        weak = gaussian_extent(1.5, 5.0, "D")
        strong = gaussian_extent(3.0, 5.0, "D")
        assert strong.length == pytest.approx(2.0 * weak.length)

    def test_unstable_is_longer_and_wider(self):
        a = gaussian_extent(3, 4.0, "A")
        f = gaussian_extent(3, 4.0, "F")
        assert a.length > f.length
        assert a.max_width > f.max_width

    def test_calm_wind_still_has_base_length(self):
        extent = gaussian_extent(3, 0.0, "D")
        assert extent.length == pytest.approx(15.0)

    def test_peak_intensity(self):
        assert gaussian_peak_intensity(3, 5.0) == pytest.approx(4.5)
        assert gaussian_peak_intensity(4, 0.0) == pytest.approx(4.0)


class TestPlumeV2:
    """Scheme B travel distance, extent and peak intensity."""

    def test_travel_distance(self):
        # 0.5 m/s * 3600 s = 1800 m -> 36 % of the map
        assert travel_distance(0.5) == pytest.approx(36.0)

    def test_travel_distance_is_capped(self):
        assert travel_distance(5.0) == pytest.approx(MAX_PLUME_DISTANCE)
        assert travel_distance(50.0) == pytest.approx(MAX_PLUME_DISTANCE)

    def test_travel_distance_duration(self):
        assert travel_distance(1.0, duration_minutes=15.0) == pytest.approx(18.0)

    def test_calm_wind_has_zero_distance(self):
        assert travel_distance(0.0) == 0.0

    def test_extent_width(self):
        extent = plume_extent(0.5, "D")
        assert extent.length == pytest.approx(36.0)
        assert extent.max_width == pytest.approx(9.0)

    def test_extent_unknown_class_is_neutral(self):
        assert plume_extent(0.5, "Q") == plume_extent(0.5, "D")

    def test_peak_intensity(self):
        assert plume_peak_intensity(3, 5.0) == pytest.approx(3.75)


class TestIntensityDecay:
    def test_base_at_source(self):
        assert intensity_at_distance(3.0, 0.0, 40.0) == pytest.approx(3.0)

    def test_one_decay_length(self):
        assert intensity_at_distance(3.0, 24.0, 40.0) == pytest.approx(3.0 / math.e)

    def test_monotonically_decreasing(self):
        d = np.linspace(0.0, 40.0, 20)
        values = intensity_at_distance(3.0, d, 40.0)
        assert isinstance(values, np.ndarray)
        assert np.all(np.diff(values) < 0)

    def test_scalar_in_scalar_out(self):
        value = intensity_at_distance(3.0, 10.0, 40.0)
        assert np.ndim(value) == 0

    def test_zero_distance_plume_is_flat(self):
        assert intensity_at_distance(3.0, 0.0, 0.0) == pytest.approx(3.0)
        values = intensity_at_distance(3.0, np.array([0.0, 1.0]), 0.0)
        np.testing.assert_allclose(values, [3.0, 3.0])


class TestIntensityProfile:
    def test_eleven_samples(self):
        profile = intensity_profile(3.0, 36.0)
        assert len(profile) == 11
        assert profile[0] == {"distance": 0.0, "intensity": 3.0}
        assert profile[-1]["distance"] == pytest.approx(36.0)
        assert profile[-1]["intensity"] == pytest.approx(3.0 * math.exp(-1.0 / 0.6))

    def test_evenly_spaced(self):
        profile = intensity_profile(3.0, 50.0)
        distances = [p["distance"] for p in profile]
        np.testing.assert_allclose(np.diff(distances), 5.0)

    def test_values_are_plain_floats(self):
        for point in intensity_profile(2.0, 10.0):
            assert type(point["distance"]) is float
            assert type(point["intensity"]) is float

    def test_calm_profile(self):
        profile = intensity_profile(4.0, 0.0)
        assert len(profile) == 11
        assert all(p["distance"] == 0.0 for p in profile)
        assert all(p["intensity"] == pytest.approx(4.0) for p in profile)


class TestRoundIntensity:
    """One-decimal rounding with halves going up."""

    @pytest.mark.parametrize(
        "value, expected",
        [(1.25, 1.3), (2.25, 2.3), (3.75, 3.8), (0.05, 0.1), (2.4000000000000004, 2.4), (4.0, 4.0), (1.24, 1.2)],
    )
    def test_values(self, value, expected):
        assert round_intensity(value) == expected
