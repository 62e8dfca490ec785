"""Tests for emission source records and center resolution."""

import pytest

from data.sources import EmissionSource, resolve_source_center, source_from_record


class TestResolveSourceCenter:
    def test_point(self):
        assert resolve_source_center({"type": "point", "x": 12.5, "y": 40.0}) == (12.5, 40.0)

    def test_point_coerces_numbers(self):
        assert resolve_source_center({"type": "point", "x": "10", "y": 20}) == (10.0, 20.0)

    def test_polygon_vertex_mean(self):
        geometry = {
            "type": "polygon",
            "coordinates": [{"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 10, "y": 20}],
        }
        cx, cy = resolve_source_center(geometry)
        assert cx == pytest.approx(20.0 / 3.0)
        assert cy == pytest.approx(20.0 / 3.0)

    def test_square_polygon(self):
        geometry = {
            "type": "polygon",
            "coordinates": [{"x": 30, "y": 30}, {"x": 38, "y": 30}, {"x": 38, "y": 38}, {"x": 30, "y": 38}],
        }
        assert resolve_source_center(geometry) == (34.0, 34.0)

    @pytest.mark.parametrize(
        "geometry",
        [
            {"type": "polygon", "coordinates": []},
            {"type": "polygon"},
            {"type": "polygon", "coordinates": [{"x": 1}]},
            {"type": "polygon", "coordinates": [{"x": "a", "y": 2}]},
            {"type": "point", "x": 5.0},
            {"type": "point", "x": None, "y": 3.0},
            {"type": "line", "coordinates": [{"x": 1, "y": 2}]},
            {},
            None,
            "point",
        ],
    )
    def test_unusable_geometry_returns_none(self, geometry):
        assert resolve_source_center(geometry) is None


class TestEmissionSource:
    def test_center_property(self, center_source):
        assert center_source.center == (50.0, 50.0)

    @pytest.mark.parametrize("base", [None, 0])
    def test_missing_intensity_defaults_to_three(self, base):
        src = EmissionSource(id="s", site_id="x", geometry={}, base_intensity=base)
        assert src.effective_intensity == 3

    def test_explicit_intensity(self):
        src = EmissionSource(id="s", site_id="x", base_intensity=5)
        assert src.effective_intensity == 5

    def test_from_record(self):
        src = source_from_record({
            "id": 7,
            "site_id": "plant",
            "name": "Vent",
            "geometry": {"type": "point", "x": 1, "y": 2},
        })
        assert src.id == "7"
        assert src.name == "Vent"
        assert src.base_intensity is None
        assert src.center == (1.0, 2.0)

    def test_from_record_null_geometry(self):
        src = source_from_record({"id": "a", "site_id": "b", "geometry": None})
        assert src.geometry == {}
        assert src.center is None
