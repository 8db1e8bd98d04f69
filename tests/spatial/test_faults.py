"""Tests for nearest fault distance."""

import pytest

from quakerisk.features import Feature, FeatureCollection, GeographicPoint
from quakerisk.geo_utils import great_circle_km
from quakerisk.spatial import faults as fault_module
from quakerisk.spatial.faults import nearest_fault_distance_km


def _faults(*features) -> FeatureCollection:
    return FeatureCollection(name="faults", features=tuple(features))


class TestNearestFaultDistance:

    def test_empty_collection_returns_none(self):
        assert nearest_fault_distance_km(GeographicPoint(lat=0, lon=0), _faults()) is None

    def test_point_on_vertex_is_zero(self, make_line):
        faults = _faults(make_line([[-116.6, 31.0], [-116.0, 31.5]]))
        assert nearest_fault_distance_km(GeographicPoint(lat=31.0, lon=-116.6), faults) == 0.0

    def test_point_on_meridian_segment_is_zero(self, make_line):
        faults = _faults(make_line([[-116.6, 31.0], [-116.6, 32.5]]))
        assert nearest_fault_distance_km(GeographicPoint(lat=31.86, lon=-116.6), faults) == 0.0

    def test_perpendicular_distance_to_meridian(self, make_line):
        """Distance east of a meridian segment equals the along-parallel arc at the equator."""
        faults = _faults(make_line([[0.0, -1.0], [0.0, 1.0]]))
        d = nearest_fault_distance_km(GeographicPoint(lat=0.0, lon=0.5), faults)
        assert d == pytest.approx(great_circle_km(0.0, 0.0, 0.5, 0.0), rel=1e-9)

    def test_beyond_endpoint_uses_endpoint_distance(self, make_line):
        faults = _faults(make_line([[0.0, 0.0], [0.0, 1.0]]))
        d = nearest_fault_distance_km(GeographicPoint(lat=2.0, lon=0.0), faults)
        assert d == pytest.approx(great_circle_km(0.0, 2.0, 0.0, 1.0), rel=1e-9)

    def test_geodesic_not_planar(self, make_line):
        """One degree of longitude at 60N is about half a degree at the equator."""
        faults = _faults(make_line([[0.0, 59.0], [0.0, 61.0]]))
        d = nearest_fault_distance_km(GeographicPoint(lat=60.0, lon=1.0), faults)
        assert 55.0 < d < 56.0

    def test_minimum_across_features(self, make_line):
        faults = _faults(
            make_line([[10.0, 0.0], [10.0, 1.0]], name="far"),
            make_line([[1.0, 0.0], [1.0, 1.0]], name="near"),
        )
        d = nearest_fault_distance_km(GeographicPoint(lat=0.5, lon=0.0), faults)
        assert d == pytest.approx(111.19, abs=0.1)

    def test_multilinestring(self):
        feature = Feature.from_geojson({
            "type": "Feature",
            "geometry": {
                "type": "MultiLineString",
                "coordinates": [[[5.0, 0.0], [5.0, 1.0]], [[2.0, 0.0], [2.0, 1.0]]],
            },
            "properties": {},
        })
        d = nearest_fault_distance_km(GeographicPoint(lat=0.5, lon=0.0), _faults(feature))
        assert d == pytest.approx(2 * 111.19, abs=0.2)

    def test_distance_is_non_negative(self, make_line):
        faults = _faults(make_line([[-1.0, -1.0], [1.0, 1.0]]))
        for lat, lon in [(0.3, -0.2), (-0.3, 0.2), (45.0, 45.0), (-80.0, 170.0)]:
            assert nearest_fault_distance_km(GeographicPoint(lat=lat, lon=lon), faults) >= 0.0


class TestMalformedFaultGeometry:

    def test_all_malformed_returns_none(self, make_line):
        single_vertex = make_line([[0.0, 0.0]])
        wrong_kind = Feature.from_geojson({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [0.0, 0.0]},
            "properties": {},
        })
        missing = Feature.from_geojson({"type": "Feature", "geometry": None, "properties": {}})

        d = nearest_fault_distance_km(
            GeographicPoint(lat=0.0, lon=0.0),
            _faults(single_vertex, wrong_kind, missing),
        )
        assert d is None

    def test_malformed_skipped_valid_used(self, make_line):
        faults = _faults(
            make_line([["a", "b"], ["c", "d"]]),
            make_line([[0.0, 0.0], [0.0, 1.0]]),
        )
        assert nearest_fault_distance_km(GeographicPoint(lat=0.5, lon=0.0), faults) == 0.0

    def test_out_of_range_line_skipped(self, make_line):
        faults = _faults(
            make_line([[0.0, 95.0], [1.0, 96.0]], name="polar"),
            make_line([[0.0, 0.0], [0.0, 1.0]], name="real"),
        )
        assert nearest_fault_distance_km(GeographicPoint(lat=0.5, lon=0.0), faults) == 0.0

    def test_non_finite_distance_ignored(self, make_line, monkeypatch):
        real = fault_module.distance_to_line_km
        calls = iter([float("nan"), None])

        def distance(point, line):
            value = next(calls)
            return real(point, line) if value is None else value

        monkeypatch.setattr(fault_module, "distance_to_line_km", distance)
        faults = _faults(make_line([[5.0, 0.0], [5.0, 1.0]]), make_line([[0.0, 0.0], [0.0, 1.0]]))

        assert nearest_fault_distance_km(GeographicPoint(lat=0.5, lon=0.0), faults) == 0.0


class TestGreatCircleSegments:
    """Segments follow the great-circle arc, not the straight lon/lat chord."""

    def test_point_on_planar_chord_is_not_on_fault(self, make_line):
        # The arc from (0, 60) to (60, 60) bulges north to about 63.4N at lon 30
        faults = _faults(make_line([[0.0, 60.0], [60.0, 60.0]]))
        d = nearest_fault_distance_km(GeographicPoint(lat=60.0, lon=30.0), faults)
        assert d == pytest.approx(381.9, abs=1.0)

    def test_distance_continuous_near_chord(self, make_line):
        faults = _faults(make_line([[0.0, 60.0], [60.0, 60.0]]))
        on_chord = nearest_fault_distance_km(GeographicPoint(lat=60.0, lon=30.0), faults)
        beside_chord = nearest_fault_distance_km(GeographicPoint(lat=60.0, lon=30.000001), faults)
        assert on_chord == pytest.approx(beside_chord, abs=1e-3)
