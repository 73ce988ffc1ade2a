"""Tests for geometry parsing, bounds and centroids."""

from __future__ import annotations

import math

import pytest

from floodrisk.geo.indexing import compute_bounds, compute_centroid, index_feature
from floodrisk.geo.models import (
    BoundingBox,
    Feature,
    LineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    parse_geometry,
)


class TestParseGeometry:
    def test_polygon(self):
        geom = parse_geometry(
            {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}
        )
        assert isinstance(geom, Polygon)
        assert geom.coordinates[0][1] == (1.0, 0.0)

    def test_elevation_ordinate_dropped(self):
        geom = parse_geometry({"type": "Point", "coordinates": [-64.9, 18.3, 12.5]})
        assert isinstance(geom, Point)
        assert geom.coordinates == (-64.9, 18.3)

    def test_missing_geometry(self):
        assert parse_geometry(None) is None

    def test_unsupported_type(self):
        assert parse_geometry({"type": "GeometryCollection", "geometries": []}) is None

    def test_polygon_without_rings(self):
        assert parse_geometry({"type": "Polygon", "coordinates": []}) is None

    def test_multipolygon_member_without_ring(self):
        raw = {"type": "MultiPolygon", "coordinates": [[[[0, 0], [1, 0], [1, 1], [0, 0]]], []]}
        assert parse_geometry(raw) is None

    def test_short_position(self):
        assert parse_geometry({"type": "Point", "coordinates": [1.0]}) is None

    def test_already_parsed_passthrough(self):
        point = Point(coordinates=(1.0, 2.0))
        assert parse_geometry(point) is point


class TestBoundingBox:
    def test_contains_inclusive(self):
        box = BoundingBox(min_lon=0, min_lat=0, max_lon=2, max_lat=2)
        assert box.contains((0.0, 2.0))
        assert box.contains((1.0, 1.0))
        assert not box.contains((2.5, 1.0))

    def test_non_finite_point_never_contained(self):
        box = BoundingBox(min_lon=0, min_lat=0, max_lon=2, max_lat=2)
        assert not box.contains((math.nan, 1.0))


class TestBounds:
    def test_polygon_bounds(self):
        geom = Polygon(coordinates=(((0, 0), (3, 0), (3, 2), (0, 2), (0, 0)),))
        assert compute_bounds(geom).as_tuple() == (0.0, 0.0, 3.0, 2.0)

    def test_non_finite_positions_skipped(self):
        geom = LineString(coordinates=((0, 0), (math.nan, 5), (2, 3)))
        assert compute_bounds(geom).as_tuple() == (0.0, 0.0, 2.0, 3.0)

    def test_no_finite_positions(self):
        geom = MultiPoint(coordinates=((math.nan, math.nan),))
        assert compute_bounds(geom) is None

    def test_missing_geometry(self):
        assert compute_bounds(None) is None


class TestCentroid:
    def test_point(self):
        assert compute_centroid(Point(coordinates=(3.0, 4.0))) == (3.0, 4.0)

    def test_polygon_vertex_average_of_outer_ring(self):
        geom = Polygon(
            coordinates=(
                ((0, 0), (2, 0), (2, 2), (0, 2), (0, 0)),
                ((0.5, 0.5), (0.6, 0.5), (0.6, 0.6), (0.5, 0.5)),
            )
        )
        lon, lat = compute_centroid(geom)
        assert lon == pytest.approx(0.8)
        assert lat == pytest.approx(0.8)

    def test_multipolygon_averages_members(self):
        geom = MultiPolygon(
            coordinates=(
                (((0, 0), (0, 0), (0, 0), (0, 0)),),
                (((4, 2), (4, 2), (4, 2), (4, 2)),),
            )
        )
        assert compute_centroid(geom) == pytest.approx((2.0, 1.0))

    def test_line_skips_non_finite(self):
        geom = LineString(coordinates=((0, 0), (math.nan, 5), (2, 3)))
        assert compute_centroid(geom) == pytest.approx((1.0, 1.5))

    def test_missing_geometry(self):
        assert compute_centroid(None) is None


class TestIndexFeature:
    def test_derived_fields_attached(self, square_feature):
        feature = square_feature(0, 0, 2, 2, Name="Lot")
        assert feature.bounds.as_tuple() == (0.0, 0.0, 2.0, 2.0)
        assert feature.centroid == pytest.approx((0.8, 0.8))
        assert feature.get("Name") == "Lot"

    def test_original_untouched(self):
        raw = Feature(geometry=Point(coordinates=(1.0, 1.0)))
        indexed = index_feature(raw)
        assert raw.centroid is None
        assert indexed.centroid == (1.0, 1.0)

    def test_to_geojson(self, point_feature):
        data = point_feature(1.0, 2.0, Name="Shelter A").to_geojson()
        assert data["type"] == "Feature"
        assert data["geometry"]["type"] == "Point"
        assert data["properties"] == {"Name": "Shelter A"}
