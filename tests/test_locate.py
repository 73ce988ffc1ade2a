"""Tests for point-in-polygon containment."""

from __future__ import annotations

import math

from floodrisk.geo.indexing import index_feature
from floodrisk.geo.locate import areal_shape, contains
from floodrisk.geo.models import Feature, LineString, MultiPolygon, Point, Polygon

SQUARE = ((0, 0), (4, 0), (4, 4), (0, 4), (0, 0))
HOLE = ((1, 1), (3, 1), (3, 3), (1, 3), (1, 1))
# Concave "L" shape: the notch at (3, 3) is outside.
ELL = ((0, 0), (4, 0), (4, 2), (2, 2), (2, 4), (0, 4), (0, 0))


def _indexed(geometry) -> Feature:
    return index_feature(Feature(geometry=geometry))


class TestArealShape:
    def test_polygon_with_hole(self):
        area = areal_shape(Polygon(coordinates=(SQUARE, HOLE)))
        assert area.geom_type == "Polygon"
        assert len(area.interiors) == 1

    def test_multipolygon(self):
        area = areal_shape(MultiPolygon(coordinates=((SQUARE,), (HOLE,))))
        assert area.geom_type == "MultiPolygon"

    def test_points_and_lines_have_no_shape(self):
        assert areal_shape(Point(coordinates=(1.0, 1.0))) is None
        assert areal_shape(LineString(coordinates=((0, 0), (2, 2)))) is None
        assert areal_shape(None) is None

    def test_degenerate_ring(self):
        assert areal_shape(Polygon(coordinates=(((0, 0), (1, 1)),))) is None

    def test_shape_attached_at_index_time(self, square_feature):
        feature = square_feature(0, 0, 4, 4)
        assert feature.shape is not None
        assert "shape" not in feature.model_dump()


class TestContains:
    def test_convex_polygon(self, square_feature):
        feature = square_feature(0, 0, 4, 4)
        assert contains((2.0, 2.0), feature)
        assert contains((0.1, 3.9), feature)
        assert not contains((6.0, 2.0), feature)

    def test_concave_notch(self):
        feature = _indexed(Polygon(coordinates=(ELL,)))
        assert contains((1.0, 3.0), feature)
        assert not contains((3.0, 3.0), feature)

    def test_polygon_with_hole(self, square_feature):
        feature = square_feature(0, 0, 4, 4, holes=[(1, 1, 3, 3)])
        assert not contains((2.0, 2.0), feature)
        assert contains((3.5, 3.5), feature)
        assert contains((0.5, 0.5), feature)

    def test_multipolygon_any_member(self):
        feature = _indexed(
            MultiPolygon(
                coordinates=(
                    (SQUARE, HOLE),
                    (((10, 10), (12, 10), (12, 12), (10, 12), (10, 10)),),
                )
            )
        )
        assert contains((11.0, 11.0), feature)
        assert contains((0.5, 0.5), feature)
        assert not contains((2.0, 2.0), feature)
        assert not contains((7.0, 7.0), feature)

    def test_points_and_lines_never_contain(self):
        assert not contains((1.0, 1.0), _indexed(Point(coordinates=(1.0, 1.0))))
        assert not contains((1.0, 1.0), _indexed(LineString(coordinates=((0, 0), (2, 2)))))

    def test_unindexed_feature(self):
        feature = Feature(geometry=Polygon(coordinates=(SQUARE,)))
        assert feature.shape is None
        assert contains((2.0, 2.0), feature)

    def test_non_finite_point(self, square_feature):
        assert not contains((math.nan, 2.0), square_feature(0, 0, 4, 4))

    def test_missing_geometry(self):
        assert not contains((1.0, 1.0), Feature())
