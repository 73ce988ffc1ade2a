"""Bounding boxes, centroids and containment shapes derived once per loaded feature."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator

from floodrisk.core.types import LonLat
from floodrisk.geo.locate import areal_shape
from floodrisk.geo.models import (
    GEOMETRY_TYPES,
    BoundingBox,
    Feature,
    Geometry,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)


def iter_positions(geometry: Geometry) -> Iterator[LonLat]:
    """Yield every position of every part and ring of ``geometry``."""
    if isinstance(geometry, Point):
        yield geometry.coordinates
    elif isinstance(geometry, (MultiPoint, LineString)):
        yield from geometry.coordinates
    elif isinstance(geometry, (MultiLineString, Polygon)):
        for part in geometry.coordinates:
            yield from part
    elif isinstance(geometry, MultiPolygon):
        for polygon in geometry.coordinates:
            for ring in polygon:
                yield from ring


def _finite(position: LonLat) -> bool:
    return math.isfinite(position[0]) and math.isfinite(position[1])


def compute_bounds(geometry: Geometry | None) -> BoundingBox | None:
    """Componentwise min/max over every finite position, or ``None``."""
    if not isinstance(geometry, GEOMETRY_TYPES):
        return None

    min_lon = min_lat = math.inf
    max_lon = max_lat = -math.inf
    for lon, lat in iter_positions(geometry):
        if not (math.isfinite(lon) and math.isfinite(lat)):
            continue
        min_lon = min(min_lon, lon)
        max_lon = max(max_lon, lon)
        min_lat = min(min_lat, lat)
        max_lat = max(max_lat, lat)

    if not math.isfinite(min_lon):
        return None
    return BoundingBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)


def _mean(positions: Iterable[LonLat]) -> LonLat | None:
    lon_sum = lat_sum = 0.0
    count = 0
    for position in positions:
        if not _finite(position):
            continue
        lon_sum += position[0]
        lat_sum += position[1]
        count += 1
    if count == 0:
        return None
    return (lon_sum / count, lat_sum / count)


def compute_centroid(geometry: Geometry | None) -> LonLat | None:
    """Vertex-average centroid.

    Not area weighted: good enough for proximity search and label placement.
    Polygons use their outer ring only; a MultiPolygon averages the centroids
    of its members.
    """
    if isinstance(geometry, Point):
        return geometry.coordinates if _finite(geometry.coordinates) else None
    if isinstance(geometry, (MultiPoint, LineString, MultiLineString)):
        return _mean(iter_positions(geometry))
    if isinstance(geometry, Polygon):
        return _mean(geometry.coordinates[0])
    if isinstance(geometry, MultiPolygon):
        parts = (_mean(polygon[0]) for polygon in geometry.coordinates)
        return _mean(part for part in parts if part is not None)
    return None


def index_feature(feature: Feature) -> Feature:
    """Return a copy of ``feature`` carrying its bounds, centroid and polygon shape."""
    return feature.model_copy(
        update={
            "bounds": compute_bounds(feature.geometry),
            "centroid": compute_centroid(feature.geometry),
            "shape": areal_shape(feature.geometry),
        }
    )


def index_features(features: Iterable[Feature]) -> tuple[Feature, ...]:
    return tuple(index_feature(feature) for feature in features)
