"""Geometry models, reprojection, indexing and point location."""

from floodrisk.geo.crs import CoordinateNormalizer, parse_crs
from floodrisk.geo.distance import haversine_km
from floodrisk.geo.indexing import compute_bounds, compute_centroid, index_features
from floodrisk.geo.locate import contains
from floodrisk.geo.models import BoundingBox, Feature, Geometry, parse_geometry

__all__ = [
    "BoundingBox",
    "CoordinateNormalizer",
    "Feature",
    "Geometry",
    "compute_bounds",
    "compute_centroid",
    "contains",
    "haversine_km",
    "index_features",
    "parse_crs",
    "parse_geometry",
]
