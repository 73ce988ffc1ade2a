"""Exact point-in-polygon tests, gated by the bounding-box pre-filter."""

from __future__ import annotations

import logging

import shapely
from shapely.errors import GEOSException
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from floodrisk.core.types import LonLat
from floodrisk.geo.models import Feature, Geometry, MultiPolygon, Polygon

logger = logging.getLogger(__name__)


def areal_shape(geometry: Geometry | None) -> BaseGeometry | None:
    """Prepared shapely polygon for a Polygon or MultiPolygon, else ``None``.

    Rings after the first of each polygon are holes. Points and lines enclose
    no area and never get a shape.
    """
    if not isinstance(geometry, (Polygon, MultiPolygon)):
        return None
    try:
        built = shape(geometry.model_dump())
    except (ValueError, GEOSException) as exc:
        logger.debug("Skipping degenerate %s: %s", geometry.type, exc)
        return None
    shapely.prepare(built)
    return built


def contains(point: LonLat, feature: Feature) -> bool:
    """Whether ``feature``'s areal geometry contains ``point``.

    Uses the shape built at index time; features that were never indexed
    get one built on the fly. Behaviour exactly on an edge is
    unspecified.
    """
    if feature.bounds is not None and not feature.bounds.contains(point):
        return False

    area = feature.shape
    if area is None and feature.bounds is None:
        area = areal_shape(feature.geometry)
    if area is None:
        return False
    lon, lat = point
    return bool(shapely.contains_xy(area, lon, lat))
