"""Reprojection of incoming feature collections into lon/lat degrees."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError

from floodrisk.geo.models import (
    Feature,
    Geometry,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Positions,
    parse_geometry,
)

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"
CRS84 = "OGC:CRS84"
CANONICAL_CODES = frozenset({WGS84, CRS84})

# Projection parameters for the systems the source layers are published in.
PROJ_DEFINITIONS: dict[str, str] = {
    "EPSG:32161": (
        "+proj=lcc +lat_0=17.8333333333333 +lon_0=-66.4333333333333 "
        "+lat_1=18.4333333333333 +lat_2=18.0333333333333 +x_0=200000 +y_0=200000 "
        "+ellps=GRS80 +towgs84=0,0,0,0,0,0,0 +units=m +no_defs +type=crs"
    ),
    "EPSG:4269": "+proj=longlat +ellps=GRS80 +towgs84=0,0,0,0,0,0,0 +no_defs +type=crs",
}

_EPSG_PATTERN = re.compile(r"EPSG[:/]*(\d+)", re.IGNORECASE)
_CRS84_PATTERN = re.compile(r"CRS84", re.IGNORECASE)


def parse_crs(collection: Mapping[str, Any]) -> str:
    """Return the reference system a collection declares, as ``AUTH:CODE``.

    Reads the legacy ``crs.properties.name`` member. Anything absent or not
    understood is reported as WGS84.
    """
    crs = collection.get("crs")
    if not isinstance(crs, Mapping):
        return WGS84
    properties = crs.get("properties")
    name = properties.get("name") if isinstance(properties, Mapping) else None
    if not isinstance(name, str) or not name:
        return WGS84
    match = _EPSG_PATTERN.search(name)
    if match:
        return f"EPSG:{match.group(1)}"
    if _CRS84_PATTERN.search(name):
        return CRS84
    return WGS84


class CoordinateNormalizer:
    """Turns raw GeoJSON collections into features in lon/lat degrees.

    Canonical collections pass through untouched. Any other declared system is
    resolved first against the registered proj definitions, then against the
    pyproj database; a system neither knows is treated as canonical.
    """

    def __init__(self, definitions: Mapping[str, str] | None = None) -> None:
        self._definitions = dict(PROJ_DEFINITIONS if definitions is None else definitions)
        self._transformers: dict[str, Transformer | None] = {}

    def transformer_for(self, code: str) -> Transformer | None:
        """Return the transformer for ``code``, or ``None`` for identity."""
        if code in CANONICAL_CODES:
            return None
        if code in self._transformers:
            return self._transformers[code]

        source = self._definitions.get(code, code)
        try:
            transformer = Transformer.from_crs(CRS.from_user_input(source), WGS84, always_xy=True)
        except (CRSError, ProjError) as exc:
            logger.warning(
                "Unrecognized reference system %s, treating coordinates as %s: %s",
                code, WGS84, exc,
            )
            transformer = None
        self._transformers[code] = transformer
        return transformer

    def reproject(self, geometry: Geometry, transformer: Transformer) -> Geometry | None:
        """Transform every position of ``geometry`` with ``transformer``."""

        def path(positions: Positions) -> Positions:
            if not positions:
                return positions
            xs, ys = zip(*positions)
            lons, lats = transformer.transform(xs, ys)
            return tuple((float(lon), float(lat)) for lon, lat in zip(lons, lats))

        if isinstance(geometry, Point):
            lon, lat = transformer.transform(*geometry.coordinates)
            coordinates: Any = (float(lon), float(lat))
        elif isinstance(geometry, (MultiPoint, LineString)):
            coordinates = path(geometry.coordinates)
        elif isinstance(geometry, (MultiLineString, Polygon)):
            coordinates = tuple(path(part) for part in geometry.coordinates)
        elif isinstance(geometry, MultiPolygon):
            coordinates = tuple(
                tuple(path(ring) for ring in polygon) for polygon in geometry.coordinates
            )
        else:
            return None
        return geometry.model_copy(update={"coordinates": coordinates})

    def normalize(self, collection: Mapping[str, Any]) -> list[Feature]:
        """Parse and reproject every feature of a GeoJSON FeatureCollection.

        Features with a missing or malformed geometry are kept with
        ``geometry=None`` so their attributes remain usable.
        """
        code = parse_crs(collection)
        transformer = self.transformer_for(code)

        features: list[Feature] = []
        for raw in collection.get("features") or []:
            if not isinstance(raw, Mapping):
                continue
            geometry = parse_geometry(raw.get("geometry"))
            if geometry is not None and transformer is not None:
                geometry = self.reproject(geometry, transformer)
            properties = raw.get("properties")
            if not isinstance(properties, Mapping):
                properties = {}
            features.append(Feature(geometry=geometry, properties=dict(properties)))
        return features
