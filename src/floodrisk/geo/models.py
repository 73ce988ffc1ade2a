"""GeoJSON geometry and feature models.

Geometry is a tagged union on the GeoJSON ``type`` member. Every consumer
dispatches on the concrete class and treats anything else as unsupported.
"""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from shapely.geometry.base import BaseGeometry

from floodrisk.core.types import LonLat

logger = logging.getLogger(__name__)


def _trim_position(value: Any) -> Any:
    # Positions may carry an elevation ordinate; only lon/lat are kept.
    if isinstance(value, (list, tuple)) and len(value) > 2:
        return tuple(value[:2])
    return value


Position = Annotated[tuple[float, float], BeforeValidator(_trim_position)]
Positions = tuple[Position, ...]


class _Geometry(BaseModel):
    model_config = {"frozen": True}


class Point(_Geometry):
    type: Literal["Point"] = "Point"
    coordinates: Position


class MultiPoint(_Geometry):
    type: Literal["MultiPoint"] = "MultiPoint"
    coordinates: Positions


class LineString(_Geometry):
    type: Literal["LineString"] = "LineString"
    coordinates: Positions


class MultiLineString(_Geometry):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: tuple[Positions, ...]


class Polygon(_Geometry):
    """Ring 0 is the outer boundary, later rings are holes."""

    type: Literal["Polygon"] = "Polygon"
    coordinates: tuple[Positions, ...] = Field(min_length=1)


class MultiPolygon(_Geometry):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: tuple[tuple[Positions, ...], ...]

    @field_validator("coordinates")
    @classmethod
    def _each_polygon_has_outer_ring(
        cls, value: tuple[tuple[Positions, ...], ...]
    ) -> tuple[tuple[Positions, ...], ...]:
        for polygon in value:
            if not polygon:
                raise ValueError("MultiPolygon member without an outer ring")
        return value


Geometry = Annotated[
    Union[Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon],
    Field(discriminator="type"),
]

GEOMETRY_TYPES = (Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon)

_GEOMETRY_ADAPTER: TypeAdapter[Geometry] = TypeAdapter(Geometry)


def parse_geometry(raw: Any) -> Geometry | None:
    """Validate a raw GeoJSON geometry mapping.

    Returns ``None`` for a missing, unsupported or malformed geometry so the
    owning feature can still be used for its attributes.
    """
    if raw is None:
        return None
    if isinstance(raw, GEOMETRY_TYPES):
        return raw
    try:
        return _GEOMETRY_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        kind = raw.get("type") if isinstance(raw, dict) else type(raw).__name__
        logger.debug("Skipping malformed %s geometry: %s", kind, exc.errors()[0]["msg"])
        return None


class BoundingBox(BaseModel):
    """Axis-aligned lon/lat extent. Only ever used to reject candidates."""

    model_config = {"frozen": True}

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def contains(self, point: LonLat) -> bool:
        lon, lat = point
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return False
        return self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)


class Feature(BaseModel):
    """A geometry, its attribute map, and the fields derived at load time.

    ``shape`` is the prepared shapely polygon used for containment tests; it
    is never serialized.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    geometry: Geometry | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    bounds: BoundingBox | None = None
    centroid: LonLat | None = None
    shape: BaseGeometry | None = Field(default=None, exclude=True, repr=False)

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": self.geometry.model_dump() if self.geometry is not None else None,
            "properties": dict(self.properties),
        }
