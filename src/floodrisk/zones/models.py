"""Flood zone layer models."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from floodrisk.core.types import ZONE_PRIORITY, ZoneId
from floodrisk.geo.models import Feature

# Sentinels used by the FEMA flood hazard layers.
BFE_UNAVAILABLE_AT = -9000.0
DEPTH_UNAVAILABLE = -9999.0


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class ElevationInfo(BaseModel):
    """Base flood elevation and flood depth of a zone feature, in feet.

    ``None`` means the layer marks the value unavailable; it is never 0.
    """

    model_config = {"frozen": True}

    base_flood_elevation: float | None = None
    depth: float | None = None

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> ElevationInfo:
        bfe = _as_number(properties.get("STATIC_BFE"))
        if bfe is not None and bfe <= BFE_UNAVAILABLE_AT:
            bfe = None
        depth = _as_number(properties.get("DEPTH"))
        if depth == DEPTH_UNAVAILABLE:
            depth = None
        return cls(base_flood_elevation=bfe, depth=depth)


class ZoneLayer(BaseModel):
    """All features of one flood zone designation, in stored order."""

    model_config = {"frozen": True}

    zone_id: ZoneId
    features: tuple[Feature, ...] = ()

    @property
    def priority(self) -> int:
        """0 is the most severe zone."""
        return ZONE_PRIORITY.index(self.zone_id)

    @classmethod
    def empty(cls, zone_id: ZoneId) -> ZoneLayer:
        return cls(zone_id=zone_id)

    def __len__(self) -> int:
        return len(self.features)


class ZoneMatch(BaseModel):
    """The zone feature a point fell in."""

    model_config = {"frozen": True}

    zone_id: ZoneId
    feature: Feature
    elevation: ElevationInfo
