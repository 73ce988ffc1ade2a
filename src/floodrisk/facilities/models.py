"""Shelter/facility data models."""

from __future__ import annotations

import math

from pydantic import BaseModel

from floodrisk.core.types import LonLat
from floodrisk.geo.distance import km_to_miles
from floodrisk.geo.models import Feature, MultiPoint, Point


class FacilityRecord(BaseModel):
    """A facility with a display name and one representative coordinate."""

    model_config = {"frozen": True}

    name: str
    location: LonLat
    feature: Feature

    @classmethod
    def from_feature(
        cls,
        feature: Feature,
        name_attribute: str = "Name",
        default_name: str = "Shelter",
    ) -> FacilityRecord | None:
        """Build a record, or ``None`` when the feature has no usable point."""
        geometry = feature.geometry
        if isinstance(geometry, Point):
            location = geometry.coordinates
        elif isinstance(geometry, MultiPoint) and geometry.coordinates:
            location = geometry.coordinates[0]
        else:
            return None
        if not (math.isfinite(location[0]) and math.isfinite(location[1])):
            return None

        raw_name = feature.get(name_attribute)
        name = raw_name.strip() if isinstance(raw_name, str) and raw_name.strip() else default_name
        return cls(name=name, location=location, feature=feature)


class FacilityLayer(BaseModel):
    """Snapshot of every usable facility, in stored order."""

    model_config = {"frozen": True}

    facilities: tuple[FacilityRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.facilities)


class FacilityMatch(BaseModel):
    model_config = {"frozen": True}

    facility: FacilityRecord
    distance_km: float

    @property
    def distance_miles(self) -> float:
        return km_to_miles(self.distance_km)
