"""Parcel value data models."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field

from floodrisk.core.types import LonLat, ParcelMetric
from floodrisk.geo.models import Feature

ACRE_IN_SQ_METERS = 4046.8564224


def number_or_zero(value: Any) -> float:
    """Numeric attribute value, 0 when absent, non-numeric or non-finite."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class PercentileRanks(BaseModel):
    """Where a parcel sits within the layer for each value metric, in [0, 1]."""

    model_config = {"frozen": True}

    total_value: float | None = None
    improvement_value: float | None = None
    value_per_acre: float | None = None

    def get(self, metric: ParcelMetric) -> float | None:
        return getattr(self, metric.value)


class ParcelRecord(BaseModel):
    """A parcel feature with its value metrics computed once at load time."""

    model_config = {"frozen": True}

    feature: Feature
    display_name: str
    land_value: float = 0.0
    improvement_value: float = 0.0
    total_value: float = 0.0
    area_sq_meters: float = 0.0
    value_per_sq_meter: float = 0.0
    acres: float = 0.0
    value_per_acre: float = 0.0
    centroid: LonLat | None = None
    percentiles: PercentileRanks = Field(default_factory=PercentileRanks)

    def metric(self, metric: ParcelMetric) -> float:
        return getattr(self, metric.value)

    @classmethod
    def from_feature(cls, feature: Feature, name_attribute: str = "Name") -> ParcelRecord:
        """Derive value metrics from the parcel layer's attributes.

        Land and improvement values default to 0. A non-positive area
        disables the per-area metrics (they are 0, never a fault value).
        """
        land_value = number_or_zero(feature.get("Land_Value"))
        improvement_value = number_or_zero(feature.get("Improved_V"))
        total_value = land_value + improvement_value

        area = number_or_zero(feature.get("SHAPE_Area"))
        value_per_sq_meter = total_value / area if area > 0 else 0.0
        acres = area / ACRE_IN_SQ_METERS if area > 0 else 0.0
        value_per_acre = total_value / acres if acres > 0 else 0.0

        raw_name = feature.get(name_attribute)
        display_name = raw_name if isinstance(raw_name, str) and raw_name.strip() else "Unnamed Parcel"

        return cls(
            feature=feature,
            display_name=display_name,
            land_value=land_value,
            improvement_value=improvement_value,
            total_value=total_value,
            area_sq_meters=area,
            value_per_sq_meter=value_per_sq_meter,
            acres=acres,
            value_per_acre=value_per_acre,
            centroid=feature.centroid or _fallback_coordinate(feature),
        )


def _fallback_coordinate(feature: Feature) -> LonLat | None:
    try:
        lon = float(feature.get("LONGITUDE"))
        lat = float(feature.get("LATITUDE"))
    except (TypeError, ValueError):
        return None
    if math.isfinite(lon) and math.isfinite(lat):
        return (lon, lat)
    return None


class ParcelMatch(BaseModel):
    """The parcel under a query point and the distance to its centroid."""

    model_config = {"frozen": True}

    parcel: ParcelRecord
    distance_km: float = 0.0
