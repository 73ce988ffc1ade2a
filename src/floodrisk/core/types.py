"""Core type definitions shared across all floodrisk modules."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

# (longitude, latitude) in degrees
LonLat = tuple[float, float]


class ZoneId(StrEnum):
    """FEMA flood hazard zone designations handled by the classifier."""

    VE = "VE"
    AE = "AE"
    AO = "AO"
    A = "A"
    X = "X"


# Highest severity first. The classifier walks layers in exactly this order.
ZONE_PRIORITY: tuple[ZoneId, ...] = (ZoneId.VE, ZoneId.AE, ZoneId.AO, ZoneId.A, ZoneId.X)

# Key used in rate tables for a point outside every mapped zone.
NO_ZONE = "none"


class ParcelMetric(StrEnum):
    """Parcel value metrics that carry a percentile rank."""

    TOTAL_VALUE = "total_value"
    IMPROVEMENT_VALUE = "improvement_value"
    VALUE_PER_ACRE = "value_per_acre"


class HealthStatus(BaseModel):
    """Load/health status for a service or data layer."""

    service: str
    healthy: bool
    details: dict[str, Any] = Field(default_factory=dict)
