"""Facility (shelter) layer and nearest-facility resolution."""

from floodrisk.facilities.models import FacilityLayer, FacilityMatch, FacilityRecord
from floodrisk.facilities.resolver import (
    NearestFacilityResolver,
    RegionOverride,
    legal_description_matches,
)

__all__ = [
    "FacilityLayer",
    "FacilityMatch",
    "FacilityRecord",
    "NearestFacilityResolver",
    "RegionOverride",
    "legal_description_matches",
]
