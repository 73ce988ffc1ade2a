"""Nearest facility lookup with a single region override.

One facility serves a sub-region that is not connected to the rest of the
service area. It is only ever recommended for points inside that region, and
for those points it is always recommended.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from floodrisk.core.config import FacilityConfig
from floodrisk.core.types import LonLat
from floodrisk.facilities.models import FacilityMatch, FacilityRecord
from floodrisk.geo.distance import haversine_km

RegionPredicate = Callable[[Mapping[str, Any]], bool]


def legal_description_matches(token: str, attribute: str = "Tax_Legal_") -> RegionPredicate:
    """Case-insensitive substring test on a parcel's legal description.

    This is a heuristic: it trusts the free-text description, not geography.
    """
    needle = token.upper()

    def predicate(properties: Mapping[str, Any]) -> bool:
        value = properties.get(attribute)
        return isinstance(value, str) and needle in value.upper()

    return predicate


class RegionOverride:
    """Binds one named facility to the parcels a predicate selects."""

    def __init__(self, facility_name: str, applies_to: RegionPredicate) -> None:
        self.facility_name = facility_name
        self.applies_to = applies_to
        self._key = facility_name.strip().upper()

    @classmethod
    def from_config(cls, config: FacilityConfig) -> RegionOverride:
        return cls(
            facility_name=config.restricted_name,
            applies_to=legal_description_matches(config.region_token, config.legal_attribute),
        )

    def is_restricted(self, facility: FacilityRecord) -> bool:
        return facility.name.strip().upper() == self._key


class NearestFacilityResolver:
    """Linear great-circle scan over a facility snapshot."""

    def __init__(
        self,
        facilities: Iterable[FacilityRecord] = (),
        override: RegionOverride | None = None,
    ) -> None:
        self._override = override
        self._restricted: FacilityRecord | None = None
        candidates: list[FacilityRecord] = []
        for facility in facilities:
            if override is not None and override.is_restricted(facility):
                # Last one listed wins.
                self._restricted = facility
                continue
            candidates.append(facility)
        self._candidates = tuple(candidates)

    @property
    def restricted_facility(self) -> FacilityRecord | None:
        return self._restricted

    def in_restricted_region(self, parcel_properties: Mapping[str, Any] | None) -> bool:
        if self._override is None or parcel_properties is None:
            return False
        return self._override.applies_to(parcel_properties)

    def nearest(
        self,
        point: LonLat,
        parcel_properties: Mapping[str, Any] | None = None,
    ) -> FacilityMatch | None:
        """Closest facility to ``point``, or ``None`` when there is none.

        Args:
            point: Query location as (lon, lat).
            parcel_properties: Attributes of the parcel the point belongs to,
                used to decide whether the region override applies.
        """
        if self._restricted is not None and self.in_restricted_region(parcel_properties):
            return FacilityMatch(
                facility=self._restricted,
                distance_km=haversine_km(point, self._restricted.location),
            )

        best: FacilityMatch | None = None
        for facility in self._candidates:
            distance_km = haversine_km(point, facility.location)
            if best is None or distance_km < best.distance_km:
                best = FacilityMatch(facility=facility, distance_km=distance_km)
        return best
