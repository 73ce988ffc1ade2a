"""Query session over one set of loaded layers.

A ``HazardSession`` owns the current snapshot of every layer. Loads are
asynchronous and independent: each one swaps in its own snapshot when it
finishes, and a failed load leaves an empty layer behind without touching the
others. Queries are synchronous and read whatever snapshots are current.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable, Mapping, Sized
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from floodrisk.core.config import Settings
from floodrisk.core.types import ZONE_PRIORITY, HealthStatus, LonLat, ParcelMetric, ZoneId
from floodrisk.facilities.models import FacilityLayer, FacilityMatch
from floodrisk.facilities.resolver import NearestFacilityResolver, RegionOverride
from floodrisk.loaders.geojson import LOAD_ERRORS, GeoJSONLoader
from floodrisk.parcels.layer import ParcelLayer
from floodrisk.parcels.models import ParcelMatch, ParcelRecord
from floodrisk.valuation.engine import RiskValuationEngine
from floodrisk.valuation.models import PremiumEstimate
from floodrisk.zones.classifier import ZoneClassifier
from floodrisk.zones.models import ZoneLayer, ZoneMatch

logger = logging.getLogger(__name__)

_L = TypeVar("_L", bound=Sized)


class Assessment(BaseModel):
    """Everything known about one query point."""

    model_config = {"frozen": True}

    point: LonLat
    zone: ZoneMatch | None = None
    risk_position: float
    parcel: ParcelMatch | None = None
    facility: FacilityMatch | None = None
    premium: PremiumEstimate | None = None


class HazardSession:
    """Holds the layer snapshots and answers point queries against them."""

    def __init__(
        self,
        settings: Settings | None = None,
        valuation: RiskValuationEngine | None = None,
        loader: GeoJSONLoader | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._valuation = valuation or RiskValuationEngine(self._settings.valuation.profiles_path)
        self._loader = loader or GeoJSONLoader(self._settings.data, client=client)
        self._override = RegionOverride.from_config(self._settings.facility)

        self._zones = ZoneClassifier()
        self._facilities = FacilityLayer()
        self._resolver = NearestFacilityResolver((), self._override)
        self._parcels = ParcelLayer()
        self._status: dict[str, HealthStatus] = {}

    # -- snapshots -----------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def zones(self) -> ZoneClassifier:
        return self._zones

    @property
    def facilities(self) -> FacilityLayer:
        return self._facilities

    @property
    def parcels(self) -> ParcelLayer:
        return self._parcels

    @property
    def valuation(self) -> RiskValuationEngine:
        return self._valuation

    def apply_zone_layer(self, layer: ZoneLayer) -> None:
        self._zones = self._zones.with_layer(layer)

    def apply_facilities(self, layer: FacilityLayer) -> None:
        self._resolver = NearestFacilityResolver(layer.facilities, self._override)
        self._facilities = layer

    def apply_parcels(self, layer: ParcelLayer) -> None:
        self._parcels = layer

    # -- loading -------------------------------------------------------------

    async def _guarded_load(
        self,
        name: str,
        load: Callable[[], Awaitable[_L]],
        apply: Callable[[_L], None],
        empty: Callable[[], _L],
    ) -> bool:
        try:
            layer = await load()
        except LOAD_ERRORS as exc:
            logger.warning("Failed to load layer %s: %s", name, exc)
            return self._mark_failed(name, apply, empty, exc)
        except Exception as exc:
            # Graceful degradation
            logger.exception("Unexpected failure loading layer %s", name)
            return self._mark_failed(name, apply, empty, exc)
        apply(layer)
        self._status[name] = HealthStatus(service=name, healthy=True, details={"features": len(layer)})
        return True

    def _mark_failed(
        self,
        name: str,
        apply: Callable[[_L], None],
        empty: Callable[[], _L],
        exc: Exception,
    ) -> bool:
        apply(empty())
        self._status[name] = HealthStatus(service=name, healthy=False, details={"error": str(exc)})
        return False

    async def load_zone(self, zone_id: ZoneId) -> bool:
        return await self._guarded_load(
            f"zone:{zone_id}",
            lambda: self._loader.load_zone_layer(zone_id),
            self.apply_zone_layer,
            lambda: ZoneLayer.empty(zone_id),
        )

    async def load_facilities(self) -> bool:
        return await self._guarded_load(
            "facilities",
            lambda: self._loader.load_facilities(self._settings.facility),
            self.apply_facilities,
            FacilityLayer,
        )

    async def load_parcels(self) -> bool:
        return await self._guarded_load(
            "parcels",
            lambda: self._loader.load_parcels(self._settings.parcel),
            self.apply_parcels,
            ParcelLayer,
        )

    async def load_all(self) -> list[HealthStatus]:
        """Load every layer concurrently; each applies itself as it finishes."""
        await asyncio.gather(
            *(self.load_zone(zone_id) for zone_id in ZONE_PRIORITY),
            self.load_facilities(),
            self.load_parcels(),
        )
        return self.layer_status()

    def layer_status(self) -> list[HealthStatus]:
        """Load status per layer; layers never attempted are reported unhealthy."""
        names = [f"zone:{zone_id}" for zone_id in ZONE_PRIORITY] + ["facilities", "parcels"]
        return [
            self._status.get(
                name, HealthStatus(service=name, healthy=False, details={"error": "not loaded"})
            )
            for name in names
        ]

    # -- queries -------------------------------------------------------------

    def classify(self, point: LonLat) -> ZoneMatch | None:
        return self._zones.classify(point)

    def risk_position(self, zone_id: ZoneId | None) -> float:
        return self._valuation.risk_position(zone_id)

    def nearest_facility(
        self,
        point: LonLat,
        parcel: ParcelRecord | Mapping[str, Any] | None = None,
    ) -> FacilityMatch | None:
        """Nearest facility, honouring the region override for ``parcel``.

        ``parcel`` may be a parcel record or a bare attribute mapping.
        """
        properties = parcel.feature.properties if isinstance(parcel, ParcelRecord) else parcel
        return self._resolver.nearest(point, properties)

    def locate_parcel(self, point: LonLat) -> ParcelMatch | None:
        return self._parcels.locate(point)

    def find_parcel(self, query: str) -> ParcelRecord | None:
        return self._parcels.find(query)

    def percentile_of(self, metric: ParcelMetric, value: float | None) -> float | None:
        return self._parcels.percentile_of(metric, value)

    def premium_estimate(
        self, zone_id: ZoneId | None, total_value: float
    ) -> PremiumEstimate | None:
        if not math.isfinite(total_value):
            return None
        return self._valuation.estimate(zone_id, total_value)

    def assess(self, point: LonLat) -> Assessment:
        """Zone, parcel, nearest facility and premium for a clicked point.

        A premium is only estimated when the point falls in a parcel with a
        positive total value.
        """
        parcel_match = self.locate_parcel(point)
        return self._assessment(point, parcel_match)

    def assess_parcel(self, parcel: ParcelRecord) -> Assessment | None:
        """Assessment at a parcel's centroid, or ``None`` if it has none."""
        if parcel.centroid is None:
            return None
        return self._assessment(parcel.centroid, ParcelMatch(parcel=parcel, distance_km=0.0))

    def _assessment(self, point: LonLat, parcel_match: ParcelMatch | None) -> Assessment:
        zone = self.classify(point)
        zone_id = zone.zone_id if zone is not None else None
        parcel = parcel_match.parcel if parcel_match is not None else None

        premium = None
        if parcel is not None and parcel.total_value > 0:
            premium = self.premium_estimate(zone_id, parcel.total_value)

        return Assessment(
            point=point,
            zone=zone,
            risk_position=self.risk_position(zone_id),
            parcel=parcel_match,
            facility=self.nearest_facility(point, parcel),
            premium=premium,
        )
