"""Immutable parcel layer snapshot with its derived statistics."""

from __future__ import annotations

import math
from collections.abc import Iterable

from floodrisk.core.config import ParcelConfig
from floodrisk.core.types import LonLat, ParcelMetric
from floodrisk.geo.distance import haversine_km
from floodrisk.geo.locate import contains
from floodrisk.geo.models import BoundingBox, Feature
from floodrisk.parcels.models import ParcelMatch, ParcelRecord, PercentileRanks
from floodrisk.stats.distribution import (
    DistributionSummary,
    PercentileRanker,
    QuantileBreakSet,
    build_quantile_breaks,
    summarize,
)


class ParcelLayer:
    """Every parcel of a load, plus rankers and class breaks over them.

    Built once by :func:`build_parcel_layer` and never modified; a reload
    produces a new layer.
    """

    def __init__(
        self,
        parcels: tuple[ParcelRecord, ...] = (),
        rankers: dict[ParcelMetric, PercentileRanker] | None = None,
        breaks: QuantileBreakSet | None = None,
        value_summary: DistributionSummary | None = None,
    ) -> None:
        self._parcels = parcels
        self._rankers = rankers or {metric: PercentileRanker(()) for metric in ParcelMetric}
        self._breaks = breaks or QuantileBreakSet(class_count=5)
        self._value_summary = value_summary
        self._extent, self._center = _centroid_extent(parcels)

    @property
    def parcels(self) -> tuple[ParcelRecord, ...]:
        return self._parcels

    @property
    def breaks(self) -> QuantileBreakSet:
        """Class breaks over value per square metre."""
        return self._breaks

    @property
    def value_summary(self) -> DistributionSummary | None:
        return self._value_summary

    @property
    def extent(self) -> BoundingBox | None:
        """Bounding box of all parcel centroids."""
        return self._extent

    @property
    def center(self) -> LonLat | None:
        """Mean of all parcel centroids."""
        return self._center

    def __len__(self) -> int:
        return len(self._parcels)

    def percentile_of(self, metric: ParcelMetric, value: float | None) -> float | None:
        return self._rankers[metric](value)

    def locate(self, point: LonLat) -> ParcelMatch | None:
        """First parcel, in stored order, whose geometry contains ``point``."""
        for parcel in self._parcels:
            if contains(point, parcel.feature):
                distance_km = haversine_km(point, parcel.centroid) if parcel.centroid else 0.0
                return ParcelMatch(parcel=parcel, distance_km=distance_km)
        return None

    def find(self, query: str) -> ParcelRecord | None:
        """Best parcel whose display name contains ``query`` (case-insensitive).

        Exact matches beat prefix matches, which beat earlier substring
        positions; remaining ties go to the shorter name.
        """
        needle = query.strip().lower()
        if not needle:
            return None

        best: tuple[int, int] | None = None
        found: ParcelRecord | None = None
        for parcel in self._parcels:
            name = parcel.display_name.strip()
            if not name:
                continue
            lowered = name.lower()
            index = lowered.find(needle)
            if index == -1:
                continue
            if lowered == needle:
                rank = -2
            elif index == 0:
                rank = -1
            else:
                rank = index
            key = (rank, len(name))
            if best is None or key < best:
                best, found = key, parcel
        return found


def _centroid_extent(parcels: Iterable[ParcelRecord]) -> tuple[BoundingBox | None, LonLat | None]:
    centroids = [p.centroid for p in parcels if p.centroid is not None]
    if not centroids:
        return None, None
    lons = [c[0] for c in centroids]
    lats = [c[1] for c in centroids]
    extent = BoundingBox(min_lon=min(lons), min_lat=min(lats), max_lon=max(lons), max_lat=max(lats))
    return extent, (sum(lons) / len(lons), sum(lats) / len(lats))


def build_parcel_layer(
    features: Iterable[Feature],
    config: ParcelConfig | None = None,
    name_attribute: str = "Name",
) -> ParcelLayer:
    """Compute parcel metrics, percentile ranks and value-class breaks.

    ``features`` should already carry their bounds and centroids. Features
    without a usable geometry still contribute their values to the
    distributions; they just can never be located by point.
    """
    config = config or ParcelConfig()
    records = [ParcelRecord.from_feature(feature, name_attribute) for feature in features]

    rankers = {
        metric: PercentileRanker(record.metric(metric) for record in records)
        for metric in ParcelMetric
    }
    ranked = tuple(
        record.model_copy(
            update={
                "percentiles": PercentileRanks(
                    **{metric.value: rankers[metric](record.metric(metric)) for metric in ParcelMetric}
                )
            }
        )
        for record in records
    )

    class_values = [
        record.value_per_sq_meter
        for record in ranked
        if math.isfinite(record.value_per_sq_meter)
        and record.value_per_sq_meter > 0
        and config.breaks_min_value <= record.value_per_sq_meter <= config.breaks_max_value
    ]

    return ParcelLayer(
        parcels=ranked,
        rankers=rankers,
        breaks=build_quantile_breaks(class_values, config.class_count),
        value_summary=summarize(class_values),
    )
