"""Parcel value records, statistics and lookups."""

from floodrisk.parcels.layer import ParcelLayer, build_parcel_layer
from floodrisk.parcels.models import ParcelMatch, ParcelRecord, PercentileRanks

__all__ = ["ParcelLayer", "ParcelMatch", "ParcelRecord", "PercentileRanks", "build_parcel_layer"]
