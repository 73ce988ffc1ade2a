"""Asynchronous GeoJSON layer loading.

Every layer is an independent fetch: from ``DataConfig.base_url`` over HTTP
when one is configured, otherwise from ``DataConfig.data_dir`` on disk. The
loader raises on failure; isolating failures per layer is the caller's job.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from floodrisk.core.config import DataConfig, FacilityConfig, ParcelConfig
from floodrisk.core.types import ZoneId
from floodrisk.facilities.models import FacilityLayer, FacilityRecord
from floodrisk.geo.crs import CoordinateNormalizer
from floodrisk.geo.indexing import index_features
from floodrisk.geo.models import Feature
from floodrisk.parcels.layer import ParcelLayer, build_parcel_layer
from floodrisk.zones.models import ZoneLayer

logger = logging.getLogger(__name__)

# Expected failures of a single layer load: transport/status, bad URL,
# filesystem, and JSON or model validation.
LOAD_ERRORS: tuple[type[Exception], ...] = (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError)


class GeoJSONLoader:
    """Fetches FeatureCollections and turns them into layer snapshots."""

    def __init__(
        self,
        config: DataConfig,
        normalizer: CoordinateNormalizer | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._normalizer = normalizer or CoordinateNormalizer()
        self._client = client

    def source_for(self, filename: str) -> str:
        if self._config.base_url:
            return f"{self._config.base_url.rstrip('/')}/{filename}"
        return str(Path(self._config.data_dir) / filename)

    # -- raw fetch -----------------------------------------------------------

    async def fetch(self, filename: str) -> dict[str, Any]:
        """Return the parsed FeatureCollection stored under ``filename``."""
        source = self.source_for(filename)
        if self._config.base_url:
            payload = await self._fetch_http(source)
        else:
            text = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
            payload = json.loads(text)

        if not isinstance(payload, dict) or not isinstance(payload.get("features", []), list):
            raise ValueError(f"{source} is not a GeoJSON FeatureCollection")
        return payload

    async def _fetch_http(self, url: str) -> Any:
        if self._client is not None:
            resp = await self._client.get(url)
            resp.raise_for_status()
            return resp.json()
        async with httpx.AsyncClient(timeout=httpx.Timeout(self._config.timeout_seconds)) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.json()

    async def load_features(self, filename: str) -> tuple[Feature, ...]:
        """Fetch, reproject to lon/lat and index one collection."""
        payload = await self.fetch(filename)
        features = index_features(self._normalizer.normalize(payload))
        logger.info("Loaded %d features from %s", len(features), self.source_for(filename))
        return features

    # -- layer snapshots -----------------------------------------------------

    async def load_zone_layer(self, zone_id: ZoneId) -> ZoneLayer:
        filename = self._config.zone_files.get(str(zone_id), f"{zone_id}.geojson")
        features = await self.load_features(filename)
        return ZoneLayer(zone_id=zone_id, features=features)

    async def load_facilities(self, config: FacilityConfig | None = None) -> FacilityLayer:
        config = config or FacilityConfig()
        features = await self.load_features(self._config.facilities_file)
        records = (
            FacilityRecord.from_feature(feature, config.name_attribute, config.default_name)
            for feature in features
        )
        return FacilityLayer(facilities=tuple(record for record in records if record is not None))

    async def load_parcels(
        self,
        config: ParcelConfig | None = None,
        name_attribute: str = "Name",
    ) -> ParcelLayer:
        features = await self.load_features(self._config.parcels_file)
        return build_parcel_layer(features, config, name_attribute)
