"""Priority-ordered flood zone classification.

Layers are evaluated from the most to the least severe zone and, within a
layer, in stored feature order. First match wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from floodrisk.core.types import ZONE_PRIORITY, LonLat, ZoneId
from floodrisk.geo.locate import contains
from floodrisk.zones.models import ElevationInfo, ZoneLayer, ZoneMatch


class ZoneClassifier:
    """Answers "which flood zone contains this point" over a fixed layer snapshot."""

    def __init__(self, layers: Iterable[ZoneLayer] = ()) -> None:
        by_id: dict[ZoneId, ZoneLayer] = {}
        for layer in layers:
            by_id[layer.zone_id] = layer
        self._layers: tuple[ZoneLayer, ...] = tuple(
            by_id.get(zone_id, ZoneLayer.empty(zone_id)) for zone_id in ZONE_PRIORITY
        )

    @property
    def layers(self) -> tuple[ZoneLayer, ...]:
        """Layers in priority order, one per zone id."""
        return self._layers

    def layer(self, zone_id: ZoneId) -> ZoneLayer:
        return self._layers[ZONE_PRIORITY.index(zone_id)]

    def with_layer(self, layer: ZoneLayer) -> ZoneClassifier:
        """Return a new classifier with ``layer`` replacing its zone's layer."""
        return ZoneClassifier(
            layer if existing.zone_id == layer.zone_id else existing for existing in self._layers
        )

    def classify(self, point: LonLat) -> ZoneMatch | None:
        for layer in self._layers:
            for feature in layer.features:
                if contains(point, feature):
                    return ZoneMatch(
                        zone_id=layer.zone_id,
                        feature=feature,
                        elevation=ElevationInfo.from_properties(feature.properties),
                    )
        return None
