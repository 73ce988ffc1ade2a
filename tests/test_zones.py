"""Tests for flood zone classification."""

from __future__ import annotations

import pytest

from floodrisk.core.types import ZONE_PRIORITY, ZoneId
from floodrisk.zones.classifier import ZoneClassifier
from floodrisk.zones.models import ElevationInfo, ZoneLayer


@pytest.fixture
def classifier(square_feature):
    return ZoneClassifier(
        [
            ZoneLayer(zone_id=ZoneId.X, features=(square_feature(0, 0, 4, 4, FLD_ZONE="X"),)),
            ZoneLayer(
                zone_id=ZoneId.AE,
                features=(square_feature(0, 0, 2, 2, FLD_ZONE="AE", STATIC_BFE=11.0, DEPTH=-9999),),
            ),
        ]
    )


class TestZoneClassifier:
    def test_more_severe_zone_wins(self, classifier):
        match = classifier.classify((1.0, 1.0))
        assert match.zone_id == ZoneId.AE
        assert match.feature.get("FLD_ZONE") == "AE"

    def test_less_severe_zone_outside_overlap(self, classifier):
        assert classifier.classify((3.0, 3.0)).zone_id == ZoneId.X

    def test_outside_all_zones(self, classifier):
        assert classifier.classify((10.0, 10.0)) is None

    def test_layers_in_priority_order(self, classifier):
        assert [layer.zone_id for layer in classifier.layers] == list(ZONE_PRIORITY)
        assert len(classifier.layer(ZoneId.VE)) == 0
        assert len(classifier.layer(ZoneId.AE)) == 1

    def test_first_feature_in_layer_wins(self, square_feature):
        classifier = ZoneClassifier(
            [
                ZoneLayer(
                    zone_id=ZoneId.A,
                    features=(
                        square_feature(0, 0, 2, 2, FLD_AR_ID="first"),
                        square_feature(0, 0, 3, 3, FLD_AR_ID="second"),
                    ),
                )
            ]
        )
        assert classifier.classify((1.0, 1.0)).feature.get("FLD_AR_ID") == "first"

    def test_with_layer_returns_new_classifier(self, classifier, square_feature):
        ve = ZoneLayer(zone_id=ZoneId.VE, features=(square_feature(0, 0, 1, 1),))
        updated = classifier.with_layer(ve)
        assert updated.classify((0.5, 0.5)).zone_id == ZoneId.VE
        assert classifier.classify((0.5, 0.5)).zone_id == ZoneId.AE

    def test_empty_classifier(self):
        assert ZoneClassifier().classify((1.0, 1.0)) is None


class TestElevationInfo:
    def test_values_present(self):
        info = ElevationInfo.from_properties({"STATIC_BFE": 12.0, "DEPTH": 1.5})
        assert info.base_flood_elevation == 12.0
        assert info.depth == 1.5

    def test_bfe_sentinel(self):
        info = ElevationInfo.from_properties({"STATIC_BFE": -9999.0})
        assert info.base_flood_elevation is None

    def test_bfe_at_threshold(self):
        assert ElevationInfo.from_properties({"STATIC_BFE": -9000}).base_flood_elevation is None

    def test_depth_sentinel(self):
        assert ElevationInfo.from_properties({"DEPTH": -9999}).depth is None

    def test_zero_is_a_real_value(self):
        info = ElevationInfo.from_properties({"STATIC_BFE": 0, "DEPTH": 0})
        assert info.base_flood_elevation == 0.0
        assert info.depth == 0.0

    def test_missing_or_text(self):
        info = ElevationInfo.from_properties({"STATIC_BFE": "n/a"})
        assert info.base_flood_elevation is None
        assert info.depth is None

    def test_match_carries_elevation(self, classifier):
        match = classifier.classify((1.0, 1.0))
        assert match.elevation.base_flood_elevation == 11.0
        assert match.elevation.depth is None


class TestZoneLayer:
    def test_priority(self):
        assert ZoneLayer.empty(ZoneId.VE).priority == 0
        assert ZoneLayer.empty(ZoneId.X).priority == 4
