"""Flood hazard zone layers and priority-ordered classification."""

from floodrisk.zones.classifier import ZoneClassifier
from floodrisk.zones.models import ElevationInfo, ZoneLayer, ZoneMatch

__all__ = ["ElevationInfo", "ZoneClassifier", "ZoneLayer", "ZoneMatch"]
