"""Deterministic flood insurance premium estimates."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import yaml

from floodrisk.core.types import NO_ZONE, ZoneId
from floodrisk.valuation.models import PremiumEstimate, ZoneProfile


_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "zone_profiles.yml"


class RiskValuationEngine:
    """Loads zone profiles from YAML and prices a parcel by zone and value.

    premium = clamp(total_value * rate, minimum, maximum)
    recommended coverage = min(total_value, coverage cap)
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        self._config_path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
        self._profiles: dict[str, ZoneProfile] = {}
        self._premium_min = 450.0
        self._premium_max = 7200.0
        self._coverage_cap = 250000.0
        self._load_config()

    def _load_config(self) -> None:
        with open(self._config_path) as fh:
            raw: dict[str, Any] = yaml.safe_load(fh) or {}

        premium = raw.get("premium", {})
        self._premium_min = float(premium.get("minimum", self._premium_min))
        self._premium_max = float(premium.get("maximum", self._premium_max))
        self._coverage_cap = float(raw.get("coverage_cap", self._coverage_cap))
        if self._premium_min > self._premium_max:
            raise ValueError(
                f"Premium minimum {self._premium_min} exceeds maximum {self._premium_max}"
            )

        for zone_key, profile_data in (raw.get("zones") or {}).items():
            self._profiles[str(zone_key)] = ZoneProfile(**profile_data)

        missing = [key for key in [*ZoneId, NO_ZONE] if str(key) not in self._profiles]
        if missing:
            raise ValueError(
                f"Zone profile config {self._config_path} is missing entries for "
                f"{[str(key) for key in missing]}"
            )

    @property
    def premium_bounds(self) -> tuple[float, float]:
        return (self._premium_min, self._premium_max)

    @property
    def coverage_cap(self) -> float:
        return self._coverage_cap

    def profile(self, zone_id: ZoneId | str | None) -> ZoneProfile:
        """Profile for ``zone_id``; ``None`` or ``"none"`` means outside every zone."""
        key = NO_ZONE if zone_id is None else str(zone_id)
        if key not in self._profiles:
            raise ValueError(f"Unknown zone id {zone_id!r}")
        return self._profiles[key]

    def risk_position(self, zone_id: ZoneId | str | None) -> float:
        return self.profile(zone_id).risk_position

    def estimate(self, zone_id: ZoneId | str | None, total_value: float) -> PremiumEstimate:
        if not math.isfinite(total_value):
            raise ValueError(f"total_value must be finite, got {total_value!r}")

        profile = self.profile(zone_id)
        premium = min(max(total_value * profile.rate, self._premium_min), self._premium_max)
        return PremiumEstimate(
            zone_id=None if zone_id in (None, NO_ZONE) else ZoneId(zone_id),
            rate=profile.rate,
            total_value=total_value,
            premium=premium,
            recommended_coverage=min(total_value, self._coverage_cap),
        )
