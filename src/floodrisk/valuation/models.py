"""Premium estimation data models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from floodrisk.core.types import ZoneId


class ZoneProfile(BaseModel):
    """Rate and severity position for one zone (or for "no zone")."""

    rate: float = Field(ge=0)
    risk_position: float = Field(ge=0, le=1)


class PremiumEstimate(BaseModel):
    """Annual premium estimate and recommended building coverage."""

    model_config = {"frozen": True}

    zone_id: ZoneId | None = None
    rate: float
    total_value: float
    premium: float
    recommended_coverage: float
