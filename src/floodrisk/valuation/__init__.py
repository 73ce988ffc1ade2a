"""Premium and coverage estimates by flood zone."""

from floodrisk.valuation.engine import RiskValuationEngine
from floodrisk.valuation.models import PremiumEstimate, ZoneProfile

__all__ = ["PremiumEstimate", "RiskValuationEngine", "ZoneProfile"]
