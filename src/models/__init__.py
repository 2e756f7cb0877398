"""Models package for the signal desk."""

from src.models.asset_class import AssetClass
from src.models.market import Direction, RiskRegime, TrendLabel, round_half_up, sign

__all__ = [
    "AssetClass",
    "Direction",
    "RiskRegime",
    "TrendLabel",
    "round_half_up",
    "sign",
]
