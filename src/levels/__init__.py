"""Trade level calculation (entry zone, stop loss, take-profit ladder)."""

from .level_adjuster import LevelAdjuster
from .level_calculator import LevelCalculator
from .models import LevelAdjustment, TradeLevels
from .settings import LevelSettings

__all__ = [
    "LevelAdjuster",
    "LevelAdjustment",
    "LevelCalculator",
    "LevelSettings",
    "TradeLevels",
]
