# src/models/market.py
"""Market vocabulary shared by scoring, levels and the journal."""
import math
from enum import Enum


class Direction(str, Enum):
    """Directional call emitted by the scoring engine."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @property
    def is_directional(self) -> bool:
        """True for BUY and SELL."""
        return self is not Direction.HOLD


class TrendLabel(str, Enum):
    """Trend classification for a single timeframe."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"

    @property
    def sign(self) -> int:
        """+1 for bullish, -1 for bearish, 0 for neutral."""
        if self is TrendLabel.BULLISH:
            return 1
        if self is TrendLabel.BEARISH:
            return -1
        return 0


class RiskRegime(str, Enum):
    """Macro risk appetite regime."""

    RISK_ON = "Risk-On"
    RISK_OFF = "Risk-Off"
    NEUTRAL = "Neutral"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's built-in round() uses banker's rounding (71.5 -> 72 but
    60.5 -> 60); confidence and win-rate values round halves away from zero.
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def sign(value: float) -> int:
    """Return +1, -1 or 0 for the sign of value."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0
