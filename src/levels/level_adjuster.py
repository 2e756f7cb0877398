"""Rule-based stop/target adjustments."""
from src.levels.models import LevelAdjustment
from src.models.asset_class import AssetClass

# Only the RSI rule tightens the stop; every other rule widens it.
RSI_STOP_FACTOR = 0.8


class LevelAdjuster:
    """Derives stop and target multipliers from market context.

    Adjustment Rules (multiplicative):
    - RSI outside the neutral band -> stop x0.8, targets x1.2
    - High or extreme news strength -> stop x1.5
    - Gold / safe havens -> stop x1.2
    - Crypto -> stop x1.5, targets x1.3
    """

    def __init__(self, rsi_low: float = 30.0, rsi_high: float = 70.0):
        """Initialize the adjuster.

        Args:
            rsi_low: RSI below which the market is treated as oversold.
            rsi_high: RSI above which the market is treated as overbought.
        """
        self._rsi_low = rsi_low
        self._rsi_high = rsi_high

    def adjust(
        self,
        symbol: str | None,
        rsi: float | None = None,
        news_strength: str | None = None,
    ) -> LevelAdjustment:
        """Calculate multipliers and return the reasons applied.

        Args:
            symbol: Instrument symbol.
            rsi: Current RSI, None when unknown.
            news_strength: News impact label ("Low", "High", "Extreme"...).

        Returns:
            LevelAdjustment with the combined multipliers.
        """
        stop = 1.0
        target = 1.0
        reasons: list[str] = []

        if rsi is not None and rsi < self._rsi_low:
            stop *= RSI_STOP_FACTOR
            target *= 1.2
            reasons.append("RSI oversold: tighter stop, extended targets")
        elif rsi is not None and rsi > self._rsi_high:
            stop *= RSI_STOP_FACTOR
            target *= 1.2
            reasons.append("RSI overbought: tighter stop, extended targets")

        strength = (news_strength or "").lower()
        if "high" in strength or "extreme" in strength:
            stop *= 1.5
            reasons.append("High-impact news: widened stop for volatility")

        asset_class = AssetClass.from_symbol(symbol)
        if asset_class is AssetClass.SAFE_HAVEN:
            stop *= 1.2
            reasons.append("Safe haven: +20% stop buffer")
        elif asset_class is AssetClass.CRYPTO:
            stop *= 1.5
            target *= 1.3
            reasons.append("Crypto: extended stop and targets")

        return LevelAdjustment(
            stop_multiplier=stop,
            target_multiplier=target,
            reasons=tuple(reasons),
        )
