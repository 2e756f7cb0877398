"""Volatility-based entry, stop and target calculation."""
import logging
import math

from src.levels.level_adjuster import LevelAdjuster
from src.levels.models import LevelAdjustment, TradeLevels
from src.levels.settings import LevelSettings
from src.models.asset_class import AssetClass
from src.models.market import Direction

logger = logging.getLogger(__name__)


class LevelCalculator:
    """Builds trade levels with ATR as the unit distance.

    For BUY:
        - entry zone = price +/- entry_band_percent
        - stop_loss = price - atr
        - targets = price + atr * buy_targets (1.0, 1.5, 2.0)

    For SELL:
        - entry zone = price +/- entry_band_percent
        - stop_loss = price + atr
        - targets = price - atr * sell_targets (1.0, 1.5, 2.5)

    HOLD returns TradeLevels.none(). Without a usable ATR, a per-asset-class
    percentage of price stands in for it.
    """

    def __init__(
        self,
        settings: LevelSettings | None = None,
        adjuster: LevelAdjuster | None = None,
    ):
        """Initialize the calculator.

        Args:
            settings: Level configuration.
            adjuster: Context-based multiplier rules for adjusted_levels.
        """
        self._settings = settings or LevelSettings()
        self._adjuster = adjuster or LevelAdjuster()

    def resolve_atr(self, price: float, atr: float | None, symbol: str | None = None) -> float:
        """Return the ATR to use as unit distance.

        Args:
            price: Current price.
            atr: Supplied ATR, None or non-positive when unavailable.
            symbol: Symbol used to pick the fallback percentage.

        Returns:
            The supplied ATR or the fallback, floored at min_atr_percent.
        """
        if atr is None or not math.isfinite(atr) or atr <= 0:
            asset_class = AssetClass.from_symbol(symbol)
            if asset_class is AssetClass.UNKNOWN:
                percent = self._settings.fallback_atr_percent / 100.0
            else:
                percent = asset_class.fallback_atr_percent
            atr = price * percent
            logger.debug(f"Using fallback ATR for {symbol or 'unknown symbol'}: {atr:.5f} ({percent:.2%})")

        floor = price * self._settings.min_atr_percent / 100.0
        return max(atr, floor)

    def levels(
        self,
        price: float,
        direction: Direction,
        atr: float | None = None,
        symbol: str | None = None,
    ) -> TradeLevels:
        """Calculate entry zone, stop loss and take-profit ladder.

        Args:
            price: Price at signal time.
            direction: Signal direction.
            atr: Volatility basis (ATR). Approximated from price when None.
            symbol: Symbol for the ATR fallback.

        Returns:
            TradeLevels; the all-zero sentinel for HOLD.

        Raises:
            ValueError: If price is not positive for a BUY or SELL.
        """
        if direction is Direction.HOLD:
            return TradeLevels.none()

        self._check_price(price)
        atr_value = self.resolve_atr(price, atr, symbol)
        return self._build(price, direction, atr_value, LevelAdjustment())

    def adjusted_levels(
        self,
        price: float,
        direction: Direction,
        atr: float | None = None,
        symbol: str | None = None,
        rsi: float | None = None,
        news_strength: str | None = None,
    ) -> TradeLevels:
        """Calculate levels with context-based stop/target multipliers.

        Args:
            price: Price at signal time.
            direction: Signal direction.
            atr: Volatility basis (ATR). Approximated from price when None.
            symbol: Symbol for the ATR fallback and asset-class rules.
            rsi: Current RSI for the oversold/overbought rule.
            news_strength: News impact label for the high-impact rule.

        Returns:
            TradeLevels; the all-zero sentinel for HOLD.

        Raises:
            ValueError: If price is not positive for a BUY or SELL.
        """
        if not self._settings.dynamic_adjustments:
            return self.levels(price, direction, atr=atr, symbol=symbol)

        if direction is Direction.HOLD:
            return TradeLevels.none()

        self._check_price(price)
        atr_value = self.resolve_atr(price, atr, symbol)
        adjustment = self._adjuster.adjust(symbol, rsi=rsi, news_strength=news_strength)
        return self._build(price, direction, atr_value, adjustment)

    def _check_price(self, price: float) -> None:
        if price is None or not math.isfinite(price) or price <= 0:
            raise ValueError(f"Price must be positive to calculate levels, got {price}")

    def _build(
        self,
        price: float,
        direction: Direction,
        atr: float,
        adjustment: LevelAdjustment,
    ) -> TradeLevels:
        """Assemble levels for a directional signal."""
        s = self._settings
        band = price * s.entry_band_percent / 100.0
        stop_distance = atr * s.stop_atr_multiple * adjustment.stop_multiplier

        if direction is Direction.BUY:
            ladder = s.buy_targets
            stop_loss = price - stop_distance
            targets = [price + atr * m * adjustment.target_multiplier for m in ladder]
        else:
            ladder = s.sell_targets
            stop_loss = price + stop_distance
            targets = [price - atr * m * adjustment.target_multiplier for m in ladder]

        reasons = list(adjustment.reasons) or ["Standard ATR levels"]

        return TradeLevels(
            entry_low=price - band,
            entry_high=price + band,
            stop_loss=stop_loss,
            take_profit_1=targets[0],
            take_profit_2=targets[1],
            take_profit_3=targets[2] if len(targets) > 2 else None,
            atr_value=atr,
            reasoning="; ".join(reasons),
        )
