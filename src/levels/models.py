"""Data models for trade levels."""
from dataclasses import dataclass


@dataclass(frozen=True)
class TradeLevels:
    """Entry zone, stop loss and take-profit ladder for one signal.

    An all-zero instance is the "no trade" sentinel returned for HOLD.

    Attributes:
        entry_low: Lower bound of the entry zone.
        entry_high: Upper bound of the entry zone.
        stop_loss: Protective stop price.
        take_profit_1: First target.
        take_profit_2: Second target.
        take_profit_3: Third target, None when the ladder has two levels.
        atr_value: ATR used as the unit distance.
        reasoning: Notes on how the levels were derived.
    """

    entry_low: float
    entry_high: float
    stop_loss: float
    take_profit_1: float
    take_profit_2: float
    take_profit_3: float | None = None
    atr_value: float = 0.0
    reasoning: str = ""

    @classmethod
    def none(cls) -> "TradeLevels":
        """Degenerate level set meaning "no trade"."""
        return cls(
            entry_low=0.0,
            entry_high=0.0,
            stop_loss=0.0,
            take_profit_1=0.0,
            take_profit_2=0.0,
            take_profit_3=0.0,
        )

    @property
    def is_trade(self) -> bool:
        """False for the HOLD sentinel."""
        return self.entry_low != 0.0 or self.entry_high != 0.0

    @property
    def targets(self) -> list[float]:
        """Take-profit prices in ladder order."""
        targets = [self.take_profit_1, self.take_profit_2]
        if self.take_profit_3 is not None:
            targets.append(self.take_profit_3)
        return targets

    def to_dict(self) -> dict:
        """Convert to the response layout of the analysis API."""
        take_profit = {"tp1": self.take_profit_1, "tp2": self.take_profit_2}
        if self.take_profit_3 is not None:
            take_profit["tp3"] = self.take_profit_3
        return {
            "entryZone": {"low": self.entry_low, "high": self.entry_high},
            "stopLoss": self.stop_loss,
            "takeProfit": take_profit,
            "atrValue": self.atr_value,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class LevelAdjustment:
    """Multipliers applied to the stop and target distances."""

    stop_multiplier: float = 1.0
    target_multiplier: float = 1.0
    reasons: tuple[str, ...] = ()
