"""Settings for trade level calculation."""
from pydantic import BaseModel, Field, field_validator, model_validator

from src.levels.level_adjuster import RSI_STOP_FACTOR


class LevelSettings(BaseModel):
    """Configuration for entry zone, stop loss and take-profit ladder.

    Attributes:
        entry_band_percent: Half-width of the entry zone around price.
        stop_atr_multiple: Stop distance in ATR units.
        buy_targets: Take-profit ladder for BUY in ATR units.
        sell_targets: Take-profit ladder for SELL in ATR units.
        fallback_atr_percent: ATR approximation (percent of price) for
            symbols with no asset-class specific fallback.
        min_atr_percent: Floor applied to any ATR (percent of price).
        dynamic_adjustments: Apply RSI / news / asset-class multipliers
            in adjusted_levels.
    """

    entry_band_percent: float = Field(default=0.1, gt=0.0, le=5.0)
    stop_atr_multiple: float = Field(default=1.0, gt=0.0, le=10.0)
    buy_targets: list[float] = Field(default_factory=lambda: [1.0, 1.5, 2.0])
    # The short ladder reaches further on the third target.
    sell_targets: list[float] = Field(default_factory=lambda: [1.0, 1.5, 2.5])
    fallback_atr_percent: float = Field(default=1.0, gt=0.0, le=20.0)
    min_atr_percent: float = Field(default=0.2, gt=0.0, le=20.0)
    dynamic_adjustments: bool = True

    @field_validator("buy_targets", "sell_targets")
    @classmethod
    def validate_ladder(cls, v: list[float]) -> list[float]:
        """Ladders hold two or three strictly increasing positive multiples."""
        if len(v) not in (2, 3):
            raise ValueError(f"Target ladder needs 2 or 3 levels, got {len(v)}")
        if any(m <= 0 for m in v):
            raise ValueError("Target multiples must be positive")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"Target multiples must be strictly increasing: {v}")
        return v

    @model_validator(mode="after")
    def validate_ordering(self) -> "LevelSettings":
        """Minimum ATR distances must clear the entry zone.

        With dynamic adjustments on, the stop can be tightened by the RSI
        rule, so the check uses the tightest stop the adjuster produces.
        """
        stop = self.stop_atr_multiple
        if self.dynamic_adjustments:
            stop *= RSI_STOP_FACTOR
        smallest = min(stop, self.buy_targets[0], self.sell_targets[0])
        if self.min_atr_percent * smallest <= self.entry_band_percent:
            raise ValueError(
                "min_atr_percent times the smallest ATR multiple must exceed entry_band_percent"
            )
        return self
