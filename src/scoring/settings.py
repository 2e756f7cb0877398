"""Settings for the signal scoring engine."""
from pydantic import BaseModel, Field, model_validator


class ScoringSettings(BaseModel):
    """Weights and thresholds of the multi-factor scoring engine.

    The weights are empirically tuned constants; they are kept as named
    configuration rather than derived.
    """

    # Trend (EMA-fast vs EMA-slow crossover, price confirmation)
    trend_full_weight: float = Field(default=30.0, ge=0)
    trend_partial_weight: float = Field(default=15.0, ge=0)

    # Pullback entry / extreme reversal
    pullback_weight: float = Field(default=30.0, ge=0)
    pullback_band_percent: float = Field(default=0.2, gt=0, le=5.0)
    rsi_neutral_low: float = Field(default=30.0, ge=0.0, le=50.0)
    rsi_neutral_high: float = Field(default=70.0, ge=50.0, le=100.0)

    # Multi-timeframe confluence
    confluence_macro_weight: float = Field(default=25.0, ge=0)
    confluence_daily_weight: float = Field(default=10.0, ge=0)
    confluence_micro_weight: float = Field(default=10.0, ge=0)
    confluence_cap: float = Field(default=35.0, ge=0)

    # Momentum
    momentum_weight: float = Field(default=25.0, ge=0)
    momentum_oversold: float = Field(default=35.0, ge=0.0, le=50.0)
    momentum_overbought: float = Field(default=65.0, ge=50.0, le=100.0)

    # Volatility
    volatility_weight: float = Field(default=10.0, ge=0)
    stable_volatility_label: str = "Moderate"

    # Benchmark correlation
    correlation_strong_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    correlation_strong_weight: float = Field(default=15.0, ge=0)
    correlation_weak_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    correlation_weak_penalty: float = Field(default=5.0, ge=0)

    # Macro / news
    regime_weight: float = Field(default=10.0, ge=0)
    ema_extension_limit_percent: float = Field(default=3.0, gt=0)
    mirror_divergence_penalty: float = Field(default=15.0, ge=0)
    news_scale: float = Field(default=0.2, ge=0.0, le=1.0)
    news_notable_threshold: float = Field(default=30.0, ge=0.0, le=100.0)
    news_extreme_threshold: float = Field(default=70.0, ge=0.0, le=100.0)

    # Decision
    signal_threshold: float = Field(default=50.0, gt=0, le=100)

    # Reinforcement from journal history
    reinforcement_min_trades: int = Field(default=5, ge=1)
    reinforcement_high_win_rate: float = Field(default=65.0, ge=0.0, le=100.0)
    reinforcement_low_win_rate: float = Field(default=45.0, ge=0.0, le=100.0)
    reinforcement_boost: float = Field(default=1.1, ge=1.0, le=2.0)
    reinforcement_penalty: float = Field(default=0.8, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_bands(self) -> "ScoringSettings":
        """Ensure lower bands sit below upper bands."""
        if self.rsi_neutral_low >= self.rsi_neutral_high:
            raise ValueError("rsi_neutral_low must be below rsi_neutral_high")
        if self.correlation_weak_threshold >= self.correlation_strong_threshold:
            raise ValueError(
                "correlation_weak_threshold must be below correlation_strong_threshold"
            )
        if self.reinforcement_low_win_rate >= self.reinforcement_high_win_rate:
            raise ValueError(
                "reinforcement_low_win_rate must be below reinforcement_high_win_rate"
            )
        if self.news_notable_threshold > self.news_extreme_threshold:
            raise ValueError("news_notable_threshold must not exceed news_extreme_threshold")
        return self
