"""Data models for the scoring system."""
import math
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.market import Direction, RiskRegime, TrendLabel


TIMEFRAME_KEYS = {
    "5m": "tf_5m",
    "15m": "tf_15m",
    "1H": "tf_1h",
    "4H": "tf_4h",
    "1D": "tf_1d",
}


class NewsSentiment(BaseModel):
    """Labelled news sentiment supplied by the news collaborator."""

    model_config = ConfigDict(frozen=True)

    label: str = "Neutral"
    strength: str = "Low"
    score: float = Field(default=0.0, ge=-100.0, le=100.0, description="-100 bearish .. +100 bullish")


class MarketSnapshot(BaseModel):
    """Market state for one evaluation.

    Every optional field defaults to a neutral value here, so the scoring
    engine can treat the snapshot as total.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float

    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None

    # Indicators
    rsi: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    ema_fast: Optional[float] = None  # EMA 21
    ema_slow: Optional[float] = None  # EMA 200
    adx: Optional[float] = None
    macd: Optional[float] = None

    # Multi-timeframe trend labels
    tf_5m: TrendLabel = TrendLabel.NEUTRAL
    tf_15m: TrendLabel = TrendLabel.NEUTRAL
    tf_1h: TrendLabel = TrendLabel.NEUTRAL
    tf_4h: TrendLabel = TrendLabel.NEUTRAL
    tf_1d: TrendLabel = TrendLabel.NEUTRAL

    # Context
    volatility: Optional[str] = None
    risk_regime: RiskRegime = RiskRegime.NEUTRAL
    benchmark_correlation: Optional[float] = Field(default=None, ge=-1.0, le=1.0)
    ema_extension_pct: Optional[float] = None
    mirror_delta: Optional[float] = None
    news: Optional[NewsSentiment] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "MarketSnapshot":
        """Build a snapshot from a market-data payload.

        Accepts the camelCase payload of the market-data collaborator, e.g.::

            {"symbol": "XAUUSD", "price": 2650.1,
             "indicators": {"rsi": 41.2, "emaFast": 2641.0, "emaSlow": 2580.4},
             "timeframes": {"1H": "Bullish", "4H": "Bullish"},
             "volatility": "Moderate", "riskRegime": "Risk-Off",
             "correlation": 0.86, "newsSentiment": {"score": 35}}

        Missing or malformed optional values become neutral; only a missing
        symbol or price is rejected.

        Args:
            payload: Raw snapshot dictionary.

        Returns:
            A frozen MarketSnapshot.

        Raises:
            ValueError: If symbol or price is missing or not usable.
        """
        symbol = payload.get("symbol")
        price = _as_float(payload.get("price"))
        if not symbol or price is None:
            raise ValueError("Snapshot payload requires symbol and numeric price")

        indicators = payload.get("indicators") or {}
        ohlc = payload.get("ohlc") or {}
        timeframes = payload.get("timeframes") or {}

        fields: dict[str, Any] = {
            "symbol": str(symbol),
            "price": price,
            "open": _as_float(ohlc.get("open")),
            "high": _as_float(ohlc.get("high")),
            "low": _as_float(ohlc.get("low")),
            "close": _as_float(ohlc.get("close")),
            "rsi": _bounded(_as_float(indicators.get("rsi")), 0.0, 100.0),
            "ema_fast": _as_float(_first(indicators, "emaFast", "ema21", "ema_fast")),
            "ema_slow": _as_float(_first(indicators, "emaSlow", "ema200", "ema_slow")),
            "adx": _as_float(indicators.get("adx")),
            "macd": _as_float(indicators.get("macd")),
            "volatility": payload.get("volatility") if isinstance(payload.get("volatility"), str) else None,
            "risk_regime": _as_regime(_first(payload, "riskRegime", "risk_regime")),
            "benchmark_correlation": _bounded(
                _as_float(_first(payload, "correlation", "benchmarkCorrelation")), -1.0, 1.0
            ),
            "ema_extension_pct": _as_float(_first(payload, "emaExtension", "emaExtensionPct")),
            "mirror_delta": _as_float(_first(payload, "mirrorDelta", "mirror_delta")),
            "news": _as_news(_first(payload, "newsSentiment", "news")),
        }
        for key, field_name in TIMEFRAME_KEYS.items():
            fields[field_name] = _as_trend(timeframes.get(key))

        return cls(**fields)


@dataclass(frozen=True)
class FactorBreakdown:
    """Unsigned magnitudes of the factor groups behind a signal.

    Attributes:
        trend: Trend, pullback/reversal and confluence contributions combined.
        correlation: Benchmark correlation contribution.
        momentum: RSI momentum contribution.
        volatility: Volatility stabilizer contribution.
        news: Macro regime, mirror asset and news sentiment contributions.
    """

    trend: int = 0
    correlation: int = 0
    momentum: int = 0
    volatility: int = 0
    news: int = 0


@dataclass(frozen=True)
class SignalResult:
    """Directional call with its confidence and explanation.

    Attributes:
        symbol: Evaluated symbol.
        direction: BUY, SELL or HOLD.
        confidence: Integer confidence from 0-100 after reinforcement.
        breakdown: Factor magnitudes.
        reasons: Human-readable reasons in evaluation order.
        score: Signed total score before reinforcement.
        reinforcement_multiplier: Multiplier applied from journal history.
    """

    symbol: str
    direction: Direction
    confidence: int
    breakdown: FactorBreakdown
    reasons: tuple[str, ...]
    score: float
    reinforcement_multiplier: float = 1.0


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _bounded(value: float | None, low: float, high: float) -> float | None:
    if value is None or value < low or value > high:
        return None
    return value


def _as_trend(value: Any) -> TrendLabel:
    if isinstance(value, str):
        for label in TrendLabel:
            if label.value.lower() == value.strip().lower():
                return label
    return TrendLabel.NEUTRAL


def _as_regime(value: Any) -> RiskRegime:
    if isinstance(value, str):
        for regime in RiskRegime:
            if regime.value.lower() == value.strip().lower():
                return regime
    return RiskRegime.NEUTRAL


def _as_news(value: Any) -> NewsSentiment | None:
    if not isinstance(value, dict):
        return None
    score = _as_float(value.get("score"))
    return NewsSentiment(
        label=str(value.get("sentiment") or value.get("label") or "Neutral"),
        strength=str(value.get("strength") or "Low"),
        score=max(-100.0, min(100.0, score)) if score is not None else 0.0,
    )
