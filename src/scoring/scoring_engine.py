"""Multi-factor signal scoring engine."""
import logging

from src.journal.models import SymbolStats
from src.models.asset_class import AssetClass
from src.models.market import Direction, RiskRegime, round_half_up, sign
from src.scoring.models import FactorBreakdown, MarketSnapshot, SignalResult
from src.scoring.reinforcement import ReinforcementPolicy
from src.scoring.settings import ScoringSettings

logger = logging.getLogger(__name__)


class SignalScoringEngine:
    """Turns a market snapshot into a BUY/SELL/HOLD call.

    Additive scoring, each factor bounded to its own range:

    1. Trend: EMA-fast/EMA-slow crossover, +/-30 when price confirms,
       +/-15 for the crossover alone
    2. Pullback entry / extreme reversal: +/-30
    3. Multi-timeframe confluence: up to +/-35
    4. Momentum (RSI): +/-25
    5. Volatility: +10 for a stable ("Moderate") regime
    6. Benchmark correlation: +15 / -5
    7. Macro regime, EMA extension, mirror asset and news sentiment

    baseline = trend + pullback + confluence + momentum + volatility
    total = baseline + correlation + macro/news

    total >= threshold -> BUY, total <= -threshold -> SELL, otherwise HOLD.
    Confidence is |total| scaled by the reinforcement multiplier derived
    from journal history, clamped to 100.

    The engine is pure: identical inputs always produce identical results
    and nothing is raised for missing market data.
    """

    def __init__(
        self,
        settings: ScoringSettings | None = None,
        reinforcement: ReinforcementPolicy | None = None,
    ):
        """Initialize the engine.

        Args:
            settings: Scoring weights and thresholds.
            reinforcement: Policy turning journal stats into a multiplier.
                Built from settings when omitted.
        """
        self._settings = settings or ScoringSettings()
        self._reinforcement = reinforcement or ReinforcementPolicy(
            min_trades=self._settings.reinforcement_min_trades,
            high_win_rate=self._settings.reinforcement_high_win_rate,
            low_win_rate=self._settings.reinforcement_low_win_rate,
            boost=self._settings.reinforcement_boost,
            penalty=self._settings.reinforcement_penalty,
        )

    def evaluate(
        self,
        snapshot: MarketSnapshot,
        correlation: float | None = None,
        historical_stats: SymbolStats | None = None,
    ) -> SignalResult:
        """Score a snapshot and produce a signal.

        Args:
            snapshot: Market state for the symbol.
            correlation: Benchmark correlation coefficient. Falls back to
                snapshot.benchmark_correlation when None.
            historical_stats: Resolved-trade stats for the symbol, None when
                there is no history or it could not be read.

        Returns:
            SignalResult with direction, confidence, breakdown and reasons.
        """
        reasons: list[str] = []
        crossover = self._crossover_bias(snapshot)

        trend = self._score_trend(snapshot, crossover, reasons)
        pullback = self._score_pullback(snapshot, crossover, reasons)
        confluence = self._score_confluence(snapshot, reasons)
        momentum = self._score_momentum(snapshot, reasons)
        volatility = self._score_volatility(snapshot, reasons)

        baseline = trend + confluence + pullback + momentum + volatility

        if correlation is None:
            correlation = snapshot.benchmark_correlation
        correlation_score = self._score_correlation(correlation, reasons)
        macro, macro_magnitude = self._score_macro_news(snapshot, baseline, reasons)

        total = baseline + correlation_score + macro
        direction = self._decide(total)

        multiplier = self._reinforcement.multiplier(historical_stats)
        note = self._reinforcement.describe(historical_stats)
        if note:
            reasons.append(note)

        confidence = round_half_up(min(abs(total) * multiplier, 100.0))

        breakdown = FactorBreakdown(
            trend=round_half_up(abs(trend) + abs(pullback) + abs(confluence)),
            correlation=round_half_up(abs(correlation_score)),
            momentum=round_half_up(abs(momentum)),
            volatility=round_half_up(abs(volatility)),
            news=round_half_up(macro_magnitude),
        )

        logger.debug(
            f"Scored {snapshot.symbol}: {direction.value} total={total:.1f} "
            f"confidence={confidence} (x{multiplier})"
        )

        return SignalResult(
            symbol=snapshot.symbol,
            direction=direction,
            confidence=confidence,
            breakdown=breakdown,
            reasons=tuple(reasons),
            score=total,
            reinforcement_multiplier=multiplier,
        )

    def _decide(self, total: float) -> Direction:
        """Map a total score onto a direction.

        Args:
            total: Signed total score.

        Returns:
            BUY at or above the threshold, SELL at or below its negative,
            HOLD in between.
        """
        threshold = self._settings.signal_threshold
        if total >= threshold:
            return Direction.BUY
        elif total <= -threshold:
            return Direction.SELL
        else:
            return Direction.HOLD

    def _crossover_bias(self, snapshot: MarketSnapshot) -> int:
        """+1 when EMA-fast is above EMA-slow, -1 below, 0 if unknown."""
        if snapshot.ema_fast is None or snapshot.ema_slow is None:
            return 0
        return sign(snapshot.ema_fast - snapshot.ema_slow)

    def _score_trend(
        self, snapshot: MarketSnapshot, crossover: int, reasons: list[str]
    ) -> float:
        """Trend factor from the EMA crossover and price position.

        Full alignment (price on the crossover side of EMA-fast) scores the
        full weight; the crossover alone scores the partial weight.
        """
        if crossover == 0:
            return 0.0

        s = self._settings
        price_side = sign(snapshot.price - snapshot.ema_fast)

        if crossover > 0:
            if price_side > 0:
                reasons.append("Strong uptrend: price above EMA21 and EMA21 above EMA200")
                return s.trend_full_weight
            reasons.append("Uptrend bias: EMA21 above EMA200 but price not above EMA21")
            return s.trend_partial_weight

        if price_side < 0:
            reasons.append("Strong downtrend: price below EMA21 and EMA21 below EMA200")
            return -s.trend_full_weight
        reasons.append("Downtrend bias: EMA21 below EMA200 but price not below EMA21")
        return -s.trend_partial_weight

    def _score_pullback(
        self, snapshot: MarketSnapshot, crossover: int, reasons: list[str]
    ) -> float:
        """Pullback-entry or extreme-reversal factor.

        Pullback: price within the band of EMA-fast on the trend side with
        RSI in the neutral range, scored in the crossover direction.
        Reversal: RSI outside the neutral range with a close back across
        EMA-fast against the crossover, scored against the crossover.
        The two are mutually exclusive.
        """
        if crossover == 0 or snapshot.rsi is None or not snapshot.ema_fast:
            return 0.0

        s = self._settings
        rsi = snapshot.rsi
        distance_pct = (snapshot.price - snapshot.ema_fast) / snapshot.ema_fast * 100.0
        rsi_neutral = s.rsi_neutral_low <= rsi <= s.rsi_neutral_high

        if rsi_neutral:
            if crossover > 0 and 0.0 <= distance_pct <= s.pullback_band_percent:
                reasons.append(
                    f"Pullback entry: price {distance_pct:.2f}% above EMA21 in uptrend "
                    f"with neutral RSI ({rsi:.1f})"
                )
                return s.pullback_weight
            if crossover < 0 and -s.pullback_band_percent <= distance_pct <= 0.0:
                reasons.append(
                    f"Pullback entry: price {abs(distance_pct):.2f}% below EMA21 in downtrend "
                    f"with neutral RSI ({rsi:.1f})"
                )
                return -s.pullback_weight
            return 0.0

        if rsi < s.rsi_neutral_low and crossover < 0 and distance_pct > 0:
            reasons.append(
                f"Extreme reversal: RSI oversold ({rsi:.1f}) with close back above EMA21"
            )
            return s.pullback_weight
        if rsi > s.rsi_neutral_high and crossover > 0 and distance_pct < 0:
            reasons.append(
                f"Extreme reversal: RSI overbought ({rsi:.1f}) with close back below EMA21"
            )
            return -s.pullback_weight
        return 0.0

    def _score_confluence(self, snapshot: MarketSnapshot, reasons: list[str]) -> float:
        """Multi-timeframe confluence factor.

        1H and 4H agreeing set the macro bias; the daily timeframe and the
        5m/15m pair add to it when they agree. A 1H/4H conflict is only
        recorded as a caution.
        """
        s = self._settings
        h1 = snapshot.tf_1h.sign
        h4 = snapshot.tf_4h.sign

        if h1 != 0 and h1 == h4:
            macro = h1
            label = snapshot.tf_1h.value
            score = macro * s.confluence_macro_weight
            reasons.append(f"Timeframe confluence: 1H and 4H both {label}")

            if snapshot.tf_1d.sign == macro:
                score += macro * s.confluence_daily_weight
                reasons.append(f"Daily timeframe confirms {label} confluence")

            if snapshot.tf_5m.sign == macro and snapshot.tf_15m.sign == macro:
                score += macro * s.confluence_micro_weight
                reasons.append(f"5m/15m timeframes aligned {label} with higher timeframes")

            return max(-s.confluence_cap, min(s.confluence_cap, score))

        if h1 != h4:
            reasons.append(
                f"Caution: timeframe conflict (1H {snapshot.tf_1h.value} vs "
                f"4H {snapshot.tf_4h.value}), no confluence"
            )
        return 0.0

    def _score_momentum(self, snapshot: MarketSnapshot, reasons: list[str]) -> float:
        """RSI momentum factor."""
        if snapshot.rsi is None:
            return 0.0

        s = self._settings
        if snapshot.rsi < s.momentum_oversold:
            reasons.append(f"RSI momentum oversold ({snapshot.rsi:.1f} < {s.momentum_oversold:g})")
            return s.momentum_weight
        if snapshot.rsi > s.momentum_overbought:
            reasons.append(
                f"RSI momentum overbought ({snapshot.rsi:.1f} > {s.momentum_overbought:g})"
            )
            return -s.momentum_weight
        return 0.0

    def _score_volatility(self, snapshot: MarketSnapshot, reasons: list[str]) -> float:
        """Volatility stabilizer; never a penalty."""
        label = snapshot.volatility
        if label and label.strip().lower() == self._settings.stable_volatility_label.lower():
            reasons.append(f"{self._settings.stable_volatility_label} volatility supports stable execution")
            return self._settings.volatility_weight
        return 0.0

    def _score_correlation(self, correlation: float | None, reasons: list[str]) -> float:
        """Benchmark correlation confirmation or decoupling warning."""
        if correlation is None:
            return 0.0

        s = self._settings
        strength = abs(correlation)
        if strength > s.correlation_strong_threshold:
            reasons.append(f"High benchmark correlation ({correlation:.2f}) confirms the move")
            return s.correlation_strong_weight
        if strength < s.correlation_weak_threshold:
            reasons.append(
                f"Low benchmark correlation ({correlation:.2f}): asset decoupled from benchmark"
            )
            return -s.correlation_weak_penalty
        return 0.0

    def _score_macro_news(
        self, snapshot: MarketSnapshot, baseline: float, reasons: list[str]
    ) -> tuple[float, float]:
        """Macro regime, EMA extension, mirror asset and news sentiment.

        Regime and mirror-asset effects are signed by the baseline: an
        aligned regime strengthens it, a mirror asset moving with it (where
        an inverse move is expected) weakens it.

        Returns:
            The signed contribution and the sum of its parts' magnitudes.
        """
        s = self._settings
        bias = sign(baseline)
        score = 0.0
        magnitude = 0.0

        asset_class = AssetClass.from_symbol(snapshot.symbol)
        favored = asset_class.favored_regime
        regime = snapshot.risk_regime
        if bias != 0 and regime is not RiskRegime.NEUTRAL and favored is not RiskRegime.NEUTRAL:
            implied = 1 if regime is favored else -1
            if implied == bias:
                score += bias * s.regime_weight
                magnitude += s.regime_weight
                side = "bullish" if bias > 0 else "bearish"
                reasons.append(
                    f"Macro: {regime.value} regime supports {side} bias on "
                    f"{asset_class.value.replace('_', ' ')} asset"
                )

        extension = snapshot.ema_extension_pct
        if extension is not None and bias != 0:
            if bias > 0 and extension > s.ema_extension_limit_percent:
                reasons.append(
                    f"Caution: price extended {extension:.1f}% above EMA, long entry is stretched"
                )
            elif bias < 0 and extension < -s.ema_extension_limit_percent:
                reasons.append(
                    f"Caution: price extended {abs(extension):.1f}% below EMA, short entry is stretched"
                )

        mirror = snapshot.mirror_delta
        if mirror is not None and bias != 0 and sign(mirror) == bias:
            score -= bias * s.mirror_divergence_penalty
            magnitude += s.mirror_divergence_penalty
            reasons.append(
                f"Divergence warning: inverse mirror asset moving {mirror:+.2f}% with the signal"
            )

        news = snapshot.news
        if news is not None and news.score != 0:
            score += news.score * s.news_scale
            magnitude += abs(news.score) * s.news_scale
            if abs(news.score) > s.news_notable_threshold:
                side = "bullish" if news.score > 0 else "bearish"
                reasons.append(f"News sentiment {news.label} ({news.score:+.0f}) adds {side} weight")
            if abs(news.score) > s.news_extreme_threshold:
                reasons.append(
                    f"Warning: extreme news sentiment ({news.strength} strength), expect volatility"
                )

        return score, magnitude
