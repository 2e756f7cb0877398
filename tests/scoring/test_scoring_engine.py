# tests/scoring/test_scoring_engine.py
"""Tests for SignalScoringEngine."""
import pytest

from src.journal.models import SymbolStats
from src.models.market import Direction, RiskRegime, TrendLabel
from src.scoring.models import MarketSnapshot, NewsSentiment
from src.scoring.scoring_engine import SignalScoringEngine
from src.scoring.settings import ScoringSettings


def make_snapshot(**overrides) -> MarketSnapshot:
    """Create a strongly bullish snapshot for testing.

    Trend 30 (price above EMA21 above EMA200, 1% away so no pullback),
    confluence 35 (1H/4H/1D bullish), momentum 25 (RSI 28),
    volatility 10 ("Moderate").
    """
    fields = dict(
        symbol="AAPL",
        price=101.0,
        rsi=28.0,
        ema_fast=100.0,
        ema_slow=95.0,
        tf_1h=TrendLabel.BULLISH,
        tf_4h=TrendLabel.BULLISH,
        tf_1d=TrendLabel.BULLISH,
        volatility="Moderate",
    )
    fields.update(overrides)
    return MarketSnapshot(**fields)


def make_threshold_snapshot(**overrides) -> MarketSnapshot:
    """Snapshot scoring exactly 50: partial trend 15 + momentum 25 + volatility 10."""
    fields = dict(
        symbol="AAPL",
        price=99.0,
        rsi=32.0,
        ema_fast=100.0,
        ema_slow=95.0,
        volatility="Moderate",
    )
    fields.update(overrides)
    return MarketSnapshot(**fields)


def make_gold_snapshot() -> MarketSnapshot:
    """XAUUSD snapshot scoring exactly 50: partial trend 15 + confluence 35."""
    return MarketSnapshot(
        symbol="XAUUSD",
        price=1990.0,
        rsi=50.0,
        ema_fast=2000.0,
        ema_slow=1900.0,
        tf_1h=TrendLabel.BULLISH,
        tf_4h=TrendLabel.BULLISH,
        tf_1d=TrendLabel.BULLISH,
    )


class TestSignalScoringEngine:
    """Tests for SignalScoringEngine."""

    @pytest.fixture
    def engine(self) -> SignalScoringEngine:
        """Create an engine with default settings."""
        return SignalScoringEngine()

    def test_strong_bullish_snapshot_is_buy_with_high_confidence(
        self, engine: SignalScoringEngine
    ) -> None:
        """Aligned trend, confluence, momentum and correlation give a confident BUY."""
        result = engine.evaluate(make_snapshot(), correlation=0.85)

        assert result.direction == Direction.BUY
        assert result.confidence >= 90
        assert result.confidence == 100
        assert result.score == pytest.approx(115.0)

        text = " ".join(result.reasons).lower()
        assert "trend" in text
        assert "confluence" in text
        assert "rsi" in text
        assert "correlation" in text

    def test_breakdown_reports_unsigned_factor_groups(
        self, engine: SignalScoringEngine
    ) -> None:
        """Breakdown holds magnitudes of each factor group."""
        result = engine.evaluate(make_snapshot(), correlation=0.85)

        assert result.breakdown.trend == 65
        assert result.breakdown.correlation == 15
        assert result.breakdown.momentum == 25
        assert result.breakdown.volatility == 10
        assert result.breakdown.news == 0

    def test_mixed_timeframes_remove_confluence_and_add_caution(
        self, engine: SignalScoringEngine
    ) -> None:
        """1H/4H disagreement zeroes confluence and records a caution."""
        aligned = engine.evaluate(make_snapshot(), correlation=0.85)
        mixed = engine.evaluate(
            make_snapshot(tf_4h=TrendLabel.BEARISH), correlation=0.85
        )

        assert mixed.score == pytest.approx(aligned.score - 35.0)
        assert mixed.breakdown.trend == 30
        assert any(r.startswith("Caution: timeframe conflict") for r in mixed.reasons)
        assert not any("Timeframe confluence" in r for r in mixed.reasons)

    def test_reinforcement_boosts_confidence_for_winning_history(
        self, engine: SignalScoringEngine
    ) -> None:
        """A 67% win rate over 6 trades multiplies confidence by 1.1."""
        history = SymbolStats(win_rate=67, total_trades=6, wins=4, losses=2, symbol="XAUUSD")

        baseline = engine.evaluate(make_gold_snapshot())
        boosted = engine.evaluate(make_gold_snapshot(), historical_stats=history)

        assert baseline.direction == Direction.BUY
        assert baseline.confidence == 50
        assert boosted.direction == Direction.BUY
        assert boosted.confidence == 55
        assert boosted.reinforcement_multiplier == pytest.approx(1.1)
        assert any("Historical win rate 67%" in r for r in boosted.reasons)

    def test_reinforcement_penalizes_losing_history(
        self, engine: SignalScoringEngine
    ) -> None:
        """A win rate below 45% over enough trades reduces confidence by 0.8."""
        history = SymbolStats(win_rate=40, total_trades=10, wins=4, losses=6, symbol="XAUUSD")

        result = engine.evaluate(make_gold_snapshot(), historical_stats=history)

        assert result.confidence == 40
        assert result.direction == Direction.BUY

    def test_reinforcement_never_flips_direction(self, engine: SignalScoringEngine) -> None:
        """Direction uses the unadjusted score even when confidence is penalized."""
        history = SymbolStats(win_rate=0, total_trades=20, wins=0, losses=20)

        result = engine.evaluate(make_threshold_snapshot(), historical_stats=history)

        assert result.direction == Direction.BUY
        assert result.confidence == 40

    def test_few_trades_leave_confidence_unchanged(self, engine: SignalScoringEngine) -> None:
        """Fewer than 5 resolved trades apply no multiplier."""
        history = SymbolStats(win_rate=100, total_trades=4, wins=4, losses=0)

        result = engine.evaluate(make_gold_snapshot(), historical_stats=history)

        assert result.confidence == 50
        assert result.reinforcement_multiplier == 1.0

    def test_confidence_is_capped_after_reinforcement(
        self, engine: SignalScoringEngine
    ) -> None:
        """Boosted confidence never exceeds 100."""
        history = SymbolStats(win_rate=90, total_trades=10, wins=9, losses=1)

        result = engine.evaluate(make_snapshot(), correlation=0.85, historical_stats=history)

        assert result.confidence == 100

    def test_score_of_exactly_50_is_buy(self, engine: SignalScoringEngine) -> None:
        """The BUY threshold is inclusive."""
        result = engine.evaluate(make_threshold_snapshot())

        assert result.score == pytest.approx(50.0)
        assert result.direction == Direction.BUY
        assert result.confidence == 50

    def test_score_just_below_50_is_hold(self, engine: SignalScoringEngine) -> None:
        """A slightly bearish news score drops the total to 49."""
        snapshot = make_threshold_snapshot(
            news=NewsSentiment(label="Bearish", strength="Low", score=-5.0)
        )

        result = engine.evaluate(snapshot)

        assert result.score == pytest.approx(49.0)
        assert result.direction == Direction.HOLD

    def test_bearish_snapshot_is_sell(self, engine: SignalScoringEngine) -> None:
        """Full downtrend with overbought RSI gives a SELL."""
        snapshot = MarketSnapshot(
            symbol="AAPL",
            price=99.0,
            rsi=68.0,
            ema_fast=100.0,
            ema_slow=105.0,
        )

        result = engine.evaluate(snapshot)

        assert result.direction == Direction.SELL
        assert result.score == pytest.approx(-55.0)
        assert result.confidence == 55

    def test_score_of_exactly_minus_50_is_sell(self) -> None:
        """The SELL threshold is inclusive."""
        engine = SignalScoringEngine(ScoringSettings(momentum_weight=20.0))
        snapshot = MarketSnapshot(
            symbol="AAPL",
            price=99.0,
            rsi=68.0,
            ema_fast=100.0,
            ema_slow=105.0,
        )

        result = engine.evaluate(snapshot)

        assert result.score == pytest.approx(-50.0)
        assert result.direction == Direction.SELL

    def test_score_just_above_minus_50_is_hold(self, engine: SignalScoringEngine) -> None:
        """Mildly bullish news lifts a -55 downtrend to -49."""
        snapshot = MarketSnapshot(
            symbol="AAPL",
            price=99.0,
            rsi=68.0,
            ema_fast=100.0,
            ema_slow=105.0,
            news=NewsSentiment(label="Bullish", strength="Low", score=30.0),
        )

        result = engine.evaluate(snapshot)

        assert result.score == pytest.approx(-49.0)
        assert result.direction == Direction.HOLD
        assert result.confidence == 49

    def test_missing_fields_score_neutral(self, engine: SignalScoringEngine) -> None:
        """A snapshot with only symbol and price is a HOLD with no reasons."""
        result = engine.evaluate(MarketSnapshot(symbol="AAPL", price=100.0))

        assert result.direction == Direction.HOLD
        assert result.confidence == 0
        assert result.score == 0.0
        assert result.reasons == ()

    def test_evaluation_is_deterministic(self, engine: SignalScoringEngine) -> None:
        """Identical inputs give identical results."""
        snapshot = make_snapshot(news=NewsSentiment(label="Bullish", strength="High", score=40))
        history = SymbolStats(win_rate=70, total_trades=8, wins=6, losses=2)

        first = engine.evaluate(snapshot, correlation=0.5, historical_stats=history)
        second = engine.evaluate(snapshot, correlation=0.5, historical_stats=history)

        assert first == second

    def test_pullback_entry_in_uptrend(self, engine: SignalScoringEngine) -> None:
        """Price just above EMA21 with neutral RSI adds the pullback weight."""
        snapshot = MarketSnapshot(
            symbol="AAPL",
            price=100.1,
            rsi=50.0,
            ema_fast=100.0,
            ema_slow=95.0,
        )

        result = engine.evaluate(snapshot)

        # trend 30 + pullback 30
        assert result.score == pytest.approx(60.0)
        assert any(r.startswith("Pullback entry") for r in result.reasons)

    def test_extreme_reversal_against_downtrend(self, engine: SignalScoringEngine) -> None:
        """Oversold RSI with a close back above EMA21 in a downtrend scores bullish."""
        snapshot = MarketSnapshot(
            symbol="AAPL",
            price=101.0,
            rsi=25.0,
            ema_fast=100.0,
            ema_slow=105.0,
        )

        result = engine.evaluate(snapshot)

        # downtrend bias -15 + reversal 30 + momentum 25
        assert result.score == pytest.approx(40.0)
        assert any(r.startswith("Extreme reversal") for r in result.reasons)
        # -15 and +30 do not cancel in the breakdown
        assert result.breakdown.trend == 45

    def test_low_correlation_penalty(self, engine: SignalScoringEngine) -> None:
        """Correlation below 0.3 subtracts the decoupling penalty."""
        with_corr = engine.evaluate(make_snapshot(), correlation=0.1)
        without = engine.evaluate(make_snapshot())

        assert with_corr.score == pytest.approx(without.score - 5.0)
        assert any("decoupled" in r for r in with_corr.reasons)

    def test_correlation_falls_back_to_snapshot(self, engine: SignalScoringEngine) -> None:
        """Snapshot correlation is used when none is passed."""
        result = engine.evaluate(make_snapshot(benchmark_correlation=-0.9))

        assert result.breakdown.correlation == 15

    def test_risk_off_regime_supports_gold_long(self, engine: SignalScoringEngine) -> None:
        """Risk-Off is the favored regime of a safe haven and adds to a long bias."""
        snapshot = make_gold_snapshot().model_copy(update={"risk_regime": RiskRegime.RISK_OFF})

        result = engine.evaluate(snapshot)

        assert result.score == pytest.approx(60.0)
        assert result.breakdown.news == 10
        assert any(r.startswith("Macro: Risk-Off") for r in result.reasons)

    def test_risk_on_regime_ignored_for_gold_long(self, engine: SignalScoringEngine) -> None:
        """A regime against the bias adds nothing."""
        snapshot = make_gold_snapshot().model_copy(update={"risk_regime": RiskRegime.RISK_ON})

        result = engine.evaluate(snapshot)

        assert result.score == pytest.approx(50.0)

    def test_mirror_divergence_weakens_signal(self, engine: SignalScoringEngine) -> None:
        """An inverse mirror asset moving with the signal subtracts the penalty."""
        result = engine.evaluate(make_gold_snapshot().model_copy(update={"mirror_delta": 0.4}))

        assert result.score == pytest.approx(35.0)
        assert result.direction == Direction.HOLD
        assert any(r.startswith("Divergence warning") for r in result.reasons)

    def test_ema_extension_only_adds_caution(self, engine: SignalScoringEngine) -> None:
        """Extension beyond the limit adds a reason but no score."""
        plain = engine.evaluate(make_snapshot())
        extended = engine.evaluate(make_snapshot(ema_extension_pct=4.5))

        assert extended.score == plain.score
        assert any("extended 4.5% above EMA" in r for r in extended.reasons)

    def test_extreme_news_adds_warning(self, engine: SignalScoringEngine) -> None:
        """News above 70 adds scaled weight and an extreme warning."""
        news = NewsSentiment(label="Bullish", strength="Extreme", score=80.0)

        result = engine.evaluate(make_gold_snapshot().model_copy(update={"news": news}))

        assert result.score == pytest.approx(66.0)
        assert result.breakdown.news == 16
        assert any(r.startswith("News sentiment Bullish") for r in result.reasons)
        assert any(r.startswith("Warning: extreme news") for r in result.reasons)

    def test_news_breakdown_sums_opposing_parts(self, engine: SignalScoringEngine) -> None:
        """Regime +10 and bearish news -10 net to zero but both show in the breakdown."""
        news = NewsSentiment(label="Bearish", strength="High", score=-50.0)
        snapshot = make_gold_snapshot().model_copy(
            update={"risk_regime": RiskRegime.RISK_OFF, "news": news}
        )

        result = engine.evaluate(snapshot)

        assert result.score == pytest.approx(50.0)
        assert result.breakdown.news == 20
