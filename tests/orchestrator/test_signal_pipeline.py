# tests/orchestrator/test_signal_pipeline.py
"""Tests for SignalPipeline."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.journal.errors import JournalStorageError
from src.journal.models import JournalEntry, Outcome
from src.journal.signal_journal import SignalJournal
from src.journal.store import InMemoryJournalStore
from src.levels.level_calculator import LevelCalculator
from src.levels.models import TradeLevels
from src.market.base import MarketDataProvider
from src.models.market import Direction, TrendLabel
from src.orchestrator.settings import PipelineSettings
from src.orchestrator.signal_pipeline import SignalPipeline
from src.scoring.models import MarketSnapshot
from src.scoring.scoring_engine import SignalScoringEngine

START_MS = 1_768_651_200_000


class FakeClock:
    def now_ms(self) -> int:
        return START_MS


def make_gold_snapshot() -> MarketSnapshot:
    """XAUUSD snapshot scoring exactly 50 (partial trend 15 + confluence 35)."""
    return MarketSnapshot(
        symbol="XAUUSD",
        price=2000.0,
        rsi=50.0,
        ema_fast=2010.0,
        ema_slow=1900.0,
        tf_1h=TrendLabel.BULLISH,
        tf_4h=TrendLabel.BULLISH,
        tf_1d=TrendLabel.BULLISH,
    )


def make_resolved(n: int, outcome: Outcome) -> JournalEntry:
    return JournalEntry(
        id=f"2026-01-10-XAUUSD-{n:03d}",
        timestamp=START_MS - 7 * 24 * 3600 * 1000,
        symbol="XAUUSD",
        direction=Direction.BUY,
        entry_price=1950.0,
        confidence=60,
        outcome=outcome,
        verified_at=START_MS - 6 * 24 * 3600 * 1000,
        actual_price=1960.0,
    )


class TestSignalPipeline:
    """Tests for SignalPipeline.analyze."""

    @pytest.fixture
    def journal(self) -> SignalJournal:
        return SignalJournal(store=InMemoryJournalStore(), clock=FakeClock())

    @pytest.fixture
    def market_data(self) -> MagicMock:
        provider = MagicMock(spec=MarketDataProvider)
        provider.get_atr = AsyncMock(return_value=10.0)
        return provider

    @pytest.fixture
    def pipeline(self, journal: SignalJournal, market_data: MagicMock) -> SignalPipeline:
        return SignalPipeline(
            engine=SignalScoringEngine(),
            level_calculator=LevelCalculator(),
            journal=journal,
            market_data=market_data,
        )

    async def test_buy_signal_is_journaled_with_levels(
        self, pipeline: SignalPipeline, journal: SignalJournal, market_data: MagicMock
    ) -> None:
        result = await pipeline.analyze(make_gold_snapshot())

        assert result.signal.direction == Direction.BUY
        assert result.signal.confidence == 50
        assert result.journaled
        assert result.journal_id.endswith("-XAUUSD-001")
        market_data.get_atr.assert_awaited_once_with("XAUUSD")
        assert result.levels.atr_value == 10.0
        # safe haven stop buffer
        assert result.levels.stop_loss == pytest.approx(1988.0)

        pending = await journal.get_pending_signals()
        assert pending[0].entry_price == 2000.0
        assert pending[0].confidence == 50

    async def test_hold_is_not_journaled(
        self, pipeline: SignalPipeline, journal: SignalJournal, market_data: MagicMock
    ) -> None:
        result = await pipeline.analyze(MarketSnapshot(symbol="XAUUSD", price=2000.0))

        assert result.signal.direction == Direction.HOLD
        assert result.levels == TradeLevels.none()
        assert result.journal_id is None
        market_data.get_atr.assert_not_called()
        assert await journal.get_history() == []

    async def test_supplied_atr_skips_provider(
        self, pipeline: SignalPipeline, market_data: MagicMock
    ) -> None:
        result = await pipeline.analyze(make_gold_snapshot(), atr=5.0)

        assert result.levels.atr_value == 5.0
        market_data.get_atr.assert_not_called()

    async def test_history_boosts_confidence(self) -> None:
        store = InMemoryJournalStore(
            [make_resolved(n, Outcome.WIN) for n in range(1, 5)]
            + [make_resolved(n, Outcome.LOSS) for n in range(5, 7)]
        )
        journal = SignalJournal(store=store, clock=FakeClock())
        pipeline = SignalPipeline(SignalScoringEngine(), LevelCalculator(), journal=journal)

        result = await pipeline.analyze(make_gold_snapshot(), atr=10.0)

        assert result.signal.confidence == 55

    async def test_stats_failure_degrades_to_no_history(self) -> None:
        journal = MagicMock(spec=SignalJournal)
        journal.get_stats = AsyncMock(side_effect=JournalStorageError("corrupt"))
        journal.log_signal = AsyncMock(return_value="2026-01-17-XAUUSD-001")
        pipeline = SignalPipeline(SignalScoringEngine(), LevelCalculator(), journal=journal)

        result = await pipeline.analyze(make_gold_snapshot(), atr=10.0)

        assert result.signal.direction == Direction.BUY
        assert result.signal.confidence == 50
        assert result.signal.reinforcement_multiplier == 1.0
        journal.log_signal.assert_awaited_once()

    async def test_atr_failure_uses_fallback(
        self, pipeline: SignalPipeline, market_data: MagicMock
    ) -> None:
        market_data.get_atr = AsyncMock(side_effect=ConnectionError("no data"))

        result = await pipeline.analyze(make_gold_snapshot())

        assert result.levels.atr_value == pytest.approx(24.0)

    async def test_atr_timeout_uses_fallback(self, journal: SignalJournal) -> None:
        async def slow_atr(symbol: str) -> float:
            await asyncio.sleep(5)
            return 10.0

        provider = MagicMock(spec=MarketDataProvider)
        provider.get_atr = AsyncMock(side_effect=slow_atr)
        pipeline = SignalPipeline(
            SignalScoringEngine(),
            LevelCalculator(),
            journal=journal,
            market_data=provider,
            settings=PipelineSettings(atr_timeout_seconds=0.05),
        )

        result = await pipeline.analyze(make_gold_snapshot())

        assert result.levels.atr_value == pytest.approx(24.0)

    async def test_auto_log_disabled(self, journal: SignalJournal, market_data: MagicMock) -> None:
        pipeline = SignalPipeline(
            SignalScoringEngine(),
            LevelCalculator(),
            journal=journal,
            market_data=market_data,
            settings=PipelineSettings(auto_log=False),
        )

        result = await pipeline.analyze(make_gold_snapshot())

        assert result.journal_id is None
        assert await journal.get_history() == []

    async def test_journal_write_failure_propagates(self) -> None:
        journal = MagicMock(spec=SignalJournal)
        journal.get_stats = AsyncMock(return_value=None)
        journal.log_signal = AsyncMock(side_effect=JournalStorageError("read-only"))
        pipeline = SignalPipeline(SignalScoringEngine(), LevelCalculator(), journal=journal)

        with pytest.raises(JournalStorageError):
            await pipeline.analyze(make_gold_snapshot(), atr=10.0)

    async def test_to_dict(self, pipeline: SignalPipeline) -> None:
        result = await pipeline.analyze(make_gold_snapshot(), atr=10.0)

        data = result.to_dict()

        assert data["symbol"] == "XAUUSD"
        assert data["type"] == "BUY"
        assert data["confidence"] == 50
        assert data["breakdown"]["trend"] == 50
        assert data["levels"]["takeProfit"]["tp1"] == pytest.approx(2010.0)
        assert data["journalId"] == result.journal_id
