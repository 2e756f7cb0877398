"""Pipeline from market snapshot to journaled signal with trade levels."""

import asyncio
import logging

from src.journal.errors import JournalStorageError
from src.journal.models import SymbolStats
from src.journal.signal_journal import SignalJournal
from src.levels.level_calculator import LevelCalculator
from src.levels.models import TradeLevels
from src.market.base import MarketDataProvider
from src.orchestrator.models import AnalysisResult
from src.orchestrator.settings import PipelineSettings
from src.scoring.models import MarketSnapshot
from src.scoring.scoring_engine import SignalScoringEngine

logger = logging.getLogger(__name__)


class SignalPipeline:
    """Coordinates one analysis request.

    Flow:
    1. Read the symbol's journal stats (storage faults degrade to no history)
    2. Score the snapshot
    3. Derive entry, stop and targets for the direction
    4. Journal BUY/SELL signals
    """

    def __init__(
        self,
        engine: SignalScoringEngine,
        level_calculator: LevelCalculator,
        journal: SignalJournal | None = None,
        market_data: MarketDataProvider | None = None,
        settings: PipelineSettings | None = None,
    ):
        self._engine = engine
        self._levels = level_calculator
        self._journal = journal
        self._market_data = market_data
        self._settings = settings or PipelineSettings()

    async def analyze(
        self,
        snapshot: MarketSnapshot,
        correlation: float | None = None,
        atr: float | None = None,
    ) -> AnalysisResult:
        """Analyze a snapshot end to end.

        Args:
            snapshot: Market state for the symbol.
            correlation: Benchmark correlation, if already known.
            atr: Volatility basis for levels, fetched or approximated when None.

        Returns:
            AnalysisResult with the signal, its levels and the journal ID.

        Raises:
            JournalStorageError: If the journal cannot record a BUY/SELL signal.
        """
        stats = await self._load_stats(snapshot.symbol)
        signal = self._engine.evaluate(snapshot, correlation=correlation, historical_stats=stats)

        levels = TradeLevels.none()
        if signal.direction.is_directional:
            if atr is None:
                atr = await self._fetch_atr(snapshot.symbol)
            levels = self._levels.adjusted_levels(
                snapshot.price,
                signal.direction,
                atr=atr,
                symbol=snapshot.symbol,
                rsi=snapshot.rsi,
                news_strength=snapshot.news.strength if snapshot.news else None,
            )

        journal_id = None
        if self._journal is not None and self._settings.auto_log and signal.direction.is_directional:
            journal_id = await self._journal.log_signal(
                snapshot.symbol,
                signal.direction,
                snapshot.price,
                signal.confidence,
            )

        logger.info(
            f"{snapshot.symbol}: {signal.direction.value} confidence={signal.confidence}"
            + (f" journaled as {journal_id}" if journal_id else "")
        )
        return AnalysisResult(signal=signal, levels=levels, journal_id=journal_id)

    async def _load_stats(self, symbol: str) -> SymbolStats | None:
        """Read historical stats, treating storage faults as no history."""
        if self._journal is None or not self._settings.use_history:
            return None
        try:
            return await self._journal.get_stats(symbol)
        except JournalStorageError as e:
            logger.warning(f"Journal stats unavailable for {symbol}, scoring without history: {e}")
            return None

    async def _fetch_atr(self, symbol: str) -> float | None:
        """Fetch ATR from the provider, None on failure or timeout."""
        if self._market_data is None:
            return None
        try:
            return await asyncio.wait_for(
                self._market_data.get_atr(symbol),
                timeout=self._settings.atr_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"ATR fetch for {symbol} timed out, using fallback volatility")
        except Exception as e:
            logger.warning(f"ATR fetch for {symbol} failed, using fallback volatility: {e}")
        return None
