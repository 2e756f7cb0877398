"""Append-only journal of emitted signals and their outcomes."""
import asyncio
import logging
import re
from datetime import date

from src.journal.clock import Clock, SystemClock, local_date
from src.journal.errors import InvalidSignalDirectionError
from src.journal.models import DailySummary, JournalEntry, Outcome, SymbolStats
from src.journal.stats_calculator import StatsCalculator
from src.journal.store import JournalStore
from src.models.market import Direction

logger = logging.getLogger(__name__)


class SignalJournal:
    """Persists BUY/SELL signals and resolves them exactly once.

    Lifecycle: PENDING -> WIN | LOSS. A resolved entry is never touched
    again, and no entry is ever deleted. Statistics are read projections
    over the full log.

    Entry IDs follow format: YYYY-MM-DD-SYMBOL-NNN

    Storage faults (JournalStorageError) propagate to the caller.
    """

    def __init__(
        self,
        store: JournalStore,
        clock: Clock | None = None,
        min_dwell_minutes: int = 15,
        stats_calculator: StatsCalculator | None = None,
        history_limit: int = 50,
    ) -> None:
        """Initialize the journal.

        Args:
            store: Backing record store.
            clock: Time source for timestamps and dwell checks.
            min_dwell_minutes: Minimum signal age before resolution.
            stats_calculator: Projection used for statistics.
            history_limit: Default number of entries returned by get_history.
        """
        self._store = store
        self._clock = clock or SystemClock()
        self._min_dwell_ms = min_dwell_minutes * 60 * 1000
        self._stats = stats_calculator or StatsCalculator()
        self._history_limit = history_limit
        self._log_lock = asyncio.Lock()

    @property
    def min_dwell_ms(self) -> int:
        """Minimum age in milliseconds before an entry may be resolved."""
        return self._min_dwell_ms

    async def log_signal(
        self,
        symbol: str,
        direction: Direction | str,
        entry_price: float,
        confidence: int,
    ) -> str:
        """Append a PENDING entry for an emitted signal.

        Args:
            symbol: Instrument symbol.
            direction: BUY or SELL.
            entry_price: Price at signal time.
            confidence: Confidence as emitted (0-100).

        Returns:
            The generated entry ID.

        Raises:
            InvalidSignalDirectionError: If direction is HOLD or unknown.
            ValueError: If entry_price is not positive.
            JournalStorageError: If the store is unavailable.
        """
        direction = self._check_direction(direction)
        if entry_price <= 0:
            raise ValueError(f"entry_price must be positive, got {entry_price}")

        async with self._log_lock:
            timestamp = self._clock.now_ms()
            existing = await self._store.read_all()
            entry_id = self._generate_id(timestamp, symbol, existing)

            entry = JournalEntry(
                id=entry_id,
                timestamp=timestamp,
                symbol=symbol,
                direction=direction,
                entry_price=entry_price,
                confidence=max(0, min(100, int(confidence))),
            )
            await self._store.append(entry)

        logger.info(
            f"Logged signal {entry_id}: {symbol} {direction.value} @ {entry_price} "
            f"(confidence {entry.confidence})"
        )
        return entry_id

    async def get_pending_signals(self) -> list[JournalEntry]:
        """Get all PENDING entries in creation order."""
        entries = await self._store.read_all()
        return [e for e in entries if e.is_pending]

    async def update_log(
        self,
        entry_id: str,
        outcome: Outcome | str,
        verified_at: int,
        actual_price: float,
    ) -> bool:
        """Resolve a PENDING entry.

        Unknown IDs, already-resolved entries and entries younger than the
        dwell time are left untouched, so repeated verification of the
        same entry is harmless.

        Args:
            entry_id: ID of the entry to resolve.
            outcome: WIN or LOSS.
            verified_at: Resolution instant in epoch milliseconds.
            actual_price: Price observed at resolution.

        Returns:
            True if the entry was resolved by this call.

        Raises:
            ValueError: If outcome is PENDING or unknown.
            JournalStorageError: If the store is unavailable.
        """
        outcome = Outcome(outcome)
        if not outcome.is_resolved:
            raise ValueError("update_log requires a terminal outcome (WIN or LOSS)")

        def resolve(entry: JournalEntry) -> JournalEntry | None:
            if not entry.is_pending:
                logger.debug(f"Entry {entry_id} already resolved as {entry.outcome.value}")
                return None
            if verified_at - entry.timestamp < self._min_dwell_ms:
                logger.warning(f"Entry {entry_id} resolved before dwell time elapsed, ignoring")
                return None
            return entry.resolve(outcome, verified_at, actual_price)

        updated = await self._store.update(entry_id, resolve)
        if updated is None:
            return False

        logger.info(
            f"Resolved {entry_id}: {updated.symbol} {updated.direction.value} {outcome.value} "
            f"(entry {updated.entry_price}, actual {actual_price})"
        )
        return True

    async def get_stats(self, symbol: str) -> SymbolStats:
        """Get win-rate stats for one symbol."""
        entries = await self._store.read_all()
        return self._stats.calculate(entries, symbol=symbol)

    async def get_all_stats(self) -> SymbolStats:
        """Get win-rate stats across the whole journal."""
        entries = await self._store.read_all()
        return self._stats.calculate(entries)

    async def get_history(self, limit: int | None = None) -> list[JournalEntry]:
        """Get the most recent entries, newest first.

        Args:
            limit: Maximum number of entries to return, history_limit when None.

        Returns:
            Up to limit entries, empty when limit is not positive.
        """
        if limit is None:
            limit = self._history_limit
        if limit <= 0:
            return []
        entries = await self._store.read_all()
        return list(reversed(entries[-limit:]))

    async def get_daily_summary(self, day: date | None = None) -> DailySummary:
        """Get wins, losses and pending signals for one day.

        Args:
            day: Local calendar date, today when None.

        Returns:
            DailySummary for that day.
        """
        if day is None:
            day = local_date(self._clock.now_ms())
        entries = await self._store.read_all()
        return self._stats.daily_summary(entries, day)

    async def get_symbol_breakdown(self) -> dict[str, SymbolStats]:
        """Get stats for every journaled symbol."""
        entries = await self._store.read_all()
        return self._stats.breakdown(entries)

    def _check_direction(self, direction: Direction | str) -> Direction:
        try:
            direction = Direction(direction)
        except ValueError as e:
            raise InvalidSignalDirectionError(f"Unknown signal direction: {direction!r}") from e

        if not direction.is_directional:
            raise InvalidSignalDirectionError("HOLD signals are never journaled")
        return direction

    def _generate_id(self, timestamp: int, symbol: str, existing: list[JournalEntry]) -> str:
        """Generate an ID in format YYYY-MM-DD-SYMBOL-NNN."""
        clean_symbol = re.sub(r"[^A-Z0-9]", "", symbol.upper()) or "UNKNOWN"
        prefix = f"{local_date(timestamp).isoformat()}-{clean_symbol}-"
        sequence = sum(1 for e in existing if e.id.startswith(prefix)) + 1
        return f"{prefix}{sequence:03d}"
