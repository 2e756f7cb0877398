"""Calculator for signal win-rate statistics."""
from collections import defaultdict
from datetime import date

from src.journal.clock import local_date
from src.journal.models import DailySummary, JournalEntry, Outcome, SymbolStats
from src.models.market import round_half_up


class StatsCalculator:
    """Projects journal entries onto win-rate statistics.

    Stats are always recomputed from the full entry list; nothing is
    maintained incrementally.
    """

    def calculate(
        self,
        entries: list[JournalEntry],
        symbol: str | None = None,
    ) -> SymbolStats:
        """Calculate stats over resolved entries.

        Args:
            entries: Journal entries to analyze.
            symbol: Restrict to this symbol, None for all entries.

        Returns:
            SymbolStats; PENDING entries are excluded from every count.
        """
        if symbol is not None:
            entries = [e for e in entries if e.symbol == symbol]

        wins = sum(1 for e in entries if e.outcome is Outcome.WIN)
        losses = sum(1 for e in entries if e.outcome is Outcome.LOSS)
        total_trades = wins + losses

        win_rate = round_half_up(100 * wins / total_trades) if total_trades > 0 else 0

        return SymbolStats(
            win_rate=win_rate,
            total_trades=total_trades,
            wins=wins,
            losses=losses,
            symbol=symbol,
        )

    def breakdown(self, entries: list[JournalEntry]) -> dict[str, SymbolStats]:
        """Calculate stats for every symbol present in the journal.

        Args:
            entries: Journal entries to analyze.

        Returns:
            Mapping of symbol to SymbolStats, sorted by symbol.
        """
        by_symbol: dict[str, list[JournalEntry]] = defaultdict(list)
        for entry in entries:
            by_symbol[entry.symbol].append(entry)

        return {
            symbol: self.calculate(by_symbol[symbol], symbol=symbol)
            for symbol in sorted(by_symbol)
        }

    def daily_summary(self, entries: list[JournalEntry], day: date) -> DailySummary:
        """Summarize signals created on one calendar day.

        Args:
            entries: Journal entries to analyze.
            day: Local calendar date to summarize.

        Returns:
            DailySummary with wins, losses and pending counts.
        """
        todays = tuple(e for e in entries if local_date(e.timestamp) == day)

        return DailySummary(
            day=day,
            total_signals=len(todays),
            wins=sum(1 for e in todays if e.outcome is Outcome.WIN),
            losses=sum(1 for e in todays if e.outcome is Outcome.LOSS),
            pending=sum(1 for e in todays if e.outcome is Outcome.PENDING),
            entries=todays,
        )
