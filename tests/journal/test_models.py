# tests/journal/test_models.py
"""Tests for journal data models."""
import pytest

from src.journal.models import JournalEntry, Outcome, SymbolStats
from src.models.market import Direction


class TestJournalEntry:
    """Tests for JournalEntry."""

    def test_resolve_returns_new_entry(self) -> None:
        entry = JournalEntry(
            id="2026-01-17-XAUUSD-001",
            timestamp=1000,
            symbol="XAUUSD",
            direction=Direction.BUY,
            entry_price=2650.0,
            confidence=80,
        )

        resolved = entry.resolve(Outcome.LOSS, 2000, 2640.0)

        assert entry.is_pending
        assert not resolved.is_pending
        assert resolved.outcome == Outcome.LOSS
        assert resolved.verified_at == 2000
        assert resolved.actual_price == 2640.0
        assert resolved.id == entry.id

    def test_from_dict_accepts_attribute_names(self) -> None:
        entry = JournalEntry.from_dict(
            {
                "id": "a",
                "timestamp": 5,
                "symbol": "EURUSD",
                "direction": "SELL",
                "entry_price": 1.08,
                "confidence": 55,
            }
        )

        assert entry.direction == Direction.SELL
        assert entry.entry_price == 1.08
        assert entry.outcome == Outcome.PENDING

    def test_to_dict_from_dict_preserves_entry(self) -> None:
        entry = JournalEntry(
            id="x",
            timestamp=1,
            symbol="BTCUSDT",
            direction=Direction.SELL,
            entry_price=98000.0,
            confidence=61,
            outcome=Outcome.WIN,
            verified_at=2,
            actual_price=97000.0,
        )

        assert JournalEntry.from_dict(entry.to_dict()) == entry

    def test_from_dict_rejects_unknown_direction(self) -> None:
        with pytest.raises(ValueError):
            JournalEntry.from_dict({"id": "x", "timestamp": 1, "symbol": "A", "type": "LONG", "price": 1})


class TestOutcome:
    def test_is_resolved(self) -> None:
        assert Outcome.WIN.is_resolved
        assert Outcome.LOSS.is_resolved
        assert not Outcome.PENDING.is_resolved


class TestSymbolStats:
    def test_empty(self) -> None:
        stats = SymbolStats.empty("XAUUSD")

        assert stats == SymbolStats(win_rate=0, total_trades=0, wins=0, losses=0, symbol="XAUUSD")
