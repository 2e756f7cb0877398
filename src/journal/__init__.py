"""Journal module for emitted signals and their outcomes."""

from .clock import Clock, SystemClock
from .errors import InvalidSignalDirectionError, JournalStorageError
from .models import DailySummary, JournalEntry, Outcome, SymbolStats
from .settings import JournalSettings
from .signal_journal import SignalJournal
from .stats_calculator import StatsCalculator
from .store import InMemoryJournalStore, JournalStore, JsonFileJournalStore

__all__ = [
    "Clock",
    "DailySummary",
    "InMemoryJournalStore",
    "InvalidSignalDirectionError",
    "JournalEntry",
    "JournalSettings",
    "JournalStorageError",
    "JournalStore",
    "JsonFileJournalStore",
    "Outcome",
    "SignalJournal",
    "StatsCalculator",
    "SymbolStats",
    "SystemClock",
]
