#!/usr/bin/env python3
"""
Accuracy report for the signal journal.

Prints the global win rate, the per-symbol breakdown and today's activity
from the JSON journal file.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.journal import JsonFileJournalStore, SignalJournal, SymbolStats


def format_stats(label: str, stats: SymbolStats) -> str:
    """Format one stats row."""
    return (
        f"{label:<12} {stats.win_rate:>3}%  "
        f"{stats.wins:>4} W  {stats.losses:>4} L  ({stats.total_trades} trades)"
    )


async def build_report(journal: SignalJournal) -> list[str]:
    """Build the report lines for a journal."""
    lines = ["--- Global accuracy ---"]
    lines.append(format_stats("ALL", await journal.get_all_stats()))

    breakdown = await journal.get_symbol_breakdown()
    lines.append("\n--- Per symbol ---")
    if not breakdown:
        lines.append("No signals journaled yet")
    for symbol, stats in breakdown.items():
        lines.append(format_stats(symbol, stats))

    summary = await journal.get_daily_summary()
    lines.append(f"\n--- Today ({summary.day.isoformat()}) ---")
    lines.append(
        f"{summary.total_signals} signals: {summary.wins} wins, "
        f"{summary.losses} losses, {summary.pending} pending "
        f"(win rate {summary.win_rate:.0%})"
    )
    return lines


async def main():
    """Main entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Signal journal accuracy report")
    parser.add_argument("--file", default="data/journal.json", help="Journal JSON file")
    args = parser.parse_args()

    path = Path(args.file)
    if not path.exists():
        print(f"❌ Journal file not found: {path}")
        sys.exit(1)

    journal = SignalJournal(store=JsonFileJournalStore(path))
    try:
        for line in await build_report(journal):
            print(line)
    except Exception as e:
        print(f"❌ Error reading journal: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
