"""Time source for journal timestamps and dwell-time checks."""
import time
from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current instant in epoch milliseconds."""

    def now_ms(self) -> int:
        ...


class SystemClock:
    """Wall-clock time."""

    def now_ms(self) -> int:
        """Current time in epoch milliseconds."""
        return int(time.time() * 1000)


def local_date(timestamp_ms: int) -> date:
    """Calendar date (local time) of an epoch-millisecond instant."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()
