"""Data models for the signal journal."""
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from src.models.market import Direction


class Outcome(str, Enum):
    """Lifecycle state of a journaled signal."""

    PENDING = "PENDING"
    WIN = "WIN"
    LOSS = "LOSS"

    @property
    def is_resolved(self) -> bool:
        """True once the outcome is terminal."""
        return self is not Outcome.PENDING


@dataclass(frozen=True)
class JournalEntry:
    """A single emitted signal and its eventual resolution.

    Attributes:
        id: Identifier in format YYYY-MM-DD-SYMBOL-NNN.
        timestamp: Creation instant in epoch milliseconds.
        symbol: Instrument symbol.
        direction: BUY or SELL.
        entry_price: Price at signal time.
        confidence: Confidence as emitted (0-100).
        outcome: PENDING until verified, then WIN or LOSS.
        verified_at: Resolution instant in epoch milliseconds.
        actual_price: Price observed at resolution.
    """

    id: str
    timestamp: int
    symbol: str
    direction: Direction
    entry_price: float
    confidence: int
    outcome: Outcome = Outcome.PENDING
    verified_at: int | None = None
    actual_price: float | None = None

    @property
    def is_pending(self) -> bool:
        """Check if the signal still awaits verification."""
        return self.outcome is Outcome.PENDING

    def resolve(self, outcome: Outcome, verified_at: int, actual_price: float) -> "JournalEntry":
        """Return a resolved copy of this entry."""
        return replace(
            self,
            outcome=outcome,
            verified_at=verified_at,
            actual_price=actual_price,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON layout of journal.json."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "symbol": self.symbol,
            "type": self.direction.value,
            "price": self.entry_price,
            "confidence": self.confidence,
            "outcome": self.outcome.value,
            "verifiedAt": self.verified_at,
            "actualPriceAtFullfillment": self.actual_price,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JournalEntry":
        """Build an entry from its JSON layout.

        Accepts both the journal.json keys (type, price,
        actualPriceAtFullfillment) and the attribute names.
        """
        direction = data.get("type", data.get("direction"))
        entry_price = data.get("price", data.get("entry_price"))
        actual_price = data.get("actualPriceAtFullfillment", data.get("actual_price"))
        verified_at = data.get("verifiedAt", data.get("verified_at"))

        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            symbol=data["symbol"],
            direction=Direction(direction),
            entry_price=float(entry_price),
            confidence=int(data.get("confidence", 0)),
            outcome=Outcome(data.get("outcome", Outcome.PENDING.value)),
            verified_at=int(verified_at) if verified_at is not None else None,
            actual_price=float(actual_price) if actual_price is not None else None,
        )


@dataclass(frozen=True)
class SymbolStats:
    """Win-rate statistics derived from resolved journal entries.

    Attributes:
        win_rate: Percentage of wins, rounded (0-100). 0 when no trades.
        total_trades: Resolved entries counted.
        wins: Entries resolved as WIN.
        losses: Entries resolved as LOSS.
        symbol: Scope of the stats, None for the whole journal.
    """

    win_rate: int
    total_trades: int
    wins: int
    losses: int
    symbol: str | None = None

    @classmethod
    def empty(cls, symbol: str | None = None) -> "SymbolStats":
        """Stats for a scope with no resolved trades."""
        return cls(win_rate=0, total_trades=0, wins=0, losses=0, symbol=symbol)


@dataclass(frozen=True)
class DailySummary:
    """Signal activity for one calendar day."""

    day: date
    total_signals: int
    wins: int
    losses: int
    pending: int
    entries: tuple[JournalEntry, ...]

    @property
    def win_rate(self) -> float:
        """Win rate over resolved signals of the day (0.0 to 1.0)."""
        resolved = self.wins + self.losses
        return self.wins / resolved if resolved > 0 else 0.0
