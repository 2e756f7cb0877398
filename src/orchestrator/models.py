"""Data models for the signal pipeline."""

from dataclasses import dataclass, field
from datetime import datetime

from src.levels.models import TradeLevels
from src.scoring.models import SignalResult


@dataclass
class AnalysisResult:
    """Result of analyzing one snapshot through the pipeline."""

    signal: SignalResult
    levels: TradeLevels
    journal_id: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def journaled(self) -> bool:
        """True if the signal was written to the journal."""
        return self.journal_id is not None

    def to_dict(self) -> dict:
        """Serialize for API responses and logs."""
        return {
            "symbol": self.signal.symbol,
            "type": self.signal.direction.value,
            "confidence": self.signal.confidence,
            "breakdown": {
                "trend": self.signal.breakdown.trend,
                "correlation": self.signal.breakdown.correlation,
                "momentum": self.signal.breakdown.momentum,
                "volatility": self.signal.breakdown.volatility,
                "news": self.signal.breakdown.news,
            },
            "reasons": list(self.signal.reasons),
            "levels": self.levels.to_dict(),
            "journalId": self.journal_id,
        }
