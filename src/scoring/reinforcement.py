"""Confidence reinforcement from journaled signal outcomes."""
from src.journal.models import SymbolStats


class ReinforcementPolicy:
    """Scales confidence by the historical win rate of a symbol.

    Multiplier Logic:
    - fewer than min_trades resolved signals -> 1.0 (insufficient data)
    - win rate > high_win_rate -> boost (default 1.1)
    - win rate < low_win_rate -> penalty (default 0.8)
    - otherwise -> 1.0

    This is the only place historical outcomes feed back into scoring; the
    multiplier touches confidence, never direction.
    """

    def __init__(
        self,
        min_trades: int = 5,
        high_win_rate: float = 65.0,
        low_win_rate: float = 45.0,
        boost: float = 1.1,
        penalty: float = 0.8,
    ):
        """Initialize the policy.

        Args:
            min_trades: Resolved trades required before adjusting.
            high_win_rate: Win rate (percent) above which confidence is boosted.
            low_win_rate: Win rate (percent) below which confidence is reduced.
            boost: Multiplier for high win rates.
            penalty: Multiplier for low win rates.
        """
        self._min_trades = min_trades
        self._high_win_rate = high_win_rate
        self._low_win_rate = low_win_rate
        self._boost = boost
        self._penalty = penalty

    def multiplier(self, stats: SymbolStats | None) -> float:
        """Get the confidence multiplier for the given history.

        Args:
            stats: Resolved-trade statistics, or None when unavailable.

        Returns:
            Multiplier applied to the confidence magnitude.
        """
        if stats is None or stats.total_trades < self._min_trades:
            return 1.0

        if stats.win_rate > self._high_win_rate:
            return self._boost
        elif stats.win_rate < self._low_win_rate:
            return self._penalty
        else:
            return 1.0

    def describe(self, stats: SymbolStats | None) -> str | None:
        """Reason string for a non-neutral multiplier, None otherwise."""
        multiplier = self.multiplier(stats)
        if multiplier == 1.0 or stats is None:
            return None
        return (
            f"Historical win rate {stats.win_rate}% over {stats.total_trades} trades: "
            f"confidence x{multiplier:.1f}"
        )
