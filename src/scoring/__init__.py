# src/scoring/__init__.py
"""Scoring module: multi-factor signal scoring with self-reinforcement."""

from .models import FactorBreakdown, MarketSnapshot, NewsSentiment, SignalResult
from .reinforcement import ReinforcementPolicy
from .scoring_engine import SignalScoringEngine
from .settings import ScoringSettings

__all__ = [
    "FactorBreakdown",
    "MarketSnapshot",
    "NewsSentiment",
    "ReinforcementPolicy",
    "ScoringSettings",
    "SignalResult",
    "SignalScoringEngine",
]
