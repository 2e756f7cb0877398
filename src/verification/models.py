"""Data models for outcome verification."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class VerifierState(Enum):
    """State of the outcome verifier."""

    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"


@dataclass
class VerificationReport:
    """Counts for one verification pass.

    checked: pending entries considered in the pass snapshot
    skipped: entries younger than the dwell time, or whose update the
        journal declined
    failed: entries whose price could not be obtained or written
    """

    checked: int = 0
    resolved: int = 0
    wins: int = 0
    losses: int = 0
    skipped: int = 0
    failed: int = 0
    started_at: datetime = field(default_factory=datetime.now)
