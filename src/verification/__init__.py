"""Verification module resolving pending signals against live prices."""

from .models import VerificationReport, VerifierState
from .outcome_verifier import OutcomeVerifier
from .settings import VerifierSettings

__all__ = [
    "OutcomeVerifier",
    "VerificationReport",
    "VerifierSettings",
    "VerifierState",
]
