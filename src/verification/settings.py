"""Configuration for the outcome verifier."""

from pydantic import BaseModel, Field


class VerifierSettings(BaseModel):
    """Settings for OutcomeVerifier."""

    enabled: bool = True
    interval_seconds: int = Field(default=1800, ge=1)
    fetch_timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    run_on_start: bool = True
