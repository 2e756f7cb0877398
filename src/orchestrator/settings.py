"""Configuration for the signal pipeline."""

from pydantic import BaseModel, Field


class PipelineSettings(BaseModel):
    """Settings for SignalPipeline."""

    auto_log: bool = True
    atr_timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    use_history: bool = True
