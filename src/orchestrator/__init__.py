"""Orchestrator module wiring scoring, levels and the journal together."""

from .models import AnalysisResult
from .settings import PipelineSettings
from .signal_pipeline import SignalPipeline

__all__ = [
    "AnalysisResult",
    "PipelineSettings",
    "SignalPipeline",
]
