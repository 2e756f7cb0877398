# src/config/settings.py
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from src.journal.settings import JournalSettings
from src.levels.settings import LevelSettings
from src.market.settings import MarketDataSettings
from src.orchestrator.settings import PipelineSettings
from src.scoring.settings import ScoringSettings
from src.verification.settings import VerifierSettings


class SystemConfig(BaseModel):
    name: str = "Signal Desk"
    version: str = "1.0.0"
    data_dir: str = "data"
    log_level: str = "INFO"


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    levels: LevelSettings = Field(default_factory=LevelSettings)
    journal: JournalSettings = Field(default_factory=JournalSettings)
    verifier: VerifierSettings = Field(default_factory=VerifierSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    market: MarketDataSettings = Field(default_factory=MarketDataSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # MARKET_* environment variables fill in what the file leaves out
        market = MarketDataSettings(**(data.pop("market", None) or {}))

        return cls(
            **data,
            market=market,
        )
