"""Settings for the market-data collaborator."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MarketDataSettings(BaseSettings):
    """Market-data provider configuration, overridable via MARKET_* env vars."""

    model_config = SettingsConfigDict(env_prefix="MARKET_")

    provider: str = "yfinance"
    atr_period: int = Field(default=14, ge=2, le=100)
    atr_interval: str = "1h"
    atr_lookback: str = "5d"
    atr_cache_minutes: int = Field(default=60, ge=0, le=24 * 60)
