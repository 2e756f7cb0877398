"""Market-data collaborator (prices and volatility)."""

from .base import MarketDataProvider, PriceUnavailableError
from .settings import MarketDataSettings
from .yfinance_provider import YFinanceMarketData

__all__ = [
    "MarketDataProvider",
    "MarketDataSettings",
    "PriceUnavailableError",
    "YFinanceMarketData",
]
