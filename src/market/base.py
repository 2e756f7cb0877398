"""Market-data collaborator interface."""
from abc import ABC, abstractmethod


class PriceUnavailableError(Exception):
    """No usable price could be obtained for a symbol."""


class MarketDataProvider(ABC):
    """Abstract source of live prices and volatility.

    Implementations return None when data is unavailable and may raise on
    transport failures; callers apply their own timeouts.
    """

    def __init__(self, name: str):
        """Initialize the provider.

        Args:
            name: Identifier for this provider.
        """
        self.name = name

    @abstractmethod
    async def get_price(self, symbol: str) -> float | None:
        """Fetch the latest price for a symbol.

        Returns:
            Latest price, or None if unavailable.
        """
        pass

    async def get_atr(self, symbol: str) -> float | None:
        """Fetch the current ATR for a symbol.

        Returns:
            ATR value, or None if the provider has no volatility data.
        """
        return None
