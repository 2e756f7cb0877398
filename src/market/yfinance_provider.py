"""Market data from Yahoo Finance via yfinance."""
import asyncio
import logging
import time

import pandas as pd
import yfinance as yf

from src.market.base import MarketDataProvider

logger = logging.getLogger(__name__)


class YFinanceMarketData(MarketDataProvider):
    """Fetches prices and ATR using yfinance.

    yfinance is blocking, so every call runs in a worker thread. ATR values
    are cached per symbol for atr_cache_minutes.
    """

    # Known aliases for spot symbols that Yahoo lists differently
    SYMBOL_ALIASES = {
        "XAUUSD": "GC=F",
        "GOLD": "GC=F",
        "XAGUSD": "SI=F",
        "SPX500": "^GSPC",
        "SPX": "^GSPC",
        "NAS100": "^NDX",
        "US30": "^DJI",
        "DXY": "DX-Y.NYB",
    }

    def __init__(
        self,
        atr_period: int = 14,
        atr_interval: str = "1h",
        atr_lookback: str = "5d",
        atr_cache_minutes: int = 60,
    ):
        """Initialize the provider.

        Args:
            atr_period: ATR smoothing period.
            atr_interval: Bar interval used for ATR.
            atr_lookback: History period requested for ATR bars.
            atr_cache_minutes: Minutes an ATR value stays cached.
        """
        super().__init__("yfinance")
        self._atr_period = atr_period
        self._atr_interval = atr_interval
        self._atr_lookback = atr_lookback
        self._atr_cache_seconds = atr_cache_minutes * 60
        self._atr_cache: dict[str, tuple[float, float]] = {}

    @classmethod
    def to_yahoo_symbol(cls, symbol: str) -> str:
        """Map a trading symbol to its Yahoo Finance ticker.

        Examples:
            XAUUSD -> GC=F, EURUSD -> EURUSD=X, BTCUSDT -> BTC-USD,
            OANDA:EURUSD -> EURUSD=X, AAPL -> AAPL
        """
        clean = symbol.upper().strip()
        if ":" in clean:
            clean = clean.split(":")[-1]
        clean = clean.replace("/", "")

        if clean in cls.SYMBOL_ALIASES:
            return cls.SYMBOL_ALIASES[clean]

        if clean.endswith("USDT"):
            return f"{clean[:-4]}-USD"

        if clean.startswith(("BTC", "ETH", "SOL", "XRP", "DOGE")) and clean.endswith("USD"):
            return f"{clean[:-3]}-USD"

        if len(clean) == 6 and clean.isalpha():
            return f"{clean}=X"

        return clean

    async def get_price(self, symbol: str) -> float | None:
        """Fetch the latest price for a symbol.

        Args:
            symbol: Trading symbol.

        Returns:
            Latest price, or None if Yahoo has no price.
        """
        ticker = self.to_yahoo_symbol(symbol)
        return await asyncio.to_thread(self._fetch_price, ticker)

    async def get_atr(self, symbol: str) -> float | None:
        """Fetch ATR for a symbol, using the cache when fresh.

        Args:
            symbol: Trading symbol.

        Returns:
            Latest ATR, or None if bars are unavailable.
        """
        ticker = self.to_yahoo_symbol(symbol)

        cached = self._atr_cache.get(ticker)
        if cached and time.monotonic() - cached[1] < self._atr_cache_seconds:
            logger.debug(f"Using cached ATR for {ticker}: {cached[0]}")
            return cached[0]

        try:
            bars = await asyncio.to_thread(self._fetch_bars, ticker)
        except Exception as e:
            logger.error(f"ATR fetch failed for {ticker}: {e}")
            return None

        atr = self.calculate_atr(bars, self._atr_period)
        if atr is not None:
            self._atr_cache[ticker] = (atr, time.monotonic())
            logger.info(f"ATR({self._atr_period}) for {ticker}: {atr:.5f}")
        return atr

    @staticmethod
    def calculate_atr(bars: pd.DataFrame, period: int = 14) -> float | None:
        """Calculate the latest Average True Range with Wilder smoothing.

        Args:
            bars: DataFrame with High, Low and Close columns.
            period: Smoothing period.

        Returns:
            Latest ATR, or None if there are not enough bars.
        """
        if bars is None or bars.empty or len(bars) < period + 1:
            return None

        high = bars["High"]
        low = bars["Low"]
        prev_close = bars["Close"].shift(1)

        true_range = pd.concat(
            [high - low, (high - prev_close).abs(), (low - prev_close).abs()],
            axis=1,
        ).max(axis=1)

        atr_series = true_range.ewm(alpha=1.0 / period, adjust=False).mean()
        last_atr = atr_series.iloc[-1]

        if pd.isna(last_atr) or last_atr <= 0:
            return None
        return float(last_atr)

    def _fetch_price(self, ticker: str) -> float | None:
        info = yf.Ticker(ticker).info
        price = info.get("regularMarketPrice") or info.get("previousClose")
        return float(price) if price is not None else None

    def _fetch_bars(self, ticker: str) -> pd.DataFrame:
        return yf.Ticker(ticker).history(
            period=self._atr_lookback,
            interval=self._atr_interval,
        )
