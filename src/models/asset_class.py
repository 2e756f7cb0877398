# src/models/asset_class.py
"""Symbol classification used by the macro factor and the ATR fallback."""
from enum import Enum

from src.models.market import RiskRegime


# Substrings matched against the upper-cased symbol, checked in order.
SAFE_HAVEN_MARKERS = ("XAU", "GOLD", "XAG", "SILVER", "USDJPY", "USDCHF", "TLT")
CRYPTO_MARKERS = ("BTC", "ETH", "SOL", "XRP", "DOGE", "CRYPTO")
INDEX_MARKERS = ("SPX", "SPY", "NAS100", "NDX", "QQQ", "US30", "DJI", "GER40", "DAX")
FOREX_MARKERS = ("EUR", "GBP", "JPY", "AUD", "NZD", "CAD", "CHF", "USD")


class AssetClass(str, Enum):
    """Coarse asset class of a tradable symbol."""

    SAFE_HAVEN = "safe_haven"
    CRYPTO = "crypto"
    INDEX = "index"
    FOREX = "forex"
    UNKNOWN = "unknown"

    @classmethod
    def from_symbol(cls, symbol: str | None) -> "AssetClass":
        """Classify a symbol such as "XAUUSD", "BTCUSDT" or "EURUSD".

        Args:
            symbol: Instrument symbol, any case. Exchange prefixes
                ("OANDA:XAUUSD") and suffixes (".FX") are ignored.

        Returns:
            Matching AssetClass, UNKNOWN when nothing matches.
        """
        if not symbol:
            return cls.UNKNOWN

        clean = symbol.upper().strip()
        if ":" in clean:
            clean = clean.split(":")[-1]
        clean = clean.split(".")[0]

        if any(marker in clean for marker in SAFE_HAVEN_MARKERS):
            return cls.SAFE_HAVEN
        if any(marker in clean for marker in CRYPTO_MARKERS):
            return cls.CRYPTO
        if any(marker in clean for marker in INDEX_MARKERS):
            return cls.INDEX
        if any(marker in clean for marker in FOREX_MARKERS):
            return cls.FOREX
        return cls.UNKNOWN

    @property
    def favored_regime(self) -> RiskRegime:
        """Regime under which this asset class is expected to rise.

        Risk assets (crypto, equity indices) favor Risk-On; safe havens
        favor Risk-Off. Forex and unknown symbols have no preference.
        """
        if self is AssetClass.SAFE_HAVEN:
            return RiskRegime.RISK_OFF
        if self in (AssetClass.CRYPTO, AssetClass.INDEX):
            return RiskRegime.RISK_ON
        return RiskRegime.NEUTRAL

    @property
    def fallback_atr_percent(self) -> float:
        """ATR approximation as a fraction of price when no real ATR exists."""
        if self is AssetClass.SAFE_HAVEN:
            return 0.012
        if self is AssetClass.CRYPTO:
            return 0.02
        if self is AssetClass.FOREX:
            return 0.005
        return 0.01
