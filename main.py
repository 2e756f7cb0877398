# main.py
"""Main entry point for the signal desk outcome verifier service."""
import asyncio
import signal
import sys
import logging
from pathlib import Path

from dotenv import load_dotenv

from src.config.settings import Settings
from src.journal import JsonFileJournalStore, SignalJournal, SystemClock
from src.market import MarketDataProvider, YFinanceMarketData
from src.verification import OutcomeVerifier


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def create_data_dirs(settings: Settings) -> None:
    """Create required data directories if they don't exist."""
    dirs = [
        Path(settings.system.data_dir),
        Path(settings.journal.data_file).parent,
    ]

    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)

    logger.info("Data directories verified")


def print_startup_banner(settings: Settings) -> None:
    """Print system startup banner."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name}")
    logger.info(f"Version: {settings.system.version}")
    logger.info(f"Journal: {settings.journal.data_file}")
    logger.info("=" * 60)


def load_and_validate_config(config_path: Path = Path("config/settings.yaml")) -> Settings:
    """Load and validate configuration.

    Args:
        config_path: YAML settings file.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If config file missing or YAML parsing fails.
    """
    # Load environment variables
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.system.log_level.upper())
    create_data_dirs(settings)

    return settings


def create_market_data(settings: Settings) -> MarketDataProvider:
    """Create the configured market-data provider.

    Raises:
        SystemExit: If the provider name is unknown.
    """
    if settings.market.provider != "yfinance":
        logger.error(f"Unknown market data provider: {settings.market.provider}")
        sys.exit(1)

    provider = YFinanceMarketData(
        atr_period=settings.market.atr_period,
        atr_interval=settings.market.atr_interval,
        atr_lookback=settings.market.atr_lookback,
        atr_cache_minutes=settings.market.atr_cache_minutes,
    )
    logger.info("✓ Market data provider initialized (yfinance)")
    return provider


def initialize_components(settings: Settings, market_data: MarketDataProvider) -> dict:
    """Build journal and verifier from settings.

    Args:
        settings: Loaded settings object.
        market_data: Price and ATR source.

    Returns:
        Dict with: journal, verifier.
    """
    clock = SystemClock()

    store = JsonFileJournalStore(Path(settings.journal.data_file))
    journal = SignalJournal(
        store=store,
        clock=clock,
        min_dwell_minutes=settings.journal.min_dwell_minutes,
        history_limit=settings.journal.history_limit,
    )
    logger.info("✓ SignalJournal initialized")

    verifier = OutcomeVerifier(
        journal=journal,
        market_data=market_data,
        clock=clock,
        settings=settings.verifier,
    )
    logger.info("✓ OutcomeVerifier initialized")

    return {
        "journal": journal,
        "verifier": verifier,
    }


async def run(settings: Settings) -> None:
    """Run the verifier until SIGINT/SIGTERM, then stop gracefully."""
    market_data = create_market_data(settings)
    components = initialize_components(settings, market_data)
    verifier: OutcomeVerifier = components["verifier"]

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handler support
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop_event.set))

    if settings.verifier.enabled:
        await verifier.start()
    else:
        logger.warning("Outcome verifier disabled in settings")

    logger.info("System running, press Ctrl+C to stop")
    await stop_event.wait()

    logger.info("Shutdown requested")
    await verifier.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.remove_signal_handler(sig)
        except NotImplementedError:
            signal.signal(sig, signal.SIG_DFL)

    stats = await components["journal"].get_all_stats()
    logger.info(
        f"Journal accuracy: {stats.win_rate}% "
        f"({stats.wins} wins / {stats.losses} losses)"
    )


def main() -> None:
    settings = load_and_validate_config()
    print_startup_banner(settings)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
