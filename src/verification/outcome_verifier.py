"""Periodic verification of pending journal entries."""

import asyncio
import logging

from src.journal.clock import Clock, SystemClock
from src.journal.models import JournalEntry, Outcome
from src.journal.signal_journal import SignalJournal
from src.market.base import MarketDataProvider, PriceUnavailableError
from src.models.market import Direction
from src.verification.models import VerificationReport, VerifierState
from src.verification.settings import VerifierSettings

logger = logging.getLogger(__name__)


class OutcomeVerifier:
    """Resolves PENDING signals as WIN or LOSS from the current price.

    A BUY wins if the price is above entry, a SELL wins if the price is
    below entry. Entries younger than the dwell time are skipped. A failed
    fetch only affects its own entry, which stays PENDING for the next pass.
    """

    def __init__(
        self,
        journal: SignalJournal,
        market_data: MarketDataProvider,
        clock: Clock | None = None,
        settings: VerifierSettings | None = None,
    ):
        self._journal = journal
        self._market_data = market_data
        self._clock = clock or SystemClock()
        self._settings = settings or VerifierSettings()

        self._state = VerifierState.STOPPED
        self._task: asyncio.Task | None = None
        self._wake = asyncio.Event()
        self._last_report: VerificationReport | None = None

    @property
    def state(self) -> VerifierState:
        """Return the current verifier state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Return True if the verifier is in RUNNING state."""
        return self._state == VerifierState.RUNNING

    @property
    def last_report(self) -> VerificationReport | None:
        """Report of the most recent completed pass."""
        return self._last_report

    @staticmethod
    def decide(direction: Direction, entry_price: float, current_price: float) -> Outcome:
        """Decide the outcome of a signal at the current price.

        Args:
            direction: BUY or SELL.
            entry_price: Price when the signal was logged.
            current_price: Price observed now.

        Returns:
            WIN or LOSS. An unchanged price counts as LOSS.
        """
        if direction == Direction.BUY:
            return Outcome.WIN if current_price > entry_price else Outcome.LOSS
        return Outcome.WIN if current_price < entry_price else Outcome.LOSS

    async def verify_pending(self) -> VerificationReport:
        """Run one verification pass over the pending entries.

        The pending set is read once at the start of the pass; entries
        logged while the pass runs are picked up by the next one.

        Returns:
            Counts for this pass.

        Raises:
            JournalStorageError: If the pending set cannot be read.
        """
        report = VerificationReport()
        pending = await self._journal.get_pending_signals()
        min_dwell_ms = self._journal.min_dwell_ms

        logger.info(f"Verifying {len(pending)} pending signals")

        for entry in pending:
            report.checked += 1
            now = self._clock.now_ms()
            if now - entry.timestamp < min_dwell_ms:
                report.skipped += 1
                continue

            try:
                outcome = await self._verify_entry(entry)
            except asyncio.TimeoutError:
                logger.error(
                    f"Price fetch for {entry.id} ({entry.symbol}) timed out after "
                    f"{self._settings.fetch_timeout_seconds}s"
                )
                report.failed += 1
                continue
            except Exception as e:
                logger.error(f"Verification failed for {entry.id} ({entry.symbol}): {e}")
                report.failed += 1
                continue

            if outcome is None:
                report.skipped += 1
                continue

            report.resolved += 1
            if outcome == Outcome.WIN:
                report.wins += 1
            else:
                report.losses += 1

        logger.info(
            f"Verification pass done: {report.resolved} resolved "
            f"({report.wins} wins, {report.losses} losses), "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        self._last_report = report
        return report

    async def _verify_entry(self, entry: JournalEntry) -> Outcome | None:
        """Fetch the price for one entry and record its outcome.

        Returns:
            The recorded outcome, or None if the journal declined the update.

        Raises:
            PriceUnavailableError: If the provider has no price.
            asyncio.TimeoutError: If the fetch exceeded the timeout.
        """
        price = await asyncio.wait_for(
            self._market_data.get_price(entry.symbol),
            timeout=self._settings.fetch_timeout_seconds,
        )
        if price is None or price <= 0:
            raise PriceUnavailableError(f"No price for {entry.symbol}")

        outcome = self.decide(entry.direction, entry.entry_price, price)
        verified_at = self._clock.now_ms()

        updated = await self._journal.update_log(entry.id, outcome, verified_at, price)
        if not updated:
            logger.warning(f"Journal declined update for {entry.id}, left for the next pass")
            return None

        logger.info(
            f"{entry.id}: {entry.direction.value} {entry.symbol} @ {entry.entry_price} "
            f"-> {price} = {outcome.value}"
        )
        return outcome

    async def start(self) -> None:
        """Start the periodic verification task."""
        if self._state != VerifierState.STOPPED:
            raise RuntimeError("Verifier already running")

        self._state = VerifierState.RUNNING
        self._wake.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"Outcome verifier started (every {self._settings.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop gracefully, letting an in-flight pass finish."""
        if self._state == VerifierState.STOPPED:
            return

        self._state = VerifierState.STOPPING
        logger.info("Stopping outcome verifier")
        self._wake.set()

        if self._task:
            await self._task
            self._task = None

        self._state = VerifierState.STOPPED
        logger.info("Outcome verifier stopped")

    async def _run_loop(self) -> None:
        """Background loop: verify, then sleep until the next interval or stop."""
        first = True
        while self._state == VerifierState.RUNNING:
            if not first or self._settings.run_on_start:
                try:
                    await self.verify_pending()
                except Exception as e:
                    logger.error(f"Verification pass failed: {e}")
            first = False

            if self._state != VerifierState.RUNNING:
                break
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self._settings.interval_seconds)
            except asyncio.TimeoutError:
                pass
