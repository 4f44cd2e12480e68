"""Periodic market refresh for a ledger."""

import logging
import threading
from typing import Optional

from simfolio.feed.base import BasePriceFeed
from simfolio.ledger.engine import Ledger

logger = logging.getLogger(__name__)


class MarketRefresher:
    """Background thread that reprices a ledger at a fixed interval.

    Each cycle fetches a snapshot outside the ledger lock and then applies
    it under the lock, so a slow fetch only delays the next reprice. A
    failing fetch is logged and retried on the next cycle.
    """

    DEFAULT_INTERVAL = 30.0

    def __init__(
        self,
        ledger: Ledger,
        feed: BasePriceFeed,
        interval: float = DEFAULT_INTERVAL,
    ):
        """Initialize the refresher.

        Args:
            ledger: Ledger to reprice.
            feed: Price feed to fetch snapshots from.
            interval: Seconds between the end of one cycle and the next.
        """
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")

        self._ledger = ledger
        self._feed = feed
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._cycles = 0
        self._failures = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def cycles(self) -> int:
        """Number of snapshots successfully applied."""
        return self._cycles

    @property
    def failures(self) -> int:
        """Number of cycles whose fetch or apply raised."""
        return self._failures

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh_now(self) -> bool:
        """Run one fetch-and-apply cycle in the calling thread.

        Returns:
            True if a snapshot was applied, False if the cycle failed.
        """
        try:
            repriced = self._ledger.refresh(self._feed)
        except Exception as e:
            self._failures += 1
            logger.warning("Market refresh failed: %s", e)
            return False

        self._cycles += 1
        logger.debug("Market refresh #%d repriced %d positions", self._cycles, repriced)
        return True

    def _run(self, immediate: bool) -> None:
        if not immediate and self._stop_event.wait(self._interval):
            return
        while not self._stop_event.is_set():
            self.refresh_now()
            self._stop_event.wait(self._interval)

    def start(self, immediate: bool = True) -> None:
        """Start the background refresh thread.

        Args:
            immediate: Refresh right away instead of waiting one interval.
        """
        if self.is_running():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(immediate,),
            name="simfolio-refresher",
            daemon=True,
        )
        self._thread.start()
        logger.info("Market refresher started (every %.1fs)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the refresh thread and wait for it to finish.

        An in-flight fetch is not interrupted; the thread exits after it.

        Args:
            timeout: Seconds to wait for the thread to exit.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None
        logger.info("Market refresher stopped")

    def __enter__(self) -> "MarketRefresher":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
