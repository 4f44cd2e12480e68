"""Tests for the background market refresher.

**Feature: simulated-portfolio**
"""

import threading
import time

import pytest

from simfolio.feed import BasePriceFeed, StaticPriceFeed
from simfolio.ledger import Ledger, MarketRefresher
from simfolio.models import MarketInstrument


def stock(price: float) -> MarketInstrument:
    return MarketInstrument(symbol="AAPL", name="Apple Inc.", category="equity", current_price=price)


def wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class FailingFeed(BasePriceFeed):
    """Feed whose first fetches raise."""

    def __init__(self, failures: int, snapshot):
        self.remaining_failures = failures
        self.snapshot = snapshot

    def fetch_snapshot(self):
        if self.remaining_failures > 0:
            self.remaining_failures -= 1
            raise ConnectionError("feed unavailable")
        return list(self.snapshot)


class BlockingFeed(BasePriceFeed):
    """Feed that blocks until released, to observe the ledger mid-fetch."""

    def __init__(self, snapshot):
        self.snapshot = snapshot
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch_snapshot(self):
        self.started.set()
        self.release.wait(5)
        return list(self.snapshot)


class TestMarketRefresher:

    def test_refresh_now_applies_snapshot(self):
        ledger = Ledger()
        ledger.buy(stock(100.0), 1000.0)
        refresher = MarketRefresher(ledger, StaticPriceFeed([stock(120.0)]), interval=60)

        assert refresher.refresh_now() is True
        assert refresher.cycles == 1
        assert ledger.get_position("AAPL").current_price == 120.0

    def test_background_thread_repeats(self):
        ledger = Ledger()
        refresher = MarketRefresher(ledger, StaticPriceFeed([stock(100.0)]), interval=0.01)

        refresher.start()
        try:
            assert wait_until(lambda: refresher.cycles >= 3)
            assert refresher.is_running()
        finally:
            refresher.stop(timeout=2)

        assert not refresher.is_running()
        assert ledger.get_state().last_refreshed_at is not None

    def test_delayed_start_waits_one_interval(self):
        refresher = MarketRefresher(Ledger(), StaticPriceFeed([]), interval=30)

        refresher.start(immediate=False)
        time.sleep(0.05)
        refresher.stop(timeout=2)

        assert refresher.cycles == 0
        assert not refresher.is_running()

    def test_failed_fetch_does_not_stop_loop(self):
        ledger = Ledger()
        ledger.buy(stock(100.0), 1000.0)
        refresher = MarketRefresher(ledger, FailingFeed(2, [stock(90.0)]), interval=0.01)

        with refresher:
            assert wait_until(lambda: refresher.cycles >= 1)

        assert refresher.failures == 2
        assert ledger.get_position("AAPL").current_price == 90.0

    def test_trades_proceed_while_fetch_is_in_flight(self):
        ledger = Ledger()
        feed = BlockingFeed([stock(200.0)])
        refresher = MarketRefresher(ledger, feed, interval=60)

        refresher.start()
        try:
            assert feed.started.wait(2)
            # The fetch holds no ledger lock, so a trade goes through now
            result = ledger.buy(stock(100.0), 1000.0)
            assert result.ok
            feed.release.set()
            assert wait_until(lambda: refresher.cycles >= 1)
        finally:
            refresher.stop(timeout=2)

        assert ledger.get_position("AAPL").current_price == 200.0

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            MarketRefresher(Ledger(), StaticPriceFeed([]), interval=0)

    def test_start_twice_keeps_one_thread(self):
        refresher = MarketRefresher(Ledger(), StaticPriceFeed([]), interval=30)

        refresher.start()
        first = refresher._thread
        refresher.start()
        try:
            assert refresher._thread is first
        finally:
            refresher.stop(timeout=2)
