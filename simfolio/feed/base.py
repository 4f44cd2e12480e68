"""Base price feed interface for Simfolio."""

from abc import ABC, abstractmethod
from typing import Iterable, Union

from simfolio.models import FixedIncomeInstrument, MarketInstrument


Snapshot = list[Union[MarketInstrument, FixedIncomeInstrument]]


class BasePriceFeed(ABC):
    """Abstract base class for price feeds.

    A feed produces complete snapshots of every instrument it knows.
    The ledger never looks inside a feed; it only applies what
    ``fetch_snapshot`` returns.
    """

    @abstractmethod
    def fetch_snapshot(self) -> Snapshot:
        """Fetch the current snapshot of all known instruments.

        This call may block while the feed produces or retrieves prices.

        Returns:
            List of instruments with current prices.
        """
        pass


class StaticPriceFeed(BasePriceFeed):
    """Price feed that always returns the same snapshot."""

    def __init__(self, snapshot: Iterable[Union[MarketInstrument, FixedIncomeInstrument]]):
        self._snapshot = list(snapshot)

    def set_snapshot(
        self, snapshot: Iterable[Union[MarketInstrument, FixedIncomeInstrument]]
    ) -> None:
        """Replace the snapshot returned by later fetches."""
        self._snapshot = list(snapshot)

    def fetch_snapshot(self) -> Snapshot:
        return list(self._snapshot)
