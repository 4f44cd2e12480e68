"""Simfolio - simulated investment portfolio with an undoable ledger."""

from simfolio.ledger import Ledger, MarketRefresher
from simfolio.feed import PriceFeedSimulator

__version__ = "0.1.0"

__all__ = [
    "Ledger",
    "MarketRefresher",
    "PriceFeedSimulator",
    "__version__",
]
