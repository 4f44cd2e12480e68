"""Portfolio ledger for Simfolio."""

from simfolio.ledger.engine import Ledger
from simfolio.ledger.refresher import MarketRefresher

__all__ = [
    "Ledger",
    "MarketRefresher",
]
