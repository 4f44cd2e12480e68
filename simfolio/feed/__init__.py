"""Price feeds for Simfolio."""

from simfolio.feed.base import BasePriceFeed, Snapshot, StaticPriceFeed
from simfolio.feed.catalog import DEFAULT_CATALOG, CatalogEntry
from simfolio.feed.simulator import PriceFeedSimulator

__all__ = [
    "BasePriceFeed",
    "CatalogEntry",
    "DEFAULT_CATALOG",
    "PriceFeedSimulator",
    "Snapshot",
    "StaticPriceFeed",
]
