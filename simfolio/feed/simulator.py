"""Simulated price feed for Simfolio."""

import logging
import random
import time
from typing import Iterable, Optional, Union

from simfolio.feed.base import BasePriceFeed, Snapshot
from simfolio.feed.catalog import DEFAULT_CATALOG, CatalogEntry
from simfolio.models import (
    AssetCategory,
    FixedIncomeInstrument,
    MarketInstrument,
)
from simfolio.models.instrument import FIXED_INCOME_CATEGORIES

logger = logging.getLogger(__name__)


class PriceFeedSimulator(BasePriceFeed):
    """Price feed that generates fresh, randomly fluctuating snapshots.

    Every call sleeps for ``latency`` seconds to mimic a remote market
    data request, then returns one instrument per catalog entry. Market
    instruments fluctuate around their base price; fixed-income products
    always quote their nominal unit price.
    """

    # Maximum relative deviation from the base price
    CRYPTO_VOLATILITY = 0.08
    DEFAULT_VOLATILITY = 0.03

    # Range of the simulated 24h change, in percent
    MAX_CHANGE_24H = 5.0

    DEFAULT_LATENCY = 1.5

    def __init__(
        self,
        catalog: Optional[Iterable[CatalogEntry]] = None,
        latency: float = DEFAULT_LATENCY,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the simulator.

        Args:
            catalog: Instruments to quote. Defaults to DEFAULT_CATALOG.
            latency: Seconds each fetch blocks for.
            seed: Seed for a private random generator.
            rng: Random generator to use instead of a seeded one.
        """
        if latency < 0:
            raise ValueError(f"Latency must be non-negative, got {latency}")

        self._catalog = tuple(catalog) if catalog is not None else DEFAULT_CATALOG
        self._latency = latency
        self._rng = rng or random.Random(seed)
        self._fetch_count = 0

    @property
    def catalog(self) -> tuple[CatalogEntry, ...]:
        return self._catalog

    @property
    def fetch_count(self) -> int:
        """Number of snapshots produced so far."""
        return self._fetch_count

    def _volatility(self, category: AssetCategory) -> float:
        if category == AssetCategory.CRYPTO:
            return self.CRYPTO_VOLATILITY
        return self.DEFAULT_VOLATILITY

    def _quote_market(self, entry: CatalogEntry) -> MarketInstrument:
        """Generate a fluctuating quote for a market-priced entry."""
        volatility = self._volatility(entry.category)
        price_change = (self._rng.random() - 0.5) * 2 * volatility
        price = round(entry.base_price * (1 + price_change), 2)
        # Sub-cent assets must not round down to zero
        if price <= 0:
            price = entry.base_price

        change_24h = round((self._rng.random() - 0.5) * 2 * self.MAX_CHANGE_24H, 2)

        if entry.category == AssetCategory.CRYPTO:
            cap_scale, volume_scale = 1e9, 1e8
        else:
            cap_scale, volume_scale = 1e10, 1e9

        return MarketInstrument(
            symbol=entry.symbol,
            name=entry.name,
            category=entry.category.value,
            current_price=price,
            change_24h=change_24h,
            risk=entry.risk,
            market_cap=round(self._rng.random() * cap_scale * 10, 2),
            volume=round(self._rng.random() * volume_scale, 2),
        )

    def _quote_fixed_income(self, entry: CatalogEntry) -> FixedIncomeInstrument:
        """Quote a fixed-income entry at its nominal price."""
        return FixedIncomeInstrument(
            symbol=entry.symbol,
            name=entry.name,
            category=entry.category.value,
            current_price=entry.base_price,
            interest_rate=entry.interest_rate or 0.0,
            tenure=entry.tenure or "1 year",
            minimum_investment=entry.minimum_investment or 0.0,
            risk=entry.risk,
        )

    def generate(self) -> Snapshot:
        """Generate a snapshot immediately, without simulated latency."""
        snapshot: list[Union[MarketInstrument, FixedIncomeInstrument]] = []
        for entry in self._catalog:
            if entry.category in FIXED_INCOME_CATEGORIES:
                snapshot.append(self._quote_fixed_income(entry))
            else:
                snapshot.append(self._quote_market(entry))
        return snapshot

    def fetch_snapshot(self) -> Snapshot:
        """Fetch a fresh snapshot, blocking for the configured latency.

        Returns:
            One instrument per catalog entry.
        """
        if self._latency > 0:
            time.sleep(self._latency)

        snapshot = self.generate()
        self._fetch_count += 1
        logger.debug("Generated snapshot #%d with %d instruments", self._fetch_count, len(snapshot))
        return snapshot
