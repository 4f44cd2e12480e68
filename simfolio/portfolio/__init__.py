"""Read-only portfolio views for Simfolio."""

from simfolio.portfolio.aggregate import summarize
from simfolio.portfolio.analytics import (
    allocation_by_category,
    allocation_by_symbol,
    cash_ratio,
    crypto_percent,
    risk_level,
    top_movers,
)

__all__ = [
    "allocation_by_category",
    "allocation_by_symbol",
    "cash_ratio",
    "crypto_percent",
    "risk_level",
    "summarize",
    "top_movers",
]
