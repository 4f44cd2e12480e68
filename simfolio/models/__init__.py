"""Data models for Simfolio."""

from simfolio.models.instrument import (
    AssetCategory,
    FixedIncomeInstrument,
    Instrument,
    MarketInstrument,
    RiskTier,
    parse_instrument,
)
from simfolio.models.position import Position
from simfolio.models.transaction import TransactionRecord
from simfolio.models.result import LedgerError, LedgerResult
from simfolio.models.portfolio import Allocation, LedgerState, PortfolioSummary

__all__ = [
    "Allocation",
    "AssetCategory",
    "FixedIncomeInstrument",
    "Instrument",
    "LedgerError",
    "LedgerResult",
    "LedgerState",
    "MarketInstrument",
    "PortfolioSummary",
    "Position",
    "RiskTier",
    "TransactionRecord",
    "parse_instrument",
]
