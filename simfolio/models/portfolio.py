"""Portfolio read models: ledger state snapshot, summary and allocation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from simfolio.models.position import Position


class LedgerState(BaseModel):
    """Read-only snapshot of a ledger for presentation."""

    cash_balance: float = Field(..., ge=0, description="Available cash")
    positions: list[Position] = Field(default_factory=list, description="Open positions")
    last_refreshed_at: Optional[datetime] = Field(
        default=None, description="When prices were last applied"
    )
    transaction_count: int = Field(default=0, ge=0, description="Revertible transactions")

    model_config = {"frozen": True}


class PortfolioSummary(BaseModel):
    """Totals computed over the open positions."""

    total_value: float = Field(..., description="Sum of position values")
    total_pnl: float = Field(..., description="Sum of position P&L")
    total_pnl_percent: float = Field(..., description="Total P&L over total cost basis")
    total_cost_basis: float = Field(..., ge=0, description="Sum of quantity x average price")
    position_count: int = Field(..., ge=0, description="Number of open positions")

    model_config = {"frozen": True}


class Allocation(BaseModel):
    """Share of portfolio value held in one symbol or category."""

    label: str = Field(..., description="Symbol or category")
    value: float = Field(..., description="Value held")
    percent: float = Field(..., description="Percentage of total value")

    model_config = {"frozen": True}
