"""Position data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from simfolio.models.instrument import AssetCategory, FIXED_INCOME_CATEGORIES


class Position(BaseModel):
    """Represents an open holding of one instrument."""

    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    name: str = Field(..., min_length=1, description="Display name")
    category: AssetCategory = Field(..., description="Asset category")
    quantity: float = Field(..., gt=0, description="Units held")
    average_price: float = Field(..., ge=0, description="Average acquisition price")
    current_price: float = Field(..., ge=0, description="Current unit price")
    value: float = Field(..., description="Current market value")
    pnl: float = Field(default=0.0, description="Unrealized profit/loss")
    pnl_percent: float = Field(default=0.0, description="Unrealized profit/loss percentage")
    change_24h: float = Field(default=0.0, description="24h change percentage")
    opened_at: datetime = Field(default_factory=datetime.now, description="First buy timestamp")
    interest_rate: Optional[float] = Field(
        default=None, ge=0, description="Locked annual interest rate (fixed income)"
    )
    tenure: Optional[str] = Field(default=None, description="Tenure label (fixed income)")
    maturity_date: Optional[datetime] = Field(
        default=None, description="Maturity date (fixed income)"
    )

    model_config = {"frozen": True}

    @property
    def cost_basis(self) -> float:
        """Quantity times average acquisition price."""
        return self.quantity * self.average_price

    @property
    def is_fixed_income(self) -> bool:
        return self.category in FIXED_INCOME_CATEGORIES
