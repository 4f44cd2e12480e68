"""Transaction record data model."""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from simfolio.models.instrument import FixedIncomeInstrument, MarketInstrument
from simfolio.models.position import Position


class TransactionRecord(BaseModel):
    """An accepted buy or sell, with the state needed to reverse it.

    ``prior_position`` is the position as it was before the trade, or None
    when the trade opened a new position. ``cash_before`` is the cash
    balance right before the trade. For sells, ``position_index`` is where
    the position was listed so a revert can put it back in place.
    """

    kind: Literal["buy", "sell"] = Field(..., description="Transaction kind")
    instrument: Union[MarketInstrument, FixedIncomeInstrument] = Field(
        ..., discriminator="category", description="Instrument at trade time"
    )
    amount: float = Field(..., ge=0, description="Credit amount exchanged")
    quantity: float = Field(..., gt=0, description="Units traded")
    prior_position: Optional[Position] = Field(
        default=None, description="Position before the trade"
    )
    position_index: Optional[int] = Field(
        default=None, ge=0, description="Listing index of the position before a sell"
    )
    cash_before: float = Field(..., ge=0, description="Cash balance before the trade")
    timestamp: datetime = Field(default_factory=datetime.now, description="Trade timestamp")

    model_config = {"frozen": True}

    @property
    def symbol(self) -> str:
        return self.instrument.symbol
