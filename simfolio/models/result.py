"""LedgerError and LedgerResult data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from simfolio.models.position import Position
from simfolio.models.transaction import TransactionRecord


class LedgerError(str, Enum):
    """Reasons a ledger operation can be rejected."""

    INSUFFICIENT_FUNDS = "insufficient_funds"
    BELOW_MINIMUM_INVESTMENT = "below_minimum_investment"
    UNKNOWN_SYMBOL = "unknown_symbol"
    INVALID_AMOUNT = "invalid_amount"
    NO_POSITION = "no_position"
    INSUFFICIENT_QUANTITY = "insufficient_quantity"
    INVALID_QUANTITY = "invalid_quantity"
    NOTHING_TO_REVERT = "nothing_to_revert"


class LedgerResult(BaseModel):
    """Represents the outcome of a buy, sell or revert.

    A rejected operation has ``ok`` False and an ``error``; the ledger is
    left exactly as it was.
    """

    ok: bool = Field(..., description="Whether the operation was applied")
    error: Optional[LedgerError] = Field(default=None, description="Rejection reason")
    message: str = Field(default="", description="Diagnostic message")
    position: Optional[Position] = Field(
        default=None, description="Resulting position (None if removed)"
    )
    removed: bool = Field(default=False, description="Whether a position was removed")
    transaction: Optional[TransactionRecord] = Field(
        default=None, description="Recorded or reverted transaction"
    )

    model_config = {"frozen": True}

    @classmethod
    def failure(cls, error: LedgerError, message: str) -> "LedgerResult":
        return cls(ok=False, error=error, message=message)
