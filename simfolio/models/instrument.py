"""Instrument data models.

An instrument is a tagged union over its category: market-priced assets
carry a fluctuating price and 24h change, fixed-income assets carry a
nominal unit price plus their interest terms.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from simfolio.models.tenure import parse_tenure


class AssetCategory(str, Enum):
    """Instrument categories."""

    EQUITY = "equity"
    CRYPTO = "crypto"
    FUND = "fund"
    FIXED_DEPOSIT = "fixed-deposit"
    BOND = "bond"
    MUTUAL_FUND = "mutual-fund"
    COMMODITY = "commodity"


FIXED_INCOME_CATEGORIES = frozenset({AssetCategory.FIXED_DEPOSIT, AssetCategory.BOND})

# Nominal unit price for fixed-income products
NOMINAL_UNIT_PRICE = 1000.0


def is_fixed_income(category: str) -> bool:
    """Check whether a category accrues interest instead of tracking a price."""
    return AssetCategory(category) in FIXED_INCOME_CATEGORIES


class RiskTier(str, Enum):
    """Risk tier of an instrument or a whole portfolio."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class MarketInstrument(BaseModel):
    """An instrument priced by the market (stocks, crypto, funds, gold)."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    name: str = Field(..., min_length=1, description="Display name")
    category: Literal["equity", "crypto", "fund", "mutual-fund", "commodity"] = Field(
        ..., description="Asset category"
    )
    current_price: float = Field(..., gt=0, description="Current unit price")
    change_24h: float = Field(default=0.0, description="24h change percentage")
    risk: Optional[RiskTier] = Field(default=None, description="Risk tier")
    market_cap: Optional[float] = Field(default=None, ge=0, description="Market capitalisation")
    volume: Optional[float] = Field(default=None, ge=0, description="24h traded volume")

    model_config = {"frozen": True}

    @property
    def is_fixed_income(self) -> bool:
        return False


class FixedIncomeInstrument(BaseModel):
    """A fixed deposit or bond with a locked interest rate and tenure."""

    symbol: str = Field(..., min_length=1, description="Product symbol")
    name: str = Field(..., min_length=1, description="Display name")
    category: Literal["fixed-deposit", "bond"] = Field(..., description="Asset category")
    current_price: float = Field(
        default=NOMINAL_UNIT_PRICE, gt=0, description="Nominal unit price"
    )
    change_24h: float = Field(default=0.0, ge=0, le=0, description="Always 0 for fixed income")
    interest_rate: float = Field(..., ge=0, description="Annual interest rate percentage")
    tenure: str = Field(..., min_length=1, description="Duration label, e.g. '1 year'")
    minimum_investment: float = Field(default=0.0, ge=0, description="Minimum credit amount")
    risk: Optional[RiskTier] = Field(default=None, description="Risk tier")

    model_config = {"frozen": True}

    @field_validator("tenure")
    @classmethod
    def _check_tenure(cls, v: str) -> str:
        parse_tenure(v)
        return v

    @property
    def is_fixed_income(self) -> bool:
        return True


Instrument = Annotated[
    Union[MarketInstrument, FixedIncomeInstrument],
    Field(discriminator="category"),
]

_instrument_adapter = TypeAdapter(Instrument)


def parse_instrument(data: dict[str, Any]) -> Union[MarketInstrument, FixedIncomeInstrument]:
    """Validate a raw mapping into the matching instrument variant.

    Args:
        data: Mapping with at least symbol, name and category.

    Returns:
        MarketInstrument or FixedIncomeInstrument depending on category.

    Raises:
        pydantic.ValidationError: If the mapping is not a valid instrument.
    """
    return _instrument_adapter.validate_python(data)
