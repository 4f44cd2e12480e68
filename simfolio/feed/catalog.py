"""Default instrument catalog for the price feed simulator."""

from typing import Optional

from pydantic import BaseModel, Field

from simfolio.models import AssetCategory, RiskTier


class CatalogEntry(BaseModel):
    """Static description of a tradable instrument."""

    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    name: str = Field(..., min_length=1, description="Display name")
    category: AssetCategory = Field(..., description="Asset category")
    base_price: float = Field(..., gt=0, description="Price the simulator fluctuates around")
    risk: Optional[RiskTier] = Field(default=None, description="Risk tier")
    interest_rate: Optional[float] = Field(default=None, ge=0, description="Annual rate")
    tenure: Optional[str] = Field(default=None, description="Tenure label")
    minimum_investment: Optional[float] = Field(default=None, ge=0, description="Minimum amount")

    model_config = {"frozen": True}


def _market(symbol, name, category, base_price, risk=None) -> CatalogEntry:
    return CatalogEntry(
        symbol=symbol, name=name, category=category, base_price=base_price, risk=risk
    )


def _fixed(symbol, name, category, rate, tenure, minimum, risk=RiskTier.LOW) -> CatalogEntry:
    return CatalogEntry(
        symbol=symbol,
        name=name,
        category=category,
        base_price=1000.0,
        risk=risk,
        interest_rate=rate,
        tenure=tenure,
        minimum_investment=minimum,
    )


EQ = AssetCategory.EQUITY
CR = AssetCategory.CRYPTO
FU = AssetCategory.FUND
MF = AssetCategory.MUTUAL_FUND
CO = AssetCategory.COMMODITY
FD = AssetCategory.FIXED_DEPOSIT
BD = AssetCategory.BOND

DEFAULT_CATALOG: tuple[CatalogEntry, ...] = (
    # Stocks
    _market("AAPL", "Apple Inc.", EQ, 178.50, RiskTier.MEDIUM),
    _market("GOOGL", "Alphabet Inc.", EQ, 141.80, RiskTier.MEDIUM),
    _market("MSFT", "Microsoft Corp.", EQ, 378.90, RiskTier.MEDIUM),
    _market("NVDA", "NVIDIA Corp.", EQ, 495.20, RiskTier.HIGH),
    _market("TSLA", "Tesla Inc.", EQ, 248.30, RiskTier.HIGH),
    _market("AMZN", "Amazon.com Inc.", EQ, 178.25, RiskTier.MEDIUM),
    # Crypto
    _market("BTC", "Bitcoin", CR, 43250.00, RiskTier.HIGH),
    _market("ETH", "Ethereum", CR, 2280.50, RiskTier.HIGH),
    _market("SOL", "Solana", CR, 98.75, RiskTier.HIGH),
    _market("ADA", "Cardano", CR, 0.52, RiskTier.HIGH),
    _market("DOT", "Polkadot", CR, 7.85, RiskTier.HIGH),
    # ETFs
    _market("SPY", "S&P 500 ETF", FU, 478.50, RiskTier.LOW),
    _market("QQQ", "Nasdaq 100 ETF", FU, 405.30, RiskTier.MEDIUM),
    _market("VTI", "Total Stock Market", FU, 238.20, RiskTier.LOW),
    _market("ARKK", "ARK Innovation", FU, 48.90, RiskTier.HIGH),
    _market("GLD", "Gold ETF", FU, 189.40, RiskTier.LOW),
    # Mutual funds
    _market("VFIAX", "Vanguard 500 Index Admiral", MF, 435.60, RiskTier.LOW),
    _market("FXAIX", "Fidelity 500 Index", MF, 172.40, RiskTier.LOW),
    _market("PRGFX", "T. Rowe Price Growth Stock", MF, 88.10, RiskTier.MEDIUM),
    # Commodities
    _market("GOLD", "Gold", CO, 63.00, RiskTier.LOW),
    _market("SILVER", "Silver", CO, 23.40, RiskTier.MEDIUM),
    # Fixed deposits
    _fixed("SBI-FD", "SBI Fixed Deposit", FD, 7.1, "1 year", 1000.0),
    _fixed("HDFC-FD", "HDFC Fixed Deposit", FD, 7.25, "2 years", 5000.0),
    _fixed("ICICI-FD", "ICICI Short Term Deposit", FD, 6.5, "6 months", 1000.0),
    # Bonds
    _fixed("UST-10Y", "US Treasury 10Y", BD, 4.2, "10 years", 1000.0),
    _fixed("GOI-5Y", "Government of India 5Y Bond", BD, 7.0, "5 years", 1000.0),
    _fixed("CORP-AA", "AA Corporate Bond", BD, 8.4, "3 years", 2000.0, RiskTier.MEDIUM),
)
