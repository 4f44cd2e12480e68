"""Allocation and risk analytics over open positions."""

from collections import defaultdict
from typing import Sequence

from simfolio.models import Allocation, AssetCategory, Position, RiskTier

# Share of portfolio value in crypto above which risk is raised
HIGH_RISK_CRYPTO_PERCENT = 30.0
MEDIUM_RISK_CRYPTO_PERCENT = 15.0


def _total_value(positions: Sequence[Position]) -> float:
    return sum(p.value for p in positions)


def _percent(value: float, total: float) -> float:
    return (value / total * 100) if total > 0 else 0.0


def allocation_by_symbol(positions: Sequence[Position]) -> list[Allocation]:
    """Share of total value held in each position, largest first."""
    total = _total_value(positions)
    allocations = [
        Allocation(label=p.symbol, value=p.value, percent=_percent(p.value, total))
        for p in positions
    ]
    return sorted(allocations, key=lambda a: a.value, reverse=True)


def allocation_by_category(positions: Sequence[Position]) -> list[Allocation]:
    """Share of total value held in each asset category, largest first."""
    total = _total_value(positions)
    by_category: dict[str, float] = defaultdict(float)
    for p in positions:
        by_category[AssetCategory(p.category).value] += p.value

    allocations = [
        Allocation(label=category, value=value, percent=_percent(value, total))
        for category, value in by_category.items()
    ]
    return sorted(allocations, key=lambda a: a.value, reverse=True)


def crypto_percent(positions: Sequence[Position]) -> float:
    """Percentage of total value held in crypto."""
    total = _total_value(positions)
    crypto = sum(p.value for p in positions if p.category == AssetCategory.CRYPTO)
    return _percent(crypto, total)


def risk_level(positions: Sequence[Position]) -> RiskTier:
    """Classify portfolio risk by its crypto exposure.

    Args:
        positions: Open positions.

    Returns:
        HIGH above 30% crypto, MEDIUM above 15%, LOW otherwise.
    """
    share = crypto_percent(positions)
    if share > HIGH_RISK_CRYPTO_PERCENT:
        return RiskTier.HIGH
    if share > MEDIUM_RISK_CRYPTO_PERCENT:
        return RiskTier.MEDIUM
    return RiskTier.LOW


def cash_ratio(cash_balance: float, positions: Sequence[Position]) -> float:
    """Fraction of total account value (cash plus positions) held as cash."""
    total = cash_balance + _total_value(positions)
    return (cash_balance / total) if total > 0 else 0.0


def top_movers(
    positions: Sequence[Position],
    threshold: float = 5.0,
) -> dict[str, list[Position]]:
    """Split positions into gainers and losers by P&L percent.

    Args:
        positions: Open positions.
        threshold: Absolute P&L percent a position must exceed.

    Returns:
        Dictionary with "gainers" (best first) and "losers" (worst first).
    """
    gainers = sorted(
        (p for p in positions if p.pnl_percent > threshold),
        key=lambda p: p.pnl_percent,
        reverse=True,
    )
    losers = sorted(
        (p for p in positions if p.pnl_percent < -threshold),
        key=lambda p: p.pnl_percent,
    )
    return {"gainers": gainers, "losers": losers}
