"""Portfolio totals computed from open positions."""

from typing import Iterable

from simfolio.models import PortfolioSummary, Position


def summarize(positions: Iterable[Position]) -> PortfolioSummary:
    """Calculate portfolio totals from a set of positions.

    Nothing is cached: calling this twice on the same positions returns
    equal summaries.

    Args:
        positions: Open positions.

    Returns:
        PortfolioSummary with total value, P&L and P&L percent.
    """
    total_value = 0.0
    total_pnl = 0.0
    total_cost_basis = 0.0
    count = 0

    for position in positions:
        total_value += position.value
        total_pnl += position.pnl
        total_cost_basis += position.cost_basis
        count += 1

    total_pnl_percent = (
        (total_pnl / total_cost_basis * 100) if count > 0 and total_cost_basis > 0 else 0.0
    )

    return PortfolioSummary(
        total_value=total_value,
        total_pnl=total_pnl,
        total_pnl_percent=total_pnl_percent,
        total_cost_basis=total_cost_basis,
        position_count=count,
    )
