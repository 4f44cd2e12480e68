"""Rich rendering helpers shared by Simfolio commands."""

from typing import Iterable, Optional, Sequence, Union

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from simfolio.models import (
    Allocation,
    FixedIncomeInstrument,
    LedgerError,
    LedgerResult,
    LedgerState,
    MarketInstrument,
    PortfolioSummary,
    Position,
    TransactionRecord,
)

# User-facing explanations for rejected operations
ERROR_HINTS: dict[LedgerError, str] = {
    LedgerError.INSUFFICIENT_FUNDS: "Not enough credits for this investment.",
    LedgerError.BELOW_MINIMUM_INVESTMENT: "The amount is below this product's minimum investment.",
    LedgerError.UNKNOWN_SYMBOL: "That symbol is not in the market. Run [cyan]market[/cyan] to list symbols.",
    LedgerError.INVALID_AMOUNT: "The amount must be a positive number.",
    LedgerError.NO_POSITION: "You do not hold this asset.",
    LedgerError.INSUFFICIENT_QUANTITY: "You are trying to sell more units than you hold.",
    LedgerError.INVALID_QUANTITY: "The quantity must be a positive number.",
    LedgerError.NOTHING_TO_REVERT: "There is no transaction to undo.",
}


def _signed(value: float, fmt: str = ",.2f", prefix: str = "$", suffix: str = "") -> str:
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else "-"
    return f"[{color}]{sign}{prefix}{abs(value):{fmt}}{suffix}[/{color}]"


def format_quantity(quantity: float) -> str:
    if quantity == int(quantity):
        return f"{int(quantity):,}"
    return f"{quantity:,.4f}"


def print_error(console: Console, result: LedgerResult) -> None:
    """Show a rejected ledger result."""
    hint = ERROR_HINTS.get(result.error, "") if result.error else ""
    console.print(Panel(
        f"[red]{escape(result.message)}[/red]" + (f"\n\n{hint}" if hint else ""),
        title="[bold red]Rejected[/bold red]",
        border_style="red",
    ))


def market_table(
    instruments: Iterable[Union[MarketInstrument, FixedIncomeInstrument]],
    title: str = "Market",
) -> Table:
    """Build a table of instruments."""
    table = Table(title=title, show_header=True, header_style="bold")

    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Tenure", justify="center")
    table.add_column("Min", justify="right")
    table.add_column("Risk", justify="center")

    for inst in instruments:
        if isinstance(inst, FixedIncomeInstrument):
            rate = f"{inst.interest_rate:.2f}%"
            tenure = inst.tenure
            minimum = f"${inst.minimum_investment:,.0f}" if inst.minimum_investment else "-"
            change = "[dim]-[/dim]"
        else:
            rate = tenure = minimum = "-"
            change = _signed(inst.change_24h, ".2f", prefix="", suffix="%")

        table.add_row(
            escape(inst.symbol),
            escape(inst.name),
            inst.category,
            f"${inst.current_price:,.2f}",
            change,
            rate,
            tenure,
            minimum,
            inst.risk.value if inst.risk else "-",
        )

    return table


def positions_table(positions: Sequence[Position]) -> Table:
    """Build a table of open positions."""
    table = Table(title="Open Positions", show_header=True, header_style="bold")

    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column("Avg Price", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("P&L %", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Matures", justify="center")

    for pos in positions:
        matures = pos.maturity_date.strftime("%Y-%m-%d") if pos.maturity_date else "-"
        table.add_row(
            escape(pos.symbol),
            format_quantity(pos.quantity),
            f"${pos.average_price:,.2f}",
            f"${pos.current_price:,.2f}",
            f"${pos.value:,.2f}",
            _signed(pos.pnl),
            _signed(pos.pnl_percent, ".2f", prefix="", suffix="%"),
            f"{pos.change_24h:+.2f}%",
            matures,
        )

    return table


def summary_panel(state: LedgerState, summary: PortfolioSummary) -> Panel:
    """Build the account summary panel."""
    refreshed = (
        state.last_refreshed_at.strftime("%H:%M:%S") if state.last_refreshed_at else "never"
    )
    text = (
        f"Portfolio Value:   ${summary.total_value:,.2f}\n"
        f"Available Credits: ${state.cash_balance:,.2f}\n"
        f"Cost Basis:        ${summary.total_cost_basis:,.2f}\n"
        f"{'─' * 35}\n"
        f"Unrealized P&L:    {_signed(summary.total_pnl)} "
        f"({_signed(summary.total_pnl_percent, '.2f', prefix='', suffix='%')})\n\n"
        f"[dim]Positions: {summary.position_count}  "
        f"Undoable: {state.transaction_count}  "
        f"Prices updated: {refreshed}[/dim]"
    )
    return Panel(text, title="[bold]Account[/bold]", border_style="cyan")


def allocation_table(title: str, allocations: Sequence[Allocation]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Holding", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Share", justify="right")
    for alloc in allocations:
        table.add_row(escape(alloc.label), f"${alloc.value:,.2f}", f"{alloc.percent:.1f}%")
    return table


def history_table(transactions: Sequence[TransactionRecord]) -> Table:
    """Build a table of revertible transactions, newest first."""
    table = Table(title="Transaction History", show_header=True, header_style="bold")

    table.add_column("#", justify="right", style="dim")
    table.add_column("Time")
    table.add_column("Side", justify="center")
    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column("Amount", justify="right")

    for index, record in reversed(list(enumerate(transactions, start=1))):
        side = "[green]BUY[/green]" if record.kind == "buy" else "[red]SELL[/red]"
        table.add_row(
            str(index),
            record.timestamp.strftime("%H:%M:%S"),
            side,
            escape(record.symbol),
            format_quantity(record.quantity),
            f"${record.amount:,.2f}",
        )

    return table


def describe_result(result: LedgerResult) -> Optional[str]:
    """One-line description of a successful ledger result."""
    if not result.ok:
        return None

    record = result.transaction
    if record is None:
        return result.message

    if result.removed and record.kind == "sell":
        return f"[green]Closed {escape(record.symbol)}[/green] for ${record.amount:,.2f}"
    if record.kind == "buy" and result.position is not None and result.position.quantity > record.quantity:
        return (
            f"[green]Added {format_quantity(record.quantity)} {escape(record.symbol)}[/green] "
            f"(now {format_quantity(result.position.quantity)} @ "
            f"${result.position.average_price:,.2f} avg)"
        )
    return f"[green]{escape(result.message)}[/green]"
