"""Interactive portfolio session for Simfolio CLI.

Runs an in-memory ledger fed by the price simulator. Commands are read
from the prompt or from a script file, one per line.
"""

import shlex
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from simfolio.cli.display import (
    allocation_table,
    describe_result,
    history_table,
    market_table,
    positions_table,
    print_error,
    summary_panel,
)
from simfolio.feed import BasePriceFeed
from simfolio.ledger import Ledger, MarketRefresher
from simfolio.models import LedgerResult
from simfolio.portfolio import (
    allocation_by_category,
    allocation_by_symbol,
    cash_ratio,
    risk_level,
)

console = Console()

HELP_TEXT = (
    "[bold]Commands[/bold]\n\n"
    "  [cyan]buy SYMBOL AMOUNT[/cyan]   Invest AMOUNT credits in SYMBOL\n"
    "  [cyan]sell SYMBOL QTY[/cyan]     Sell QTY units (or [cyan]all[/cyan])\n"
    "  [cyan]undo[/cyan]                Revert the last buy or sell\n"
    "  [cyan]refresh[/cyan]             Fetch new prices now\n"
    "  [cyan]status[/cyan]              Show account and positions\n"
    "  [cyan]history[/cyan]             Show undoable transactions\n"
    "  [cyan]analytics[/cyan]           Show allocation and risk\n"
    "  [cyan]market [CATEGORY][/cyan]   List tradable instruments\n"
    "  [cyan]help[/cyan]                Show this help\n"
    "  [cyan]quit[/cyan]                End the session"
)


class PlaySession:
    """Dispatches text commands against a ledger.

    The session is the presentation layer: it turns ledger results into
    console output and never lets a bad command end the session.
    """

    def __init__(
        self,
        ledger: Ledger,
        feed: BasePriceFeed,
        output: Optional[Console] = None,
    ):
        self.ledger = ledger
        self.feed = feed
        self.console = output or console
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "buy": self._buy,
            "sell": self._sell,
            "undo": self._undo,
            "revert": self._undo,
            "refresh": self._refresh,
            "status": self._status,
            "history": self._history,
            "analytics": self._analytics,
            "market": self._market,
            "help": self._help,
        }

    def execute(self, line: str) -> bool:
        """Run one command line.

        Args:
            line: Command text, e.g. "buy AAPL 1000".

        Returns:
            False when the session should end, True otherwise.
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]Could not parse command: {escape(str(e))}[/red]")
            return True

        if not parts or parts[0].startswith("#"):
            return True

        name, args = parts[0].lower(), parts[1:]
        if name in ("quit", "exit"):
            return False

        handler = self._commands.get(name)
        if handler is None:
            self.console.print(f"[red]Unknown command: {escape(name)}[/red] (type [cyan]help[/cyan])")
            return True

        handler(args)
        return True

    def _parse_number(self, text: str, label: str) -> Optional[float]:
        try:
            return float(text.replace(",", ""))
        except ValueError:
            self.console.print(f"[red]{label} must be a number, got {escape(repr(text))}[/red]")
            return None

    def _report(self, result: LedgerResult) -> None:
        if not result.ok:
            print_error(self.console, result)
            return
        self.console.print(describe_result(result))
        self.console.print(f"[dim]Available credits: ${self.ledger.cash_balance:,.2f}[/dim]")

    def _buy(self, args: list[str]) -> None:
        if len(args) != 2:
            self.console.print("[yellow]Usage: buy SYMBOL AMOUNT[/yellow]")
            return
        amount = self._parse_number(args[1], "Amount")
        if amount is None:
            return
        self._report(self.ledger.buy(args[0].upper(), amount))

    def _sell(self, args: list[str]) -> None:
        if len(args) != 2:
            self.console.print("[yellow]Usage: sell SYMBOL QTY|all[/yellow]")
            return
        symbol = args[0].upper()

        if args[1].lower() == "all":
            position = self.ledger.get_position(symbol)
            # No position: let the ledger report it
            quantity = position.quantity if position is not None else 1.0
        else:
            quantity = self._parse_number(args[1], "Quantity")
            if quantity is None:
                return

        self._report(self.ledger.sell(symbol, quantity))

    def _undo(self, args: list[str]) -> None:
        result = self.ledger.revert_last()
        if not result.ok:
            print_error(self.console, result)
            return
        self.console.print(f"[yellow]{escape(result.message)}[/yellow]")
        self.console.print(f"[dim]Available credits: ${self.ledger.cash_balance:,.2f}[/dim]")

    def _refresh(self, args: list[str]) -> None:
        try:
            with self.console.status("[bold cyan]Fetching market data...[/bold cyan]"):
                repriced = self.ledger.refresh(self.feed)
        except Exception as e:
            self.console.print(f"[red]Price refresh failed: {escape(str(e))}[/red]")
            return
        self.console.print(f"[green]Prices updated.[/green] [dim]{repriced} positions repriced.[/dim]")

    def _status(self, args: list[str]) -> None:
        state = self.ledger.get_state()
        summary = self.ledger.get_aggregate()
        self.console.print(summary_panel(state, summary))
        if state.positions:
            self.console.print(positions_table(state.positions))
        else:
            self.console.print("[dim]No open positions.[/dim]")

    def _history(self, args: list[str]) -> None:
        transactions = self.ledger.get_transactions()
        if not transactions:
            self.console.print("[dim]No transactions yet.[/dim]")
            return
        self.console.print(history_table(transactions))

    def _analytics(self, args: list[str]) -> None:
        state = self.ledger.get_state()
        if not state.positions:
            self.console.print("[dim]No open positions to analyze.[/dim]")
            return

        self.console.print(allocation_table("Allocation by Asset", allocation_by_symbol(state.positions)))
        self.console.print(allocation_table("Allocation by Category", allocation_by_category(state.positions)))

        tier = risk_level(state.positions)
        tier_color = {"Low": "green", "Medium": "yellow", "High": "red"}[tier.value]
        ratio = cash_ratio(state.cash_balance, state.positions)
        self.console.print(
            f"Risk level: [{tier_color}]{tier.value}[/{tier_color}]   "
            f"Cash: {ratio * 100:.1f}% of account"
        )

    def _market(self, args: list[str]) -> None:
        instruments = self.ledger.market
        if not instruments:
            self.console.print("[dim]No market data yet. Run [cyan]refresh[/cyan].[/dim]")
            return
        if args:
            wanted = args[0].lower()
            instruments = [i for i in instruments if i.category == wanted]
        self.console.print(market_table(instruments))

    def _help(self, args: list[str]) -> None:
        self.console.print(Panel(HELP_TEXT, title="[bold]Help[/bold]", border_style="dim"))


def run_script(session: PlaySession, lines) -> int:
    """Execute command lines until one ends the session.

    Returns:
        Number of lines executed.
    """
    executed = 0
    for line in lines:
        executed += 1
        session.console.print(f"[dim]> {escape(line.rstrip())}[/dim]")
        if not session.execute(line):
            break
    return executed


@click.command()
@click.option(
    "-b", "--balance",
    type=float,
    default=None,
    help="Starting credits. Defaults to portfolio.starting_balance from config.",
)
@click.option(
    "-s", "--script",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read commands from a file instead of the prompt.",
)
@click.option(
    "--no-refresh",
    is_flag=True,
    default=False,
    help="Disable automatic background price refresh.",
)
@click.pass_context
def play(ctx: click.Context, balance: Optional[float], script: Optional[Path], no_refresh: bool) -> None:
    """Start a simulated portfolio session.

    Prices are simulated and refreshed in the background. Nothing is
    saved: the portfolio lives only as long as the session.

    \b
    Examples:
      simfolio play                      # Interactive session
      simfolio play --balance 50000      # Start with 50,000 credits
      simfolio play --script trades.txt  # Replay commands from a file
    """
    from simfolio.cli.main import get_config
    from simfolio.feed import PriceFeedSimulator

    config = get_config(ctx)
    starting_balance = balance if balance is not None else config.portfolio.starting_balance

    try:
        ledger = Ledger(starting_balance=starting_balance)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--balance")

    feed = PriceFeedSimulator(
        latency=0.0 if script else config.feed.latency_seconds,
        seed=config.feed.seed,
    )
    session = PlaySession(ledger, feed)

    with console.status("[bold cyan]Fetching market data...[/bold cyan]"):
        ledger.refresh(feed)

    refresher = None
    if not no_refresh and script is None:
        refresher = MarketRefresher(ledger, feed, interval=config.feed.refresh_interval)
        refresher.start(immediate=False)

    console.print(Panel(
        f"Starting credits: [bold]${starting_balance:,.2f}[/bold]\n"
        f"Type [cyan]help[/cyan] for commands, [cyan]quit[/cyan] to exit.",
        title="[bold cyan]Simfolio[/bold cyan]",
        border_style="cyan",
    ))

    try:
        if script is not None:
            with open(script) as f:
                run_script(session, f)
        else:
            while True:
                try:
                    line = click.prompt("simfolio", prompt_suffix="> ", default="", show_default=False)
                except (EOFError, click.Abort):
                    break
                if not session.execute(line):
                    break
    finally:
        if refresher is not None:
            refresher.stop(timeout=config.feed.latency_seconds + 1)

    session.execute("status")
