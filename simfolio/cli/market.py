"""Market data command for Simfolio CLI."""

from typing import Optional

import click
from rich.console import Console

from simfolio.cli.display import market_table
from simfolio.models import AssetCategory

console = Console()


@click.command()
@click.option(
    "-c", "--category",
    type=click.Choice([c.value for c in AssetCategory]),
    default=None,
    help="Only show instruments of this category.",
)
@click.pass_context
def market(ctx: click.Context, category: Optional[str]) -> None:
    """Fetch and display a simulated market snapshot.

    \b
    Examples:
      simfolio market                  # All instruments
      simfolio market -c crypto        # Crypto only
      simfolio market -c fixed-deposit # Fixed deposits with rates
    """
    from simfolio.cli.main import get_config
    from simfolio.feed import PriceFeedSimulator

    config = get_config(ctx)
    feed = PriceFeedSimulator(latency=config.feed.latency_seconds, seed=config.feed.seed)

    with console.status("[bold cyan]Fetching market data...[/bold cyan]"):
        snapshot = feed.fetch_snapshot()

    if category is not None:
        snapshot = [inst for inst in snapshot if inst.category == category]

    title = f"Market ({category})" if category else "Market"
    console.print(market_table(snapshot, title=title))
