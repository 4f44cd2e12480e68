"""Configuration commands for Simfolio CLI."""

import click
import toml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """View or create the Simfolio configuration file.

    \b
    Commands:
      show  - Display the effective configuration
      init  - Write a config file with default values

    Without a subcommand, shows the configuration.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


@config.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Display the effective configuration."""
    from simfolio.cli.main import get_config

    cfg = get_config(ctx)
    source = str(cfg.source) if cfg.source else "defaults (no config file)"
    body = toml.dumps(cfg.model_dump(exclude_none=True)).strip()

    console.print(Panel(
        f"[dim]Source: {escape(source)}[/dim]\n\n{escape(body)}",
        title="[bold]Configuration[/bold]",
        border_style="cyan",
    ))


@config.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Write a config file with default values."""
    from simfolio.config import get_config_path, write_default_config

    path = get_config_path(ctx.obj.get("config_path") if ctx.obj else None)
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
        return

    written = write_default_config(path)
    console.print(f"[green]Wrote default config to {written}[/green]")
