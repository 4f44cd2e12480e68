"""Main CLI entry point for Simfolio.

This module provides the main click group and lazy loading
for command modules to keep startup fast.
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from simfolio.config import SimfolioConfig, load_config

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when they are actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        attr = getattr(module, cmd_name, None)
        if not isinstance(attr, click.Command):
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(attr)
        return attr


LAZY_SUBCOMMANDS = {
    "market": "simfolio.cli.market",
    "play": "simfolio.cli.play",
    "config": "simfolio.cli.settings",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(level: str) -> None:
    """Route log records through rich at the given level."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def get_config(ctx: Optional[click.Context] = None) -> SimfolioConfig:
    """Get the configuration loaded for this invocation.

    Falls back to loading it directly when called outside the CLI group.
    """
    if ctx is not None:
        root = ctx.find_root()
        if isinstance(root.obj, dict) and "config" in root.obj:
            return root.obj["config"]
    return load_config()


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="simfolio")
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="SIMFOLIO_CONFIG",
    help="Path to config.toml (default: ~/.config/simfolio/config.toml).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """Simfolio - simulated investment portfolio.

    Practice investing with virtual credits against a simulated market
    of stocks, crypto, funds, fixed deposits and bonds.

    \b
    Quick Start:
      simfolio market          # See today's simulated prices
      simfolio play            # Start a portfolio session
      simfolio config show     # Show the effective configuration
    """
    ctx.ensure_object(dict)

    config = load_config(config_path)
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path

    setup_logging("DEBUG" if verbose else config.logging.level)

    if config.error:
        console.print(f"[yellow]{escape(config.error)}[/yellow]")
        console.print("[yellow]Using defaults.[/yellow]")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
