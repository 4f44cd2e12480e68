"""CLI commands for Simfolio.

This package provides the command-line interface for Simfolio,
the presentation layer over the portfolio ledger.
"""

from simfolio.cli.main import cli, main

__all__ = ["cli", "main"]
