"""CLI package for alpi.

This package contains the Typer application and all subcommands.
"""

from alpi.cli.main import app

__all__ = ["app"]
