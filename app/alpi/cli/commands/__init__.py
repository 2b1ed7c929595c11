"""CLI commands for alpi.

This package contains all subcommand implementations.
"""

from alpi.cli.commands import dry_run, init, install, ledger, uninstall, update, verify

__all__ = ["dry_run", "init", "install", "ledger", "uninstall", "update", "verify"]
