"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from alpi.cli.display import print_pipeline_report
from alpi.core.config import require_config
from alpi.core.executor import PipelineKind, StackPipeline
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.core.paths import get_ledger_path
from alpi.core.repo import RepoError
from alpi.models.mode import ExecutionMode
from alpi.models.stack import StackConfig
from alpi.operators.base import OperatorError
from alpi.utils.formatting import print_error


class StackChoice(str, Enum):
    """Stacks selectable on the command line."""

    DESKTOP = "desktop"
    APPS = "apps"
    ALL = "all"


class CategoryChoice(str, Enum):
    """Ledger categories selectable on the command line."""

    FILE = "file"
    PACKAGE = "package"

    def to_category(self) -> LedgerCategory:
        """Map to the ledger category."""
        return LedgerCategory.FILE if self == CategoryChoice.FILE else LedgerCategory.PACKAGE


def get_home() -> Path:
    """Home directory stacks are deployed to."""
    return Path.home()


def load_stacks(ctx: typer.Context, choice: StackChoice) -> list[StackConfig]:
    """Load configuration and select stacks in pipeline order.

    Args:
        ctx: Typer context carrying the global ``--config`` option.
        choice: Stack selection.

    Returns:
        Selected stacks, desktop before apps.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    obj = ctx.obj or {}
    stacks = require_config(obj.get("config_path"))
    if choice == StackChoice.ALL:
        return [stacks["desktop"], stacks["apps"]]
    return [stacks[choice.value]]


def get_ledger(stack: StackConfig) -> StateLedger:
    """Ledger for ``stack`` in the XDG data directory."""
    return StateLedger(get_ledger_path(stack.ledger_name))


def run_pipelines(
    ctx: typer.Context,
    choice: StackChoice,
    kind: PipelineKind,
    mode: ExecutionMode,
) -> None:
    """Run the install or update pipeline for every selected stack.

    Shared by ``install``, ``update`` and ``dry-run``.

    Raises:
        typer.Exit: With code 1 on a fatal error or failed transaction.
    """
    home = get_home()
    failed = False
    for stack in load_stacks(ctx, choice):
        pipeline = StackPipeline(stack, home, get_ledger(stack))
        try:
            report = pipeline.run(kind, mode)
        except (RepoError, OperatorError) as e:
            print_error(f"{stack.name}: {e}")
            raise typer.Exit(code=1) from e
        print_pipeline_report(report, home)
        failed = failed or report.failed

    if failed:
        raise typer.Exit(code=1)
