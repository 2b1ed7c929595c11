"""Update command implementation.

Pulls the dotfiles repository, ensures packages and re-syncs configs.
"""

from typing import Annotated

import typer

from alpi.cli.types import StackChoice, run_pipelines
from alpi.core.executor import PipelineKind
from alpi.models.mode import ExecutionMode

app = typer.Typer(
    help="Pull the repo and re-sync packages and configs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def update(
    ctx: typer.Context,
    stack: Annotated[
        StackChoice,
        typer.Option(
            "--stack",
            "-s",
            help="Stack to operate on.",
            case_sensitive=False,
        ),
    ] = StackChoice.ALL,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without changing anything.",
        ),
    ] = False,
) -> None:
    """Update an existing installation.

    Idempotent and safe to run at any time. New files in the repository
    are picked up automatically; already correct symlinks are left alone.

    Examples:
        alpi update
        alpi update --stack apps
    """
    if ctx.invoked_subcommand is not None:
        return

    run_pipelines(ctx, stack, PipelineKind.UPDATE, ExecutionMode.from_dry_run(dry_run))
