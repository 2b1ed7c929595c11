"""Install command implementation.

Runs the full provisioning pipeline for the selected stacks.
"""

from typing import Annotated

import typer

from alpi.cli.types import StackChoice, run_pipelines
from alpi.core.executor import PipelineKind
from alpi.models.mode import ExecutionMode
from alpi.utils.formatting import print_info

app = typer.Typer(
    help="Install packages and deploy configs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def install(
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
    """Install from scratch.

    Safe on a clean Arch installation and alongside an existing X11/dwm
    setup: existing files are backed up, foreign session selectors are
    left alone.

    Examples:
        alpi install                  # Both stacks
        alpi install --stack desktop  # niri desktop only
        alpi install -n               # Preview only
    """
    if ctx.invoked_subcommand is not None:
        return

    run_pipelines(ctx, stack, PipelineKind.INSTALL, ExecutionMode.from_dry_run(dry_run))

    if not dry_run:
        print_info("Log out and back in for group changes, then verify with: alpi verify")
