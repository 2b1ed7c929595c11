"""Dry-run command implementation.

Previews the install pipeline without changing anything.
"""

from typing import Annotated

import typer

from alpi.cli.types import StackChoice, run_pipelines
from alpi.core.executor import PipelineKind
from alpi.models.mode import ExecutionMode

app = typer.Typer(
    help="Preview a full install without changing anything.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def dry_run(
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
) -> None:
    """Preview the install pipeline.

    Equivalent to `alpi install --dry-run`.
    """
    if ctx.invoked_subcommand is not None:
        return

    run_pipelines(ctx, stack, PipelineKind.INSTALL, ExecutionMode.PREVIEW)
