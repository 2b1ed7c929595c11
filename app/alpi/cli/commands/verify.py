"""Verify command implementation.

Checks that every expected piece is present and wired up.
"""

from typing import Annotated

import typer

from alpi.cli.display import create_verify_table, print_verify_summary
from alpi.cli.types import StackChoice, get_home, get_ledger, load_stacks
from alpi.core.verifier import Verifier
from alpi.utils.formatting import console

app = typer.Typer(
    help="Check installation health.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def verify(
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
    """Verify commands, symlinks, session, services, groups and ledger.

    Exits with code 1 if any hard check failed. Warnings (service not
    enabled, group not joined yet) never fail the run.
    """
    if ctx.invoked_subcommand is not None:
        return

    home = get_home()
    failed = False
    for config in load_stacks(ctx, stack):
        report = Verifier(config, home, get_ledger(config)).verify()
        console.print()
        console.print(create_verify_table(report, f"{config.display_name} - Verify"))
        print_verify_summary(report)
        failed = failed or report.exit_code != 0

    if failed:
        raise typer.Exit(code=1)
