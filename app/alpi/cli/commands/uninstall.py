"""Uninstall command implementation.

Removes everything recorded in the ledger, and nothing else.
"""

from typing import Annotated

import typer

from alpi.cli.display import print_uninstall_report
from alpi.cli.types import StackChoice, get_home, get_ledger, load_stacks
from alpi.core.uninstaller import Uninstaller
from alpi.models.mode import ExecutionMode
from alpi.operators.pacman import PacmanOperator
from alpi.utils.formatting import console, print_info, print_step, print_success, print_warning

app = typer.Typer(
    help="Remove tracked symlinks and, optionally, packages.",
    invoke_without_command=True,
)


def _confirm_packages(packages: list[str]) -> bool:
    """List packages and ask before removing them."""
    print_warning(f"The following {len(packages)} packages were installed by alpi:")
    for package in packages:
        console.print(f"  - {package}")
    return typer.confirm("Remove these packages too?", default=False)


@app.callback(invoke_without_command=True)
def uninstall(
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
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Remove recorded packages without prompting.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be removed without changing anything.",
        ),
    ] = False,
) -> None:
    """Uninstall what alpi created.

    Only ledger entries that are still symlinks are removed; anything the
    user replaced with a real file stays. Packages are removed only after
    confirmation (or with --yes).

    Examples:
        alpi uninstall --stack desktop
        alpi uninstall -n            # Preview only
        alpi uninstall -y            # Also remove packages, no prompt
    """
    if ctx.invoked_subcommand is not None:
        return

    mode = ExecutionMode.from_dry_run(dry_run)
    home = get_home()
    confirm = (lambda _packages: True) if yes else _confirm_packages

    for config in load_stacks(ctx, stack):
        print_step(f"Uninstalling {config.display_name}")
        uninstaller = Uninstaller(config, home, get_ledger(config), PacmanOperator(), confirm)
        report = uninstaller.run(mode)
        print_uninstall_report(report, home)
        if report.ledger_found and config.repo_dir is not None and not dry_run:
            print_info(f"Repo cache preserved at: {config.repo_path(home)}")

    console.print()
    if dry_run:
        print_info("\\[dry-run] No changes made.")
    else:
        print_success("Uninstall complete")
