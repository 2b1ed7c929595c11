"""Ledger command implementation.

Lists the files and packages recorded for each stack.
"""

from typing import Annotated

import typer
from rich.table import Table

from alpi.cli.types import CategoryChoice, StackChoice, get_ledger, load_stacks
from alpi.core.ledger import LedgerCategory
from alpi.utils.formatting import console, print_info

app = typer.Typer(
    help="Show tracked files and packages.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_ledger(
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
    category: Annotated[
        CategoryChoice | None,
        typer.Option(
            "--category",
            "-c",
            help="Only show one category.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """List ledger entries.

    Examples:
        alpi ledger
        alpi ledger --stack desktop --category file
    """
    if ctx.invoked_subcommand is not None:
        return

    categories = [category.to_category()] if category else list(LedgerCategory)

    for config in load_stacks(ctx, stack):
        ledger = get_ledger(config)
        if not ledger.exists():
            print_info(f"{config.name}: no ledger at {ledger.path}")
            continue

        table = Table(
            title=f"{config.name} ({ledger.path})",
            show_header=True,
            header_style="bold_header",
            border_style="border",
        )
        table.add_column("Category", width=8)
        table.add_column("Value", no_wrap=True)

        for cat in categories:
            for value in ledger.list(cat):
                table.add_row(f"[muted]{cat.value}[/muted]", value)

        console.print(table)
        counts = ledger.counts()
        console.print(
            f"  [muted]{counts[LedgerCategory.FILE]} files, "
            f"{counts[LedgerCategory.PACKAGE]} packages[/muted]"
        )
