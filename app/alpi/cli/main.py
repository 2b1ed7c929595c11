"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from alpi import __version__
from alpi.cli.commands import dry_run, init, install, ledger, uninstall, update, verify
from alpi.core.guards import RootUserError, ensure_not_root
from alpi.utils.formatting import configure_logging, print_error

# Create main Typer app
app = typer.Typer(
    name="alpi",
    help="Arch Linux post-install: niri desktop and application stack.",
    invoke_without_command=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"alpi version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only show errors.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Config file (default: ~/.config/alpi/config.toml).",
        ),
    ] = None,
) -> None:
    """alpi - Arch Linux post-install for the niri Wayland desktop.

    Dotfiles are deployed as symlinks, everything created is recorded in a
    ledger, and the whole setup can be verified and uninstalled.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, quiet=quiet)

    try:
        ensure_not_root()
    except RootUserError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config


# Register commands
app.add_typer(install.app, name="install")
app.add_typer(update.app, name="update")
app.add_typer(dry_run.app, name="dry-run")
app.add_typer(uninstall.app, name="uninstall")
app.add_typer(verify.app, name="verify")
app.add_typer(ledger.app, name="ledger")
app.add_typer(init.app, name="init")


if __name__ == "__main__":
    app()
