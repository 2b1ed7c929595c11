"""Init command implementation.

Writes the built-in stack configuration to config.toml for editing.
"""

from pathlib import Path
from typing import Annotated

import typer

from alpi.core.config import ConfigError, save_config
from alpi.core.paths import get_config_path
from alpi.models.stack import default_stacks
from alpi.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Write the default configuration file.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the config file.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write the built-in desktop and apps stacks to config.toml.

    Edit the file afterwards to change the repository, package lists,
    config mapping or session settings. Tables may be trimmed to only the
    keys you change; missing keys fall back to the built-in defaults.

    Examples:
        alpi init
        alpi init --force
        alpi init --output ./alpi.toml
    """
    if ctx.invoked_subcommand is not None:
        return

    obj = ctx.obj or {}
    output_path = output or obj.get("config_path") or get_config_path()

    if output_path.exists():
        if not force:
            print_error(f"Config already exists: {output_path}")
            print_info("Use --force to overwrite.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing config: {output_path}")

    stacks = default_stacks()
    try:
        saved = save_config(stacks, output_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    for stack in stacks.values():
        console.print(
            f"  [info]{stack.name}[/info]: {len(stack.packages)} packages, "
            f"{len(stack.config_dirs)} config dirs"
        )
    print_success(f"Config written to {saved}")
