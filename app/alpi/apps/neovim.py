"""LazyVim bootstrap.

Installs the LazyVim starter as the neovim config only when no
``~/.config/nvim`` exists yet. An existing config is never touched.
"""

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from alpi.models.mode import ExecutionMode
from alpi.utils.shell import command_exists, run_interactive

logger = logging.getLogger(__name__)

LAZYVIM_STARTER = "https://github.com/LazyVim/starter"


class LazyVimAction(str, Enum):
    """Outcome of the bootstrap."""

    INSTALLED = "installed"
    NO_NEOVIM = "no_neovim"
    EXISTING_CONFIG = "existing_config"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LazyVimResult:
    """Result of :func:`bootstrap_lazyvim`.

    Attributes:
        directory: Neovim config directory.
        action: What happened.
        synced: Headless plugin sync succeeded, None if not attempted.
        dry_run: Whether this was a preview.
        error: Error message if cloning failed.
    """

    directory: Path
    action: LazyVimAction
    synced: bool | None = None
    dry_run: bool = False
    error: str | None = None


def nvim_config_dir(home: Path) -> Path:
    """Neovim config directory under ``home``."""
    return home / ".config" / "nvim"


def is_lazyvim_layout(directory: Path) -> bool:
    """Check for the starter's ``lua/config/lazy.lua``."""
    return (directory / "lua" / "config" / "lazy.lua").is_file()


def bootstrap_lazyvim(home: Path, *, mode: ExecutionMode) -> LazyVimResult:
    """Clone the LazyVim starter into ``~/.config/nvim`` if it is absent.

    Args:
        home: Target home directory.
        mode: Apply or preview.

    Returns:
        LazyVimResult describing the outcome.
    """
    directory = nvim_config_dir(home)
    dry_run = mode.is_preview

    if not command_exists("nvim"):
        logger.warning("neovim not found - skipping LazyVim bootstrap")
        return LazyVimResult(directory=directory, action=LazyVimAction.NO_NEOVIM, dry_run=dry_run)

    if directory.exists():
        logger.info("%s already exists, leaving neovim config untouched", directory)
        return LazyVimResult(
            directory=directory, action=LazyVimAction.EXISTING_CONFIG, dry_run=dry_run
        )

    if dry_run:
        logger.info("Dry-run: would clone %s into %s", LAZYVIM_STARTER, directory)
        return LazyVimResult(directory=directory, action=LazyVimAction.INSTALLED, dry_run=True)

    directory.parent.mkdir(parents=True, exist_ok=True)
    if run_interactive(["git", "clone", "--depth=1", LAZYVIM_STARTER, str(directory)]) != 0:
        return LazyVimResult(
            directory=directory,
            action=LazyVimAction.FAILED,
            error=f"git clone {LAZYVIM_STARTER} failed",
        )
    shutil.rmtree(directory / ".git", ignore_errors=True)

    synced = run_interactive(["nvim", "--headless", "+Lazy! sync", "+qa"]) == 0
    if not synced:
        logger.warning("LazyVim sync returned non-zero - plugins will finish on first launch")

    return LazyVimResult(directory=directory, action=LazyVimAction.INSTALLED, synced=synced)
