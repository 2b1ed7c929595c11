"""Dotfiles repository checkout.

Clones the repository when no local copy exists, otherwise fetches and
fast-forwards it. A failed pull (diverged history, no network) keeps the
existing local tree; a failed clone leaves nothing to deploy and is fatal.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from alpi.models.mode import ExecutionMode
from alpi.utils.shell import run_command

logger = logging.getLogger(__name__)


class RepoError(RuntimeError):
    """Raised when the repository cannot be cloned."""


class RepoAction(str, Enum):
    """What happened to the local checkout."""

    CLONED = "cloned"
    UPDATED = "updated"
    KEPT = "kept"


@dataclass(frozen=True, slots=True)
class RepoSyncResult:
    """Result of syncing the local checkout.

    Attributes:
        directory: Local checkout.
        action: Cloned, updated, or kept as-is after a failed pull.
        dry_run: Whether this was a preview.
        warning: Why the existing tree was kept.
    """

    directory: Path
    action: RepoAction
    dry_run: bool = False
    warning: str | None = None


def sync_repository(url: str, directory: Path, *, mode: ExecutionMode) -> RepoSyncResult:
    """Clone ``url`` into ``directory`` or fast-forward an existing clone.

    Args:
        url: Remote repository URL.
        directory: Local checkout location.
        mode: Apply or preview.

    Returns:
        RepoSyncResult describing the outcome.

    Raises:
        RepoError: If cloning fails.
    """
    if (directory / ".git").is_dir():
        if mode.is_preview:
            logger.info("Dry-run: would fetch and pull %s", directory)
            return RepoSyncResult(directory=directory, action=RepoAction.UPDATED, dry_run=True)

        logger.info("Updating repo: %s", directory)
        git = ["git", "-C", str(directory)]
        fetch = run_command([*git, "fetch", "--all", "--prune"], timeout=None)
        if not fetch.success:
            warning = f"git fetch failed, keeping existing local tree: {fetch.stderr.strip()}"
            logger.warning(warning)
            return RepoSyncResult(directory=directory, action=RepoAction.KEPT, warning=warning)

        pull = run_command([*git, "pull", "--ff-only"], timeout=None)
        if not pull.success:
            warning = "git pull failed (diverged?), keeping existing local tree"
            logger.warning(warning)
            return RepoSyncResult(directory=directory, action=RepoAction.KEPT, warning=warning)

        return RepoSyncResult(directory=directory, action=RepoAction.UPDATED)

    if mode.is_preview:
        logger.info("Dry-run: would clone %s -> %s", url, directory)
        return RepoSyncResult(directory=directory, action=RepoAction.CLONED, dry_run=True)

    logger.info("Cloning: %s -> %s", url, directory)
    directory.parent.mkdir(parents=True, exist_ok=True)
    clone = run_command(["git", "clone", url, str(directory)], timeout=None)
    if not clone.success:
        msg = f"Failed to clone {url}: {clone.stderr.strip()}"
        raise RepoError(msg)
    return RepoSyncResult(directory=directory, action=RepoAction.CLONED)
