"""Symlink synchronizer.

Reconciles a destination path with a source file:

- source missing: warn and skip, nothing changes
- destination already the correct symlink: nothing to do, still recorded
- destination is the source itself through a linked parent: left alone
- destination is a regular file: moved to a timestamped backup first
- destination is a wrong or broken symlink: removed (never its target)
- finally: parent directories created, symlink created, ledger updated

User data is never overwritten. In preview mode nothing on disk changes;
the result describes what an apply run would do.
"""

import logging
import os
from pathlib import Path

from alpi.core.backup import backup_path_for, move_to_backup
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.models.mode import ExecutionMode
from alpi.models.results import SyncResult, SyncStatus

logger = logging.getLogger(__name__)


def points_to(destination: Path, source: Path) -> bool:
    """Check if ``destination`` is a symlink resolving to ``source``."""
    if not destination.is_symlink():
        return False
    try:
        return os.path.realpath(destination) == os.path.realpath(source)
    except OSError:
        return False


def _same_file(destination: Path, source: Path) -> bool:
    """Check if an existing ``destination`` resolves to ``source`` itself."""
    if not destination.exists():
        return False
    try:
        return os.path.realpath(destination) == os.path.realpath(source)
    except OSError:
        return False


class SymlinkSynchronizer:
    """Creates and repairs managed symlinks.

    Attributes:
        ledger: Ledger receiving a ``file`` entry for every managed symlink.
    """

    def __init__(self, ledger: StateLedger) -> None:
        """Initialize the synchronizer.

        Args:
            ledger: Ledger for the current stack.
        """
        self._ledger = ledger

    @property
    def ledger(self) -> StateLedger:
        """Ledger receiving managed destinations."""
        return self._ledger

    def sync(self, source: Path, destination: Path, *, mode: ExecutionMode) -> SyncResult:
        """Make ``destination`` a symlink to ``source``.

        Args:
            source: File inside the repository.
            destination: Managed symlink path.
            mode: Apply or preview.

        Returns:
            SyncResult describing what was (or would be) done.
        """
        dry_run = mode.is_preview

        # 1. Missing source is a warning, not an abort
        if not source.exists():
            logger.warning("Source not found in repo, skipping: %s", source)
            return SyncResult(
                source=source,
                destination=destination,
                status=SyncStatus.SKIPPED,
                dry_run=dry_run,
                error=f"Source not found: {source}",
            )

        # 2. Already correct; keep the ledger in step in case it was lost
        if points_to(destination, source):
            logger.debug("Already correct: %s", destination)
            self._ledger.add(LedgerCategory.FILE, str(destination), mode=mode)
            return SyncResult(
                source=source,
                destination=destination,
                status=SyncStatus.UNCHANGED,
                dry_run=dry_run,
            )

        # A linked parent directory already exposes the source file here
        if _same_file(destination, source):
            logger.info("Destination is the source via a linked directory: %s", destination)
            return SyncResult(
                source=source,
                destination=destination,
                status=SyncStatus.UNCHANGED,
                dry_run=dry_run,
                error=f"Reached through a symlinked directory: {destination}",
            )

        if destination.is_dir() and not destination.is_symlink():
            logger.warning("Destination is a directory, not replacing: %s", destination)
            return SyncResult(
                source=source,
                destination=destination,
                status=SyncStatus.FAILED,
                dry_run=dry_run,
                error=f"Destination is a directory: {destination}",
            )

        if destination.is_symlink():
            status = SyncStatus.REPLACED
        elif destination.exists():
            status = SyncStatus.BACKED_UP
        else:
            status = SyncStatus.LINKED

        if dry_run:
            logger.info("Dry-run: would symlink %s -> %s (%s)", destination, source, status.value)
            predicted = backup_path_for(destination) if status == SyncStatus.BACKED_UP else None
            return SyncResult(
                source=source,
                destination=destination,
                status=status,
                dry_run=True,
                backup_path=predicted,
            )

        backup: Path | None = None
        try:
            # 3. Regular file: back it up, never overwrite
            if status == SyncStatus.BACKED_UP:
                backup = move_to_backup(destination)
                logger.warning("Backed up existing file: %s -> %s", destination, backup)

            # 4. Wrong or broken symlink: remove the link only
            if destination.is_symlink():
                destination.unlink()

            # 5. and 6.
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.symlink_to(source)
        except OSError as e:
            logger.warning("Could not symlink %s -> %s: %s", destination, source, e)
            return SyncResult(
                source=source,
                destination=destination,
                status=SyncStatus.FAILED,
                backup_path=backup,
                error=str(e),
            )

        # 7.
        self._ledger.add(LedgerCategory.FILE, str(destination), mode=mode)
        logger.info("Symlinked: %s -> %s", destination, source)

        return SyncResult(
            source=source,
            destination=destination,
            status=status,
            backup_path=backup,
        )
