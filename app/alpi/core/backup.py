"""Timestamped backup naming.

Backups sit next to the original as ``<name>.bak.<YYYYmmdd_HHMMSS>``. The
timestamp has one-second resolution, so a counter suffix keeps two backups
taken within the same second from overwriting each other.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak."
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def backup_path_for(path: Path, now: datetime | None = None) -> Path:
    """Return a backup path for ``path`` that does not exist yet.

    Args:
        path: File that is about to be replaced.
        now: Timestamp to embed. Defaults to the current local time.

    Returns:
        ``<path>.bak.<timestamp>``, or ``<path>.bak.<timestamp>.<n>`` when
        the plain name is taken.
    """
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    candidate = path.with_name(f"{path.name}{BACKUP_SUFFIX}{stamp}")
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = path.with_name(f"{path.name}{BACKUP_SUFFIX}{stamp}.{counter}")
        counter += 1
    return candidate


def move_to_backup(path: Path, now: datetime | None = None) -> Path:
    """Rename ``path`` to a fresh backup path.

    Raises:
        OSError: If the rename fails.
    """
    backup = backup_path_for(path, now)
    path.rename(backup)
    logger.info("Backed up %s -> %s", path, backup)
    return backup


def copy_to_backup(path: Path, now: datetime | None = None) -> Path:
    """Copy ``path`` (with metadata) to a fresh backup path.

    Raises:
        OSError: If the copy fails.
    """
    backup = backup_path_for(path, now)
    shutil.copy2(str(path), str(backup))
    logger.info("Copied %s -> %s", path, backup)
    return backup
