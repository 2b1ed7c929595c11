"""Path mapping from repository directories to destination directories.

Enumerates every regular file below a source directory and computes the
destination it is deployed to, preserving the relative subdirectory
structure::

    repo/waybar/config          -> ~/.config/waybar/config
    repo/waybar/scripts/foo.sh  -> ~/.config/waybar/scripts/foo.sh

The same enumeration drives deploy and verify, so both always agree on
the set of destinations.
"""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MappedFile:
    """A single source file and where it is deployed.

    Attributes:
        source: Absolute path of the file inside the repository.
        relative: Path relative to the mapped source root.
        destination: Absolute destination path.
    """

    source: Path
    relative: PurePosixPath
    destination: Path


def iter_source_files(
    root: Path,
    *,
    recursive: bool = True,
) -> Iterator[tuple[Path, PurePosixPath]]:
    """Yield ``(absolute file, relative path)`` for every file under ``root``.

    Symlinks to files count as files; broken symlinks and directories are
    not yielded. Output is sorted lexicographically by relative path.

    Args:
        root: Directory to enumerate. Nothing is yielded if it is missing.
        recursive: Descend into subdirectories. If False only the immediate
            files of ``root`` are yielded.
    """
    if not root.is_dir():
        return

    relatives: list[PurePosixPath] = []

    if recursive:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            base = Path(dirpath)
            for filename in filenames:
                candidate = base / filename
                if candidate.is_file():
                    relatives.append(PurePosixPath(candidate.relative_to(root).as_posix()))
    else:
        for candidate in root.iterdir():
            if candidate.is_file():
                relatives.append(PurePosixPath(candidate.name))

    for relative in sorted(relatives, key=str):
        yield root / relative, relative


@dataclass(frozen=True, slots=True)
class DirectoryMapping:
    """Lazy mapping of one source directory onto one destination directory.

    Iterating yields :class:`MappedFile` values; the source tree is walked
    on each iteration.

    Attributes:
        source_root: Directory inside the repository.
        destination_root: Directory the files are deployed to.
        recursive: Whether subdirectories are included.
        label: Short name for log and report output.
    """

    source_root: Path
    destination_root: Path
    recursive: bool = True
    label: str = ""

    @property
    def source_missing(self) -> bool:
        """Check if the source directory does not exist."""
        return not self.source_root.is_dir()

    def __iter__(self) -> Iterator[MappedFile]:
        for source, relative in iter_source_files(self.source_root, recursive=self.recursive):
            yield MappedFile(
                source=source,
                relative=relative,
                destination=self.destination_root / relative,
            )

    def destinations(self) -> list[Path]:
        """All destination paths of this mapping."""
        return [mapped.destination for mapped in self]


def map_directory(
    source_root: Path,
    destination_root: Path,
    *,
    recursive: bool = True,
    label: str = "",
) -> DirectoryMapping:
    """Map a source directory onto a destination directory.

    A missing source directory is not an error: the mapping is empty and
    ``source_missing`` is set so the caller can warn.

    Args:
        source_root: Directory inside the repository.
        destination_root: Directory the files are deployed to.
        recursive: Include subdirectories.
        label: Short name for log output.

    Returns:
        DirectoryMapping over the two roots.
    """
    mapping = DirectoryMapping(
        source_root=source_root,
        destination_root=destination_root,
        recursive=recursive,
        label=label or source_root.name,
    )
    if mapping.source_missing:
        logger.warning("Source directory not found: %s", source_root)
    return mapping
