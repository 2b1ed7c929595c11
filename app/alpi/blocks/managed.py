"""Marker-delimited managed text blocks.

A managed block is a region of a text file fully owned by alpi::

    # >>> NAME
    ...content...
    # <<< NAME

Applying a block deletes every existing region between the markers and
appends a fresh copy, so re-running always leaves exactly one current
block. Single exact lines (exports) are handled with the same
idempotent add/remove semantics.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from alpi.models.mode import ExecutionMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ManagedBlock:
    """A pair of begin/end marker lines.

    Markers are matched as substrings of a line, so a begin marker may be
    followed by a comment such as ``- managed by alpi``.

    Attributes:
        begin: Text identifying the first line of the block.
        end: Text identifying the last line of the block.
    """

    begin: str
    end: str

    def __post_init__(self) -> None:
        """Validate markers."""
        if not self.begin or not self.end:
            msg = "Block markers cannot be empty"
            raise ValueError(msg)
        if "\n" in self.begin or "\n" in self.end:
            msg = "Block markers must be single lines"
            raise ValueError(msg)

    def is_present(self, text: str) -> bool:
        """Check if a begin marker appears in ``text``."""
        return any(self.begin in line for line in text.splitlines())

    def remove(self, text: str) -> str:
        """Delete every region from a begin line through the next end line.

        An unterminated block is deleted to the end of the text, matching
        ``sed '/begin/,/end/d'``.
        """
        kept: list[str] = []
        inside = False
        for line in text.splitlines(keepends=True):
            if not inside and self.begin in line:
                inside = True
                continue
            if inside:
                if self.end in line:
                    inside = False
                continue
            kept.append(line)
        return "".join(kept)

    def render(self, body: str, header: str | None = None) -> str:
        """Render the delimited block for ``body``.

        Args:
            body: Block content without markers.
            header: Optional text appended to the begin marker line.
        """
        begin = f"{self.begin} {header}" if header else self.begin
        content = body if body.endswith("\n") or not body else body + "\n"
        return f"{begin}\n{content}{self.end}\n"

    def apply(self, text: str, body: str, header: str | None = None) -> str:
        """Replace any existing copy of the block with a fresh one at the end."""
        stripped = self.remove(text).rstrip("\n")
        rendered = self.render(body, header)
        if not stripped:
            return rendered
        return f"{stripped}\n\n{rendered}"


def _read_text(path: Path) -> str:
    """Read ``path``, returning an empty string if it does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def _write_if_changed(path: Path, original: str, updated: str, *, mode: ExecutionMode) -> bool:
    """Write ``updated`` unless it equals ``original`` or mode is preview."""
    if updated == original:
        return False
    if mode.is_preview:
        logger.info("Dry-run: would update %s", path)
        return True
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(updated, encoding="utf-8")
    return True


def apply_block(
    path: Path,
    block: ManagedBlock,
    body: str,
    *,
    mode: ExecutionMode,
    header: str | None = None,
) -> bool:
    """Write ``block`` with ``body`` into ``path``.

    Returns:
        True if the file changed (or would change in preview mode).

    Raises:
        OSError: If the file cannot be read or written.
    """
    original = _read_text(path)
    updated = block.apply(original, body, header)
    return _write_if_changed(path, original, updated, mode=mode)


def remove_block(path: Path, block: ManagedBlock, *, mode: ExecutionMode) -> bool:
    """Delete ``block`` from ``path`` if present.

    Returns:
        True if the file changed (or would change in preview mode).

    Raises:
        OSError: If the file cannot be read or written.
    """
    original = _read_text(path)
    if not block.is_present(original):
        return False
    return _write_if_changed(path, original, block.remove(original), mode=mode)


def ensure_line(path: Path, line: str, *, mode: ExecutionMode) -> bool:
    """Append ``line`` to ``path`` unless it is already present verbatim.

    Returns:
        True if the line was (or would be) appended.

    Raises:
        OSError: If the file cannot be read or written.
    """
    original = _read_text(path)
    if line in original.splitlines():
        return False
    prefix = original if not original or original.endswith("\n") else original + "\n"
    return _write_if_changed(path, original, f"{prefix}{line}\n", mode=mode)


def remove_line(path: Path, line: str, *, mode: ExecutionMode) -> bool:
    """Delete every occurrence of ``line`` from ``path``.

    Returns:
        True if the file changed (or would change in preview mode).

    Raises:
        OSError: If the file cannot be read or written.
    """
    original = _read_text(path)
    lines = original.splitlines(keepends=True)
    kept = [existing for existing in lines if existing.rstrip("\r\n") != line]
    if len(kept) == len(lines):
        return False
    return _write_if_changed(path, original, "".join(kept), mode=mode)
