"""State ledger for everything alpi creates.

The ledger is a flat UTF-8 text file with one ``category:value`` entry per
line, e.g.::

    file:/home/user/.config/niri/config.kdl
    pkg:niri

Uninstall reads it back, so nothing is guessed or hardcoded there. Every
operation is best-effort: a failed read yields "nothing recorded", a failed
write is logged as a warning and reported through the return value.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from alpi.models.mode import ExecutionMode

logger = logging.getLogger(__name__)


class LedgerCategory(str, Enum):
    """Kinds of resources tracked in the ledger.

    The package category is stored as ``pkg`` so ledgers written by the
    shell installer keep working.
    """

    FILE = "file"
    PACKAGE = "pkg"


class StateLedger:
    """Append-only-by-key record store backed by a text file.

    Attributes:
        path: Location of the ledger file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the ledger.

        Args:
            path: Ledger file. Created on first write, not before.
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Ledger file location."""
        return self._path

    def exists(self) -> bool:
        """Check if the ledger file exists."""
        return self._path.is_file()

    @staticmethod
    def format_entry(category: LedgerCategory, value: str) -> str:
        """Serialize one entry as a ledger line (without newline)."""
        return f"{category.value}:{value}"

    def _read_lines(self) -> list[str]:
        """Read raw non-empty lines, returning [] on any read failure."""
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read ledger %s: %s", self._path, e)
            return []
        return [line for line in text.splitlines() if line]

    def _write_lines(self, lines: list[str]) -> bool:
        """Rewrite the whole ledger file."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            content = "".join(f"{line}\n" for line in lines)
            self._path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write ledger %s: %s", self._path, e)
            return False
        return True

    def add(self, category: LedgerCategory, value: str, *, mode: ExecutionMode) -> bool:
        """Record a value unless the exact entry is already present.

        Args:
            category: Entry category.
            value: Absolute path or package identifier.
            mode: Preview mode never writes.

        Returns:
            True if a new line was appended.
        """
        if "\n" in value or "\r" in value or not value:
            logger.warning("Refusing to record invalid ledger value: %r", value)
            return False

        if mode.is_preview:
            return False

        line = self.format_entry(category, value)
        if line in self._read_lines():
            return False

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open(mode="a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
        except OSError as e:
            logger.warning("Could not write ledger %s: %s", self._path, e)
            return False

        logger.debug("Recorded %s", line)
        return True

    def list(self, category: LedgerCategory) -> list[str]:
        """Return all values for ``category`` in insertion order."""
        prefix = f"{category.value}:"
        return [line[len(prefix) :] for line in self._read_lines() if line.startswith(prefix)]

    def contains(self, category: LedgerCategory, value: str) -> bool:
        """Check if an entry is recorded."""
        return self.format_entry(category, value) in self._read_lines()

    def counts(self) -> dict[LedgerCategory, int]:
        """Number of recorded entries per category."""
        return {category: len(self.list(category)) for category in LedgerCategory}

    def remove_entry(self, category: LedgerCategory, value: str, *, mode: ExecutionMode) -> bool:
        """Delete a single entry if present.

        Returns:
            True if the entry was removed.
        """
        line = self.format_entry(category, value)
        lines = self._read_lines()
        if line not in lines:
            return False
        if mode.is_preview:
            return False
        return self._write_lines([existing for existing in lines if existing != line])

    def clear(self, *, mode: ExecutionMode) -> bool:
        """Delete the ledger file and its directory if that is now empty.

        Returns:
            True if the ledger file was deleted.
        """
        if mode.is_preview or not self._path.exists():
            return False

        try:
            self._path.unlink()
        except OSError as e:
            logger.warning("Could not delete ledger %s: %s", self._path, e)
            return False

        try:
            self._path.parent.rmdir()
        except OSError as e:
            logger.debug("Keeping ledger directory %s: %s", self._path.parent, e)
        return True
