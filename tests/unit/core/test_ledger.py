"""Unit tests for the state ledger."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.models.mode import ExecutionMode

APPLY = ExecutionMode.APPLY
PREVIEW = ExecutionMode.PREVIEW


class TestAdd:
    """Tests for StateLedger.add."""

    def test_creates_file_and_directory(self, ledger: StateLedger) -> None:
        """The first write creates the ledger and its directory."""
        assert not ledger.path.parent.exists()

        assert ledger.add(LedgerCategory.FILE, "/h/.config/niri/config.kdl", mode=APPLY) is True

        assert ledger.path.read_text() == "file:/h/.config/niri/config.kdl\n"

    def test_package_category_written_as_pkg(self, ledger: StateLedger) -> None:
        """Packages use the 'pkg' prefix on disk."""
        ledger.add(LedgerCategory.PACKAGE, "niri", mode=APPLY)

        assert ledger.path.read_text() == "pkg:niri\n"

    def test_no_duplicates(self, ledger: StateLedger) -> None:
        """Adding the same entry twice writes one line."""
        ledger.add(LedgerCategory.PACKAGE, "foot", mode=APPLY)

        assert ledger.add(LedgerCategory.PACKAGE, "foot", mode=APPLY) is False
        assert ledger.path.read_text().splitlines() == ["pkg:foot"]

    def test_same_value_different_category(self, ledger: StateLedger) -> None:
        """Categories are part of the key."""
        ledger.add(LedgerCategory.PACKAGE, "foot", mode=APPLY)
        ledger.add(LedgerCategory.FILE, "foot", mode=APPLY)

        assert ledger.path.read_text().splitlines() == ["pkg:foot", "file:foot"]

    def test_preview_never_writes(self, ledger: StateLedger) -> None:
        """Preview mode leaves the ledger untouched."""
        assert ledger.add(LedgerCategory.FILE, "/h/x", mode=PREVIEW) is False
        assert not ledger.path.exists()

    def test_rejects_newline_in_value(self, ledger: StateLedger) -> None:
        """A value with a newline would corrupt the line format."""
        assert ledger.add(LedgerCategory.FILE, "/h/a\nfile:/etc/passwd", mode=APPLY) is False
        assert not ledger.path.exists()

    def test_write_failure_returns_false(self, tmp_path: Path) -> None:
        """An unwritable location is reported, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        ledger = StateLedger(blocker / "state")

        assert ledger.add(LedgerCategory.FILE, "/h/x", mode=APPLY) is False


class TestList:
    """Tests for StateLedger.list and related queries."""

    def test_missing_file_is_empty(self, ledger: StateLedger) -> None:
        """No ledger means nothing recorded."""
        assert ledger.list(LedgerCategory.FILE) == []
        assert not ledger.exists()

    def test_file_order_and_filtering(self, ledger: StateLedger) -> None:
        """Values come back in file order, filtered by category."""
        for value in ("/h/b", "/h/a"):
            ledger.add(LedgerCategory.FILE, value, mode=APPLY)
        ledger.add(LedgerCategory.PACKAGE, "mako", mode=APPLY)

        assert ledger.list(LedgerCategory.FILE) == ["/h/b", "/h/a"]
        assert ledger.list(LedgerCategory.PACKAGE) == ["mako"]

    def test_only_first_colon_delimits(self, ledger: StateLedger) -> None:
        """Values may contain colons."""
        ledger.path.parent.mkdir(parents=True)
        ledger.path.write_text("file:/h/odd:name\n")

        assert ledger.list(LedgerCategory.FILE) == ["/h/odd:name"]

    def test_reads_shell_installer_ledger(self, ledger: StateLedger) -> None:
        """Ledgers written by the shell installer are understood."""
        ledger.path.parent.mkdir(parents=True)
        ledger.path.write_text("file:/h/.config/foot/foot.ini\npkg:foot\n\n")

        assert ledger.counts() == {LedgerCategory.FILE: 1, LedgerCategory.PACKAGE: 1}

    def test_unreadable_file_is_empty(self, ledger: StateLedger) -> None:
        """Read failures yield an empty list."""
        ledger.path.parent.mkdir(parents=True)
        ledger.path.write_text("pkg:foot\n")

        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            assert ledger.list(LedgerCategory.PACKAGE) == []

    def test_contains(self, ledger: StateLedger) -> None:
        """contains matches category and value exactly."""
        ledger.add(LedgerCategory.PACKAGE, "wofi", mode=APPLY)

        assert ledger.contains(LedgerCategory.PACKAGE, "wofi")
        assert not ledger.contains(LedgerCategory.FILE, "wofi")


class TestRemoveAndClear:
    """Tests for removing entries and clearing the ledger."""

    def test_remove_entry(self, ledger: StateLedger) -> None:
        """A single entry can be removed."""
        ledger.add(LedgerCategory.PACKAGE, "a", mode=APPLY)
        ledger.add(LedgerCategory.PACKAGE, "b", mode=APPLY)

        assert ledger.remove_entry(LedgerCategory.PACKAGE, "a", mode=APPLY) is True
        assert ledger.list(LedgerCategory.PACKAGE) == ["b"]

    def test_remove_absent_entry(self, ledger: StateLedger) -> None:
        """Removing something not recorded is not an error."""
        assert ledger.remove_entry(LedgerCategory.PACKAGE, "ghost", mode=APPLY) is False

    def test_clear_removes_file_and_empty_dir(self, ledger: StateLedger) -> None:
        """Clearing deletes the file and its now-empty directory."""
        ledger.add(LedgerCategory.PACKAGE, "a", mode=APPLY)

        assert ledger.clear(mode=APPLY) is True
        assert not ledger.path.exists()
        assert not ledger.path.parent.exists()

    def test_clear_keeps_non_empty_dir(
        self, ledger: StateLedger, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Other files in the data directory survive and the reason is logged."""
        ledger.add(LedgerCategory.PACKAGE, "a", mode=APPLY)
        (ledger.path.parent / "notes").write_text("keep")

        with caplog.at_level(logging.DEBUG, logger="alpi.core.ledger"):
            assert ledger.clear(mode=APPLY) is True

        assert ledger.path.parent.is_dir()
        assert not ledger.exists()
        assert "Keeping ledger directory" in caplog.text

    def test_clear_preview(self, ledger: StateLedger) -> None:
        """Preview never deletes the ledger."""
        ledger.add(LedgerCategory.PACKAGE, "a", mode=APPLY)

        assert ledger.clear(mode=PREVIEW) is False
        assert ledger.exists()
