"""Unit tests for marker-delimited managed blocks."""

from pathlib import Path

import pytest
from alpi.blocks.managed import ManagedBlock, apply_block, ensure_line, remove_block, remove_line
from alpi.models.mode import ExecutionMode

BLOCK = ManagedBlock(begin="# >>> TEST", end="# <<< TEST")


class TestManagedBlock:
    """Tests for the pure text operations."""

    @pytest.mark.parametrize(("begin", "end"), [("", "# <<<"), ("# >>>\nx", "# <<<")])
    def test_invalid_markers(self, begin: str, end: str) -> None:
        """Markers must be non-empty single lines."""
        with pytest.raises(ValueError, match="Block markers"):
            ManagedBlock(begin=begin, end=end)

    def test_apply_to_empty(self) -> None:
        """An empty file receives just the block."""
        assert BLOCK.apply("", "body") == "# >>> TEST\nbody\n# <<< TEST\n"

    def test_apply_appends_after_content(self) -> None:
        """Existing content is kept and separated by a blank line."""
        assert BLOCK.apply("user\n", "body\n") == "user\n\n# >>> TEST\nbody\n# <<< TEST\n"

    def test_apply_replaces_every_copy(self) -> None:
        """Stale copies anywhere in the file are dropped."""
        text = "# >>> TEST\nold\n# <<< TEST\nuser\n# >>> TEST\nolder\n# <<< TEST\n"

        assert BLOCK.apply(text, "new") == "user\n\n# >>> TEST\nnew\n# <<< TEST\n"

    def test_apply_is_idempotent(self) -> None:
        """Applying twice gives the same text."""
        once = BLOCK.apply("user\n", "body")

        assert BLOCK.apply(once, "body") == once

    def test_header_on_begin_line(self) -> None:
        """A header is appended to the begin marker and still matches."""
        text = BLOCK.apply("", "body", header="- managed by alpi")

        assert text.startswith("# >>> TEST - managed by alpi\n")
        assert BLOCK.is_present(text)
        assert BLOCK.remove(text) == ""

    def test_unterminated_block_removed_to_end(self) -> None:
        """Without an end marker everything after begin is dropped."""
        assert BLOCK.remove("keep\n# >>> TEST\nlost\n") == "keep\n"


class TestFileOperations:
    """Tests for the file-level helpers."""

    def test_apply_block_creates_file(self, tmp_path: Path) -> None:
        """A missing file is created with parents."""
        path = tmp_path / "dir" / "file"

        assert apply_block(path, BLOCK, "body", mode=ExecutionMode.APPLY) is True
        assert path.read_text() == "# >>> TEST\nbody\n# <<< TEST\n"

    def test_apply_block_unchanged(self, tmp_path: Path) -> None:
        """No write happens when the block is current."""
        path = tmp_path / "file"
        apply_block(path, BLOCK, "body", mode=ExecutionMode.APPLY)

        assert apply_block(path, BLOCK, "body", mode=ExecutionMode.APPLY) is False

    def test_preview_reports_but_keeps_file(self, tmp_path: Path) -> None:
        """Preview returns True without writing."""
        path = tmp_path / "file"
        path.write_text("user\n")

        assert apply_block(path, BLOCK, "body", mode=ExecutionMode.PREVIEW) is True
        assert path.read_text() == "user\n"

    def test_remove_block(self, tmp_path: Path) -> None:
        """The block is removed, the rest stays."""
        path = tmp_path / "file"
        path.write_text("a\n# >>> TEST\nbody\n# <<< TEST\nb\n")

        assert remove_block(path, BLOCK, mode=ExecutionMode.APPLY) is True
        assert path.read_text() == "a\nb\n"
        assert remove_block(path, BLOCK, mode=ExecutionMode.APPLY) is False

    def test_ensure_line(self, tmp_path: Path) -> None:
        """A line is appended once, adding a missing final newline."""
        path = tmp_path / "profile"
        path.write_text("first")

        assert ensure_line(path, "export A=1", mode=ExecutionMode.APPLY) is True
        assert ensure_line(path, "export A=1", mode=ExecutionMode.APPLY) is False
        assert path.read_text() == "first\nexport A=1\n"

    def test_remove_line_exact_match_only(self, tmp_path: Path) -> None:
        """Only whole matching lines are deleted."""
        path = tmp_path / "profile"
        path.write_text("export A=1\nexport A=10\nexport A=1\n")

        assert remove_line(path, "export A=1", mode=ExecutionMode.APPLY) is True
        assert path.read_text() == "export A=10\n"
