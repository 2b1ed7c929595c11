"""Unit tests for qutebrowser configuration."""

import ast
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from alpi.apps import qutebrowser
from alpi.apps.qutebrowser import (
    CONFIG_HEADER,
    MANAGED_BLOCKS,
    configure_qutebrowser,
    load_template,
    missing_blocks,
    repair_config,
    update_adblock_lists,
)
from alpi.models.mode import ExecutionMode
from alpi.utils.shell import CommandResult


@pytest.fixture
def no_adblock_update() -> Iterator[MagicMock]:
    """Skip the headless qutebrowser run."""
    with patch("alpi.apps.qutebrowser.update_adblock_lists", return_value=True) as mock:
        yield mock


class TestTemplates:
    """Tests for the bundled templates."""

    @pytest.mark.parametrize("name", [template for _, template in MANAGED_BLOCKS])
    def test_block_templates_are_python(self, name: str) -> None:
        """Every block template compiles as Python."""
        compile(load_template(name), name, "exec")

    def test_userscript_is_shell(self) -> None:
        """The userscript has a shebang."""
        assert load_template("youtube-to-piped.sh").startswith("#!")


class TestRepairConfig:
    """Tests for repair_config."""

    def test_drops_empty_try(self) -> None:
        """An empty try body before except is removed along with except: pass."""
        text = "c.a = 1\ntry:\nexcept Exception:\n    pass\nc.b = 2\n"

        assert repair_config(text) == "c.a = 1\nc.b = 2\n"

    def test_valid_config_untouched(self) -> None:
        """Working try blocks stay."""
        text = "try:\n    import foo\nexcept ImportError:\n    foo = None\n"

        assert repair_config(text) == text

    def test_handler_with_pass_untouched(self) -> None:
        """An except: pass after a real try body is kept and still parses."""
        text = "try:\n    import foo\nexcept ImportError:\n    pass\nc.x = 1\n"

        repaired = repair_config(text)

        assert repaired == text
        ast.parse(repaired)

    def test_indented_empty_try(self) -> None:
        """Empty try statements nested in a block are removed too."""
        text = "if True:\n    try:\n    except Exception:\n        pass\n    c.a = 1\n"

        repaired = repair_config(text)

        assert repaired == "if True:\n    c.a = 1\n"
        ast.parse(repaired)


class TestConfigureQutebrowser:
    """Tests for configure_qutebrowser."""

    def test_creates_config_with_all_blocks(self, home: Path, no_adblock_update: MagicMock) -> None:
        """A fresh config gets the header, every block and the userscript."""
        result = configure_qutebrowser(home, mode=ExecutionMode.APPLY)

        text = qutebrowser.config_path(home).read_text()
        assert result.created
        assert text.startswith(CONFIG_HEADER)
        assert len(result.blocks_written) == len(MANAGED_BLOCKS)
        assert missing_blocks(home) == []
        compile(text, "config.py", "exec")

    def test_userscript_executable(self, home: Path, no_adblock_update: MagicMock) -> None:
        """The userscript is installed with mode 0755."""
        result = configure_qutebrowser(home, mode=ExecutionMode.APPLY)

        assert result.userscript is not None
        assert result.userscript.stat().st_mode & 0o777 == 0o755
        assert os.access(result.userscript, os.X_OK)

    def test_rerun_rewrites_in_place(self, home: Path, no_adblock_update: MagicMock) -> None:
        """Blocks are replaced, not duplicated, and user lines survive."""
        config = qutebrowser.config_path(home)
        config.parent.mkdir(parents=True)
        config.write_text("c.zoom.default = '125%'\n")

        configure_qutebrowser(home, mode=ExecutionMode.APPLY)
        first = config.read_text()
        second_result = configure_qutebrowser(home, mode=ExecutionMode.APPLY)

        assert config.read_text() == first
        assert second_result.blocks_written == []
        assert first.startswith("c.zoom.default = '125%'\n")
        for block, _ in MANAGED_BLOCKS:
            assert first.count(block.begin) == 1

    def test_backup_taken_each_run(self, home: Path, no_adblock_update: MagicMock) -> None:
        """The previous config is copied before modification."""
        config = qutebrowser.config_path(home)
        config.parent.mkdir(parents=True)
        config.write_text("c.zoom.default = '125%'\n")

        result = configure_qutebrowser(home, mode=ExecutionMode.APPLY)

        assert result.backup is not None
        assert result.backup.read_text() == "c.zoom.default = '125%'\n"

    def test_adblock_failure_is_reported(self, home: Path) -> None:
        """A failed headless update is recorded on the result."""
        with patch("alpi.apps.qutebrowser.update_adblock_lists", return_value=False):
            result = configure_qutebrowser(home, mode=ExecutionMode.APPLY)

        assert result.adblock_updated is False

    def test_preview(self, home: Path, no_adblock_update: MagicMock) -> None:
        """Preview predicts every block and writes nothing."""
        result = configure_qutebrowser(home, mode=ExecutionMode.PREVIEW)

        assert result.dry_run
        assert result.created
        assert len(result.blocks_written) == len(MANAGED_BLOCKS)
        assert not qutebrowser.config_path(home).exists()
        no_adblock_update.assert_not_called()


class TestUpdateAdblockLists:
    """Tests for update_adblock_lists."""

    @patch("alpi.apps.qutebrowser.command_exists", return_value=False)
    def test_without_qutebrowser(self, mock_exists: MagicMock) -> None:
        """Nothing to update without qutebrowser."""
        assert update_adblock_lists() is False

    @patch("alpi.apps.qutebrowser.run_command")
    @patch("alpi.apps.qutebrowser.command_exists", return_value=True)
    def test_runs_headless(self, mock_exists: MagicMock, mock_run: MagicMock) -> None:
        """The update command and quit are passed to qutebrowser."""
        mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

        assert update_adblock_lists() is True
        assert mock_run.call_args.args[0] == ["qutebrowser", ":adblock-update", ":quit"]
