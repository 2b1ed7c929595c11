"""Unit tests for the uninstall command."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from alpi.cli.main import app
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.models.mode import ExecutionMode
from alpi.operators.base import PackageTransaction, TransactionType
from typer.testing import CliRunner

runner = CliRunner()


def _removed(packages: list[str], mode: ExecutionMode) -> PackageTransaction:
    return PackageTransaction(
        transaction_type=TransactionType.REMOVE,
        manager="pacman",
        packages=tuple(packages),
        success=True,
    )


class TestUninstallCommand:
    """Tests for alpi uninstall."""

    def test_no_ledger(self) -> None:
        """Nothing tracked is a warning, not an error."""
        result = runner.invoke(app, ["uninstall", "--stack", "desktop"])

        assert result.exit_code == 0
        assert "Ledger not found" in result.output

    @patch("alpi.cli.commands.uninstall.PacmanOperator")
    def test_declined_keeps_packages(
        self, mock_pacman: MagicMock, home: Path, desktop_ledger: StateLedger
    ) -> None:
        """Answering no removes links but keeps packages."""
        link = Path(desktop_ledger.list(LedgerCategory.FILE)[0])

        result = runner.invoke(app, ["uninstall", "-s", "desktop"], input="n\n")

        assert result.exit_code == 0
        assert "foot" in result.output
        assert not link.is_symlink()
        assert (home / "target.conf").exists()
        assert not desktop_ledger.exists()
        mock_pacman.return_value.remove.assert_not_called()
        assert "Uninstall complete" in result.output

    @patch("alpi.cli.commands.uninstall.PacmanOperator")
    def test_yes_removes_packages(
        self, mock_pacman: MagicMock, desktop_ledger: StateLedger
    ) -> None:
        """--yes removes recorded packages without prompting."""
        mock_pacman.return_value.remove.side_effect = _removed

        result = runner.invoke(app, ["uninstall", "-s", "desktop", "--yes"])

        assert result.exit_code == 0
        mock_pacman.return_value.remove.assert_called_once_with(
            ["foot"], mode=ExecutionMode.APPLY
        )
        assert "Removed 1 packages" in result.output

    @patch("alpi.cli.commands.uninstall.PacmanOperator")
    def test_dry_run(self, mock_pacman: MagicMock, desktop_ledger: StateLedger) -> None:
        """--dry-run changes nothing and does not prompt."""
        link = Path(desktop_ledger.list(LedgerCategory.FILE)[0])

        result = runner.invoke(app, ["uninstall", "-s", "desktop", "--dry-run"])

        assert result.exit_code == 0
        assert link.is_symlink()
        assert desktop_ledger.exists()
        assert "[dry-run] No changes made." in result.output
        mock_pacman.return_value.remove.assert_not_called()

    def test_replaced_file_kept(self, desktop_ledger: StateLedger) -> None:
        """A tracked path turned into a real file survives."""
        path = Path(desktop_ledger.list(LedgerCategory.FILE)[0])
        path.unlink()
        path.write_text("mine")

        result = runner.invoke(app, ["uninstall", "-s", "desktop"], input="n\n")

        assert result.exit_code == 0
        assert path.read_text() == "mine"
