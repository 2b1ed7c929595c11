"""Unit tests for the install and update pipelines."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from alpi.core.executor import PipelineKind, StackPipeline
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.core.repo import RepoAction, RepoError, RepoSyncResult
from alpi.models.mode import ExecutionMode
from alpi.models.stack import StackConfig
from alpi.operators.base import PackageTransaction, TransactionType
from alpi.operators.bootstrap import BootstrapResult


def _tx(manager: str, packages: list[str], success: bool = True) -> PackageTransaction:
    return PackageTransaction(
        transaction_type=TransactionType.INSTALL,
        manager=manager,
        packages=tuple(packages),
        success=success,
        error=None if success else f"{manager} exited with 1",
    )


@pytest.fixture
def pacman() -> MagicMock:
    """pacman operator installing whatever it is asked to."""
    mock = MagicMock()
    mock.name = "pacman"
    mock.install.side_effect = lambda packages, mode: _tx("pacman", packages)
    return mock


@pytest.fixture
def yay() -> MagicMock:
    """yay operator installing whatever it is asked to."""
    mock = MagicMock()
    mock.name = "yay"
    mock.install.side_effect = lambda packages, mode: _tx("yay", packages)
    return mock


@pytest.fixture
def system() -> Iterator[dict[str, MagicMock]]:
    """Patch every system-touching phase of the pipeline."""
    targets = {
        "bootstrap": "alpi.core.executor.bootstrap_toolchain",
        "repo": "alpi.core.executor.sync_repository",
        "service": "alpi.core.executor.enable_service",
        "group": "alpi.core.executor.add_user_to_group",
        "profile": "alpi.core.executor.configure_profile",
        "lazyvim": "alpi.core.executor.bootstrap_lazyvim",
        "qutebrowser": "alpi.core.executor.configure_qutebrowser",
    }
    patchers = {name: patch(target) for name, target in targets.items()}
    mocks = {name: p.start() for name, p in patchers.items()}
    mocks["bootstrap"].return_value = BootstrapResult()
    mocks["repo"].side_effect = lambda url, directory, mode: RepoSyncResult(
        directory=directory, action=RepoAction.UPDATED
    )
    mocks["service"].return_value = MagicMock(error=None)
    mocks["group"].return_value = MagicMock(error=None)
    mocks["profile"].return_value = MagicMock(foreign_selector=False)
    mocks["qutebrowser"].return_value = MagicMock(adblock_updated=True)
    yield mocks
    for p in patchers.values():
        p.stop()


@pytest.fixture
def desktop(stack: StackConfig) -> StackConfig:
    """Test stack with packages, a service and a group."""
    return stack.model_copy(
        update={
            "pacman_packages": ["foot", "waybar"],
            "aur_packages": ["niri"],
            "services": ["NetworkManager"],
            "groups": ["video"],
        }
    )


class TestInstall:
    """Tests for the install pipeline."""

    def test_runs_every_phase(
        self,
        desktop: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """Install bootstraps, syncs, installs, enables, deploys and configures."""
        report = StackPipeline(desktop, home, ledger, pacman, yay).run(
            PipelineKind.INSTALL, ExecutionMode.APPLY
        )

        system["bootstrap"].assert_called_once()
        system["repo"].assert_called_once()
        pacman.install.assert_called_once_with(["foot", "waybar"], mode=ExecutionMode.APPLY)
        yay.install.assert_called_once_with(["niri"], mode=ExecutionMode.APPLY)
        system["service"].assert_called_once_with("NetworkManager", mode=ExecutionMode.APPLY)
        system["group"].assert_called_once_with("video", mode=ExecutionMode.APPLY)
        system["lazyvim"].assert_not_called()
        system["qutebrowser"].assert_not_called()
        assert report.deploy is not None
        assert len(report.deploy.results) == 3
        assert not report.failed

    def test_records_installed_packages(
        self,
        desktop: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """Successfully installed packages go into the ledger."""
        StackPipeline(desktop, home, ledger, pacman, yay).run(
            PipelineKind.INSTALL, ExecutionMode.APPLY
        )

        assert ledger.list(LedgerCategory.PACKAGE) == ["foot", "waybar", "niri"]
        assert len(ledger.list(LedgerCategory.FILE)) == 3

    def test_failed_transaction_continues(
        self,
        desktop: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """A failed AUR build is reported but deploy still runs."""
        yay.install.side_effect = lambda packages, mode: _tx("yay", packages, success=False)

        report = StackPipeline(desktop, home, ledger, pacman, yay).run(
            PipelineKind.INSTALL, ExecutionMode.APPLY
        )

        assert report.failed
        assert "yay: yay exited with 1" in report.warnings
        assert report.deploy is not None
        assert not ledger.contains(LedgerCategory.PACKAGE, "niri")
        assert ledger.contains(LedgerCategory.PACKAGE, "foot")

    def test_apps_stack_phases(
        self,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """A stack without a repository configures apps instead of deploying."""
        apps = StackConfig(
            name="apps",
            ledger_name="alpi-apps",
            pacman_packages=["qutebrowser"],
            qutebrowser=True,
            lazyvim=True,
        )

        report = StackPipeline(apps, home, ledger, pacman, yay).run(
            PipelineKind.INSTALL, ExecutionMode.APPLY
        )

        system["repo"].assert_not_called()
        yay.install.assert_not_called()
        system["lazyvim"].assert_called_once_with(home, mode=ExecutionMode.APPLY)
        system["qutebrowser"].assert_called_once_with(home, mode=ExecutionMode.APPLY)
        assert report.deploy is None

    def test_local_checkout_without_url_deployed(
        self,
        stack: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """A repo_dir without repo_url skips the git sync but still deploys."""
        local = stack.model_copy(update={"repo_url": None})

        report = StackPipeline(local, home, ledger, pacman, yay).run(
            PipelineKind.INSTALL, ExecutionMode.APPLY
        )

        system["repo"].assert_not_called()
        assert report.deploy is not None
        assert len(report.deploy.results) == 3
        assert (home / ".config" / "app-dst" / "a.conf").is_symlink()

    def test_repo_error_propagates(
        self,
        desktop: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """Nothing is installed when the repository cannot be cloned."""
        system["repo"].side_effect = RepoError("Failed to clone")

        with pytest.raises(RepoError):
            StackPipeline(desktop, home, ledger, pacman, yay).run(
                PipelineKind.INSTALL, ExecutionMode.APPLY
            )

        pacman.install.assert_not_called()


class TestUpdate:
    """Tests for the update pipeline."""

    def test_skips_install_only_phases(
        self,
        desktop: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """Update refreshes packages and links, nothing else."""
        StackPipeline(desktop, home, ledger, pacman, yay).run(
            PipelineKind.UPDATE, ExecutionMode.APPLY
        )

        pacman.install.assert_called_once()
        system["service"].assert_not_called()
        system["group"].assert_not_called()
        system["profile"].assert_not_called()


class TestPreview:
    """Tests for preview runs."""

    def test_nothing_written(
        self,
        desktop: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: MagicMock,
        yay: MagicMock,
        system: dict[str, MagicMock],
    ) -> None:
        """Preview passes the mode through and leaves no ledger behind."""
        report = StackPipeline(desktop, home, ledger, pacman, yay).run(
            PipelineKind.INSTALL, ExecutionMode.PREVIEW
        )

        pacman.install.assert_called_once_with(["foot", "waybar"], mode=ExecutionMode.PREVIEW)
        system["bootstrap"].assert_called_once_with(mode=ExecutionMode.PREVIEW, pacman=pacman)
        assert not ledger.exists()
        assert not (home / ".config" / "app-dst").exists()
        assert report.mode == ExecutionMode.PREVIEW
