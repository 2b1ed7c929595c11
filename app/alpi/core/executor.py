"""Install, update and preview pipelines.

Each stack runs a fixed sequence of phases. The same sequence serves
``install`` and ``dry-run``; only the execution mode differs. ``update``
is the short path: refresh the repository and packages, then re-sync.

    desktop install: bootstrap, repo, packages, services, deploy, profile, groups
    desktop update:  bootstrap, repo, packages, deploy
    apps install:    bootstrap, packages, LazyVim, qutebrowser
    apps update:     bootstrap, packages, qutebrowser

A failed package transaction does not stop later phases; the report marks
the run as failed and the CLI exits non-zero at the end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from alpi.apps.neovim import LazyVimAction, LazyVimResult, bootstrap_lazyvim
from alpi.apps.qutebrowser import QutebrowserResult, configure_qutebrowser
from alpi.blocks.bash_profile import ProfileResult, configure_profile
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.core.orchestrator import SyncOrchestrator
from alpi.core.repo import RepoSyncResult, sync_repository
from alpi.core.synchronizer import SymlinkSynchronizer
from alpi.models.mode import ExecutionMode
from alpi.models.results import DeployReport
from alpi.models.stack import StackConfig
from alpi.operators.base import PackageTransaction
from alpi.operators.bootstrap import BootstrapResult, bootstrap_toolchain
from alpi.operators.pacman import PacmanOperator
from alpi.operators.yay import YayOperator
from alpi.system.groups import GroupChange, add_user_to_group
from alpi.system.services import ServiceChange, enable_service
from alpi.utils.formatting import print_step

logger = logging.getLogger(__name__)


class PipelineKind(str, Enum):
    """Which pipeline to run."""

    INSTALL = "install"
    UPDATE = "update"


@dataclass(slots=True)
class PipelineReport:
    """Everything one pipeline run did.

    Attributes:
        stack: Stack name.
        kind: Install or update.
        mode: Apply or preview.
        bootstrap: Toolchain bootstrap result.
        repo: Repository sync result, None for stacks without a repo.
        transactions: Package manager invocations.
        services: Unit changes.
        deploy: Symlink deploy report, None for stacks without a repo.
        profile: Bash profile changes.
        groups: Group membership changes.
        lazyvim: LazyVim bootstrap result.
        qutebrowser: qutebrowser configuration result.
        warnings: Non-fatal problems.
    """

    stack: str
    kind: PipelineKind
    mode: ExecutionMode
    bootstrap: BootstrapResult | None = None
    repo: RepoSyncResult | None = None
    transactions: list[PackageTransaction] = field(default_factory=list)
    services: list[ServiceChange] = field(default_factory=list)
    deploy: DeployReport | None = None
    profile: ProfileResult | None = None
    groups: list[GroupChange] = field(default_factory=list)
    lazyvim: LazyVimResult | None = None
    qutebrowser: QutebrowserResult | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Check if any package transaction or symlink failed."""
        if any(tx.failed for tx in self.transactions):
            return True
        return self.deploy is not None and bool(self.deploy.failures)


class StackPipeline:
    """Runs the install or update sequence for one stack.

    Attributes:
        stack: Stack configuration.
        home: Target home directory.
        ledger: The stack's ledger.
    """

    def __init__(
        self,
        stack: StackConfig,
        home: Path,
        ledger: StateLedger,
        pacman: PacmanOperator | None = None,
        yay: YayOperator | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            stack: Stack to provision.
            home: Target home directory.
            ledger: Ledger receiving files and packages.
            pacman: Operator for official packages.
            yay: Operator for AUR packages.
        """
        self.stack = stack
        self.home = home
        self.ledger = ledger
        self._pacman = pacman or PacmanOperator()
        self._yay = yay or YayOperator()

    def run(self, kind: PipelineKind, mode: ExecutionMode) -> PipelineReport:
        """Run the pipeline.

        Raises:
            RepoError: If the repository cannot be cloned.
            OperatorError: If the toolchain bootstrap fails.
        """
        report = PipelineReport(stack=self.stack.name, kind=kind, mode=mode)
        full = kind == PipelineKind.INSTALL

        print_step("Bootstrap: pacman, git, base-devel, yay")
        report.bootstrap = bootstrap_toolchain(mode=mode, pacman=self._pacman)

        if self.stack.repo_url is not None:
            self._sync_repo(report, mode)

        self._install_packages(report, mode)

        if full:
            self._enable_services(report, mode)

        if self.stack.repo_path(self.home) is not None:
            self._deploy(report, mode)

        if full and self.stack.session is not None:
            self._configure_profile(report, mode)

        if full:
            self._configure_groups(report, mode)

        if full and self.stack.lazyvim:
            self._bootstrap_lazyvim(report, mode)

        if self.stack.qutebrowser:
            self._configure_qutebrowser(report, mode)

        return report

    def _sync_repo(self, report: PipelineReport, mode: ExecutionMode) -> None:
        repo_dir = self.stack.repo_path(self.home)
        if repo_dir is None or self.stack.repo_url is None:
            return
        print_step(f"Syncing repo: {self.stack.repo_url}")
        report.repo = sync_repository(self.stack.repo_url, repo_dir, mode=mode)
        if report.repo.warning:
            report.warnings.append(report.repo.warning)

    def _install_packages(self, report: PipelineReport, mode: ExecutionMode) -> None:
        if not self.stack.packages:
            return
        print_step("Installing packages")
        for operator, packages in (
            (self._pacman, self.stack.pacman_packages),
            (self._yay, self.stack.aur_packages),
        ):
            if not packages:
                continue
            tx = operator.install(list(packages), mode=mode)
            report.transactions.append(tx)
            if tx.failed:
                logger.warning("%s transaction failed: %s", operator.name, tx.error)
                report.warnings.append(f"{operator.name}: {tx.error}")
                continue
            for package in packages:
                self.ledger.add(LedgerCategory.PACKAGE, package, mode=mode)

    def _enable_services(self, report: PipelineReport, mode: ExecutionMode) -> None:
        if not self.stack.services:
            return
        print_step("Enabling services")
        for unit in self.stack.services:
            change = enable_service(unit, mode=mode)
            report.services.append(change)
            if change.error:
                report.warnings.append(f"{unit}: {change.error}")

    def _deploy(self, report: PipelineReport, mode: ExecutionMode) -> None:
        print_step("Deploying configs")
        orchestrator = SyncOrchestrator(self.stack, self.home, SymlinkSynchronizer(self.ledger))
        report.deploy = orchestrator.deploy(mode)
        for missing in report.deploy.missing_sources:
            report.warnings.append(f"Source directory not found: {missing}")

    def _configure_profile(self, report: PipelineReport, mode: ExecutionMode) -> None:
        profile = self.stack.profile_path(self.home)
        if profile is None or self.stack.session is None:
            return
        print_step(f"Configuring {profile}")
        try:
            report.profile = configure_profile(profile, self.stack.session, mode=mode)
        except OSError as e:
            logger.warning("Could not update %s: %s", profile, e)
            report.warnings.append(f"Could not update {profile}: {e}")
            return
        if report.profile.foreign_selector:
            report.warnings.append(
                f"Existing startx selector in {profile} left untouched - "
                "start niri with: start-niri"
            )

    def _configure_groups(self, report: PipelineReport, mode: ExecutionMode) -> None:
        if not self.stack.groups:
            return
        print_step("Configuring user groups")
        for group in self.stack.groups:
            change = add_user_to_group(group, mode=mode)
            report.groups.append(change)
            if change.error:
                report.warnings.append(f"{group}: {change.error}")

    def _bootstrap_lazyvim(self, report: PipelineReport, mode: ExecutionMode) -> None:
        print_step("Neovim / LazyVim")
        report.lazyvim = bootstrap_lazyvim(self.home, mode=mode)
        if report.lazyvim.action == LazyVimAction.FAILED:
            report.warnings.append(report.lazyvim.error or "LazyVim bootstrap failed")

    def _configure_qutebrowser(self, report: PipelineReport, mode: ExecutionMode) -> None:
        print_step("Configuring qutebrowser")
        try:
            report.qutebrowser = configure_qutebrowser(self.home, mode=mode)
        except OSError as e:
            logger.warning("Could not configure qutebrowser: %s", e)
            report.warnings.append(f"Could not configure qutebrowser: {e}")
            return
        if report.qutebrowser.adblock_updated is False:
            report.warnings.append(
                "Headless adblock-update failed - run ':adblock-update' inside qutebrowser"
            )
