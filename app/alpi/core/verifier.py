"""Installation health checks.

The verifier re-derives the expected destinations from the same plan the
orchestrator deploys, so it can never check a different set of files.
System lookups (PATH, systemd, group database) go through a
:class:`SystemProbe` so the checks can run against a temporary home.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from alpi.apps import neovim, qutebrowser
from alpi.blocks.bash_profile import selector_state
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.core.mapper import DirectoryMapping
from alpi.core.orchestrator import SyncOrchestrator
from alpi.core.synchronizer import SymlinkSynchronizer
from alpi.models.results import CheckResult, CheckStatus, VerifyReport
from alpi.models.stack import StackConfig
from alpi.system.groups import current_user, user_groups
from alpi.system.services import is_service_enabled
from alpi.utils.shell import command_exists

logger = logging.getLogger(__name__)

SECTION_COMMANDS = "Commands"
SECTION_CONFIG = "Config files"
SECTION_SCRIPTS = "Scripts"
SECTION_SESSION = "Session / profile"
SECTION_SERVICES = "Services"
SECTION_GROUPS = "User groups"
SECTION_STATE = "State file"
SECTION_QUTEBROWSER = "qutebrowser config"
SECTION_NEOVIM = "Neovim / LazyVim"


@dataclass(frozen=True, slots=True)
class SystemProbe:
    """System lookups used by the verifier."""

    command_exists: Callable[[str], bool] = command_exists
    is_service_enabled: Callable[[str], bool] = is_service_enabled
    user_groups: Callable[[str], set[str]] = user_groups
    current_user: Callable[[], str] = current_user


def check_destination(section: str, destination: Path, label: str) -> CheckResult:
    """Classify one deployed path.

    A symlink must resolve; a regular file counts as present.
    """
    if destination.is_symlink():
        if destination.exists():
            return CheckResult(section, label, CheckStatus.PASS, "symlink ok")
        return CheckResult(
            section,
            label,
            CheckStatus.FAIL,
            f"broken symlink -> {os.readlink(destination)}",
        )
    if destination.is_file():
        return CheckResult(section, label, CheckStatus.PASS, "regular file")
    return CheckResult(section, label, CheckStatus.FAIL, "not found")


@dataclass(slots=True)
class _Collector:
    checks: list[CheckResult] = field(default_factory=list)

    def add(self, section: str, label: str, status: CheckStatus, detail: str | None = None) -> None:
        self.checks.append(CheckResult(section, label, status, detail))


class Verifier:
    """Runs every health check for one stack.

    Attributes:
        stack: Stack configuration.
        home: Target home directory.
    """

    def __init__(
        self,
        stack: StackConfig,
        home: Path,
        ledger: StateLedger,
        probe: SystemProbe | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            stack: Stack to verify.
            home: Home directory the stack was deployed to.
            ledger: The stack's ledger.
            probe: System lookups, defaults to the real system.
        """
        self._stack = stack
        self._home = home
        self._ledger = ledger
        self._probe = probe or SystemProbe()
        self._orchestrator = SyncOrchestrator(stack, home, SymlinkSynchronizer(ledger))

    @property
    def stack(self) -> StackConfig:
        """Stack configuration."""
        return self._stack

    @property
    def home(self) -> Path:
        """Target home directory."""
        return self._home

    def checked_destinations(self) -> list[Path]:
        """Destinations the file checks cover, shared with the orchestrator."""
        return self._orchestrator.expected_destinations()

    def verify(self) -> VerifyReport:
        """Run all checks.

        Returns:
            VerifyReport with one CheckResult per finding.
        """
        out = _Collector()
        self._check_commands(out)
        self._check_files(out)
        self._check_session(out)
        self._check_services(out)
        self._check_groups(out)
        self._check_ledger(out)
        if self._stack.qutebrowser:
            self._check_qutebrowser(out)
        if self._stack.lazyvim:
            self._check_neovim(out)
        return VerifyReport(checks=tuple(out.checks))

    def _check_commands(self, out: _Collector) -> None:
        for command in self._stack.commands:
            if self._probe.command_exists(command):
                out.add(SECTION_COMMANDS, command, CheckStatus.PASS)
            else:
                out.add(SECTION_COMMANDS, command, CheckStatus.FAIL, "not found on PATH")

    def _check_mapping(self, out: _Collector, section: str, mapping: DirectoryMapping) -> None:
        if mapping.source_missing:
            out.add(
                section,
                mapping.label,
                CheckStatus.WARN,
                "repo dir missing (run install or update first)",
            )
            return
        for mapped in mapping:
            if mapping.recursive:
                label = f"{mapping.destination_root.name}/{mapped.relative}"
            else:
                label = str(mapped.relative)
            out.checks.append(check_destination(section, mapped.destination, label))

    def _check_files(self, out: _Collector) -> None:
        for mapping in self._orchestrator.config_mappings():
            self._check_mapping(out, SECTION_CONFIG, mapping)
        scripts = self._orchestrator.scripts_mapping()
        if scripts is not None:
            self._check_mapping(out, SECTION_SCRIPTS, scripts)

    def _check_session(self, out: _Collector) -> None:
        profile = self._stack.profile_path(self._home)
        if profile is None:
            return
        state = selector_state(profile)
        if state == "managed":
            out.add(SECTION_SESSION, "session selector", CheckStatus.PASS, "managed by alpi")
        elif state == "foreign":
            out.add(
                SECTION_SESSION,
                "session selector",
                CheckStatus.PASS,
                "foreign startx selector present - start niri with: start-niri",
            )
        else:
            out.add(SECTION_SESSION, "session selector", CheckStatus.WARN, f"none in {profile}")

    def _check_services(self, out: _Collector) -> None:
        for unit in self._stack.services:
            if self._probe.is_service_enabled(unit):
                out.add(SECTION_SERVICES, unit, CheckStatus.PASS, "enabled")
            else:
                out.add(SECTION_SERVICES, unit, CheckStatus.WARN, "not enabled")

    def _check_groups(self, out: _Collector) -> None:
        if not self._stack.groups:
            return
        memberships = self._probe.user_groups(self._probe.current_user())
        for group in self._stack.groups:
            if group in memberships:
                out.add(SECTION_GROUPS, group, CheckStatus.PASS)
            else:
                out.add(
                    SECTION_GROUPS,
                    group,
                    CheckStatus.WARN,
                    "not a member (log out and back in if just added)",
                )

    def _check_ledger(self, out: _Collector) -> None:
        if not self._ledger.exists():
            out.add(SECTION_STATE, str(self._ledger.path), CheckStatus.WARN, "missing")
            return
        counts = self._ledger.counts()
        out.add(
            SECTION_STATE,
            str(self._ledger.path),
            CheckStatus.PASS,
            f"{counts[LedgerCategory.FILE]} symlinks, "
            f"{counts[LedgerCategory.PACKAGE]} packages tracked",
        )

    def _check_qutebrowser(self, out: _Collector) -> None:
        config = qutebrowser.config_path(self._home)
        userscript = qutebrowser.userscript_path(self._home)
        for path, label in ((config, "config.py"), (userscript, "youtube-to-piped userscript")):
            if path.is_file():
                out.add(SECTION_QUTEBROWSER, label, CheckStatus.PASS)
            else:
                out.add(SECTION_QUTEBROWSER, label, CheckStatus.FAIL, "not found")

        if not config.is_file():
            return
        missing = qutebrowser.missing_blocks(self._home)
        for block, _ in qutebrowser.MANAGED_BLOCKS:
            label = f"block: {block.begin.removeprefix('# >>> ')}"
            if block in missing:
                out.add(
                    SECTION_QUTEBROWSER, label, CheckStatus.WARN, "missing (run install or update)"
                )
            else:
                out.add(SECTION_QUTEBROWSER, label, CheckStatus.PASS)

    def _check_neovim(self, out: _Collector) -> None:
        directory = neovim.nvim_config_dir(self._home)
        if not directory.is_dir():
            out.add(
                SECTION_NEOVIM,
                "~/.config/nvim",
                CheckStatus.WARN,
                "missing - LazyVim not bootstrapped",
            )
            return
        out.add(SECTION_NEOVIM, "~/.config/nvim", CheckStatus.PASS)
        if neovim.is_lazyvim_layout(directory):
            out.add(SECTION_NEOVIM, "LazyVim", CheckStatus.PASS, "config present")
        else:
            out.add(SECTION_NEOVIM, "LazyVim", CheckStatus.PASS, "custom config, not LazyVim")
