"""Ledger-driven uninstall.

Only what the ledger records is touched, and only in the shape alpi
created it: a tracked path that is no longer a symlink was replaced by
the user and is left alone. Packages are removed only after explicit
confirmation, since things like pipewire are often shared with other
software.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from alpi.blocks.bash_profile import clean_profile
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.core.orchestrator import SyncOrchestrator
from alpi.core.synchronizer import SymlinkSynchronizer
from alpi.models.mode import ExecutionMode
from alpi.models.results import RemovalResult, RemovalStatus, UninstallReport
from alpi.models.stack import StackConfig
from alpi.operators.base import Operator, OperatorError

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[list[str]], bool]


def _decline(packages: list[str]) -> bool:
    return False


def remove_symlink(path: Path, *, mode: ExecutionMode) -> RemovalResult:
    """Remove ``path`` if, and only if, it is a symlink.

    Never raises; failures are reported in the result.
    """
    dry_run = mode.is_preview
    if path.is_symlink():
        if dry_run:
            logger.info("Dry-run: would remove symlink %s", path)
            return RemovalResult(path=path, status=RemovalStatus.REMOVED, dry_run=True)
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)
            return RemovalResult(path=path, status=RemovalStatus.FAILED, error=str(e))
        logger.info("Removed symlink: %s", path)
        return RemovalResult(path=path, status=RemovalStatus.REMOVED)

    if path.exists():
        logger.warning("Not a symlink, skipping: %s", path)
        return RemovalResult(path=path, status=RemovalStatus.NOT_SYMLINK, dry_run=dry_run)

    logger.info("Already gone: %s", path)
    return RemovalResult(path=path, status=RemovalStatus.ABSENT, dry_run=dry_run)


def prune_empty_dirs(paths: list[Path], roots: list[Path]) -> list[Path]:
    """Remove empty directories between each path and its containing root.

    The root itself is included; anything above it is not. Directories are
    visited deepest first and only ever removed with ``rmdir``.

    Args:
        paths: Removed files.
        roots: Directories pruning may reach up to.

    Returns:
        Directories that were removed.
    """
    candidates: set[Path] = set()
    for path in paths:
        containing = [root for root in roots if path.is_relative_to(root) and path != root]
        if not containing:
            continue
        root = max(containing, key=lambda r: len(r.parts))
        parent = path.parent
        while parent.is_relative_to(root):
            candidates.add(parent)
            if parent == root:
                break
            parent = parent.parent

    removed: list[Path] = []
    for directory in sorted(candidates, key=lambda d: len(d.parts), reverse=True):
        if directory.is_symlink() or not directory.is_dir():
            continue
        try:
            directory.rmdir()
        except OSError:
            # Not empty
            continue
        logger.debug("Removed empty directory: %s", directory)
        removed.append(directory)
    return removed


class Uninstaller:
    """Reverses an install using the stack's ledger.

    Attributes:
        stack: Stack configuration.
        home: Target home directory.
    """

    def __init__(
        self,
        stack: StackConfig,
        home: Path,
        ledger: StateLedger,
        operator: Operator,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        """Initialize the uninstaller.

        Args:
            stack: Stack to uninstall.
            home: Home directory the stack was deployed to.
            ledger: The stack's ledger.
            operator: Package operator used for removal.
            confirm: Asked with the package list before removal. Declines
                by default.
        """
        self._stack = stack
        self._home = home
        self._ledger = ledger
        self._operator = operator
        self._confirm = confirm or _decline

    @property
    def stack(self) -> StackConfig:
        """Stack configuration."""
        return self._stack

    @property
    def home(self) -> Path:
        """Target home directory."""
        return self._home

    def run(self, mode: ExecutionMode) -> UninstallReport:
        """Remove everything the ledger records.

        Args:
            mode: Apply or preview. Preview changes nothing.

        Returns:
            UninstallReport describing every step.
        """
        if not self._ledger.exists():
            logger.warning("Ledger not found: %s - nothing tracked to uninstall", self._ledger.path)
            return UninstallReport(
                ledger_found=False,
                warnings=(f"Ledger not found: {self._ledger.path} - nothing tracked to uninstall",),
            )

        warnings: list[str] = []

        removals = [
            remove_symlink(Path(value), mode=mode)
            for value in self._ledger.list(LedgerCategory.FILE)
        ]
        for removal in removals:
            if removal.status == RemovalStatus.NOT_SYMLINK:
                warnings.append(f"Not a symlink, left in place: {removal.path}")
            elif removal.status == RemovalStatus.FAILED:
                warnings.append(f"Could not remove {removal.path}: {removal.error}")

        removed_dirs: list[Path] = []
        if not mode.is_preview:
            synchronizer = SymlinkSynchronizer(self._ledger)
            orchestrator = SyncOrchestrator(self._stack, self._home, synchronizer)
            removed_dirs = prune_empty_dirs(
                [r.path for r in removals if r.status == RemovalStatus.REMOVED],
                orchestrator.managed_roots(),
            )

        profile_cleaned = self._clean_profile(mode, warnings)

        packages = self._ledger.list(LedgerCategory.PACKAGE)
        packages_removed = self._remove_packages(packages, mode, warnings)

        self._ledger.clear(mode=mode)

        return UninstallReport(
            ledger_found=True,
            removals=tuple(removals),
            removed_dirs=tuple(removed_dirs),
            profile_cleaned=profile_cleaned,
            packages=tuple(packages),
            packages_removed=packages_removed,
            warnings=tuple(warnings),
        )

    def _clean_profile(self, mode: ExecutionMode, warnings: list[str]) -> bool:
        profile = self._stack.profile_path(self._home)
        if profile is None or self._stack.session is None:
            return False
        try:
            result = clean_profile(profile, self._stack.session, mode=mode)
        except OSError as e:
            logger.warning("Could not clean %s: %s", profile, e)
            warnings.append(f"Could not clean {profile}: {e}")
            return False
        return result.selector_removed or bool(result.lines_removed)

    def _remove_packages(
        self,
        packages: list[str],
        mode: ExecutionMode,
        warnings: list[str],
    ) -> bool | None:
        if not packages:
            return None
        if mode.is_preview:
            logger.info("Dry-run: would ask to remove %d packages", len(packages))
            return None
        if not self._confirm(packages):
            logger.info("Packages left in place")
            return None

        try:
            tx = self._operator.remove(packages, mode=mode)
        except OperatorError as e:
            warnings.append(str(e))
            return False
        if tx.failed:
            warnings.append("Some packages could not be removed (required by others)")
            return False
        return True
