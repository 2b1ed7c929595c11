"""Result models for sync, verify and uninstall operations.

Core operations never raise for expected filesystem conditions; they
return these immutable values and leave the decision about fatality to
the CLI layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SyncStatus(str, Enum):
    """Outcome of reconciling a single destination symlink.

    Attributes:
        LINKED: Destination was absent and a new symlink was created.
        UNCHANGED: Destination already was the correct symlink.
        REPLACED: A wrong or broken symlink was replaced.
        BACKED_UP: A regular file was moved to a backup, then linked.
        SKIPPED: Source file is missing, nothing was changed.
        FAILED: The destination could not be reconciled.
    """

    LINKED = "linked"
    UNCHANGED = "unchanged"
    REPLACED = "replaced"
    BACKED_UP = "backed_up"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Result of a single :meth:`SymlinkSynchronizer.sync` call.

    Attributes:
        source: Source file in the repository.
        destination: Managed symlink path.
        status: What happened (or would happen in preview mode).
        dry_run: Whether this was a preview.
        backup_path: Where a pre-existing regular file was moved.
        error: Error or warning message.
    """

    source: Path
    destination: Path
    status: SyncStatus
    dry_run: bool = False
    backup_path: Path | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the destination is (or would be) correct."""
        return self.status not in (SyncStatus.SKIPPED, SyncStatus.FAILED)

    @property
    def failed(self) -> bool:
        """Check if reconciliation failed."""
        return self.status == SyncStatus.FAILED

    @property
    def changed(self) -> bool:
        """Check if the filesystem was (or would be) modified."""
        return self.status in (SyncStatus.LINKED, SyncStatus.REPLACED, SyncStatus.BACKED_UP)


@dataclass(frozen=True, slots=True)
class DeployReport:
    """Aggregated result of one orchestrator deploy pass.

    Attributes:
        results: Per-file sync results in deploy order.
        missing_sources: Source directories that did not exist.
    """

    results: tuple[SyncResult, ...] = ()
    missing_sources: tuple[Path, ...] = ()

    def count(self, status: SyncStatus) -> int:
        """Number of results with ``status``."""
        return sum(1 for r in self.results if r.status == status)

    @property
    def failures(self) -> list[SyncResult]:
        """Results that failed."""
        return [r for r in self.results if r.failed]

    @property
    def backups(self) -> list[Path]:
        """Backup files created during this pass."""
        return [r.backup_path for r in self.results if r.backup_path is not None]

    @property
    def has_warnings(self) -> bool:
        """Check if anything was skipped."""
        return bool(self.missing_sources) or any(
            r.status == SyncStatus.SKIPPED for r in self.results
        )


class CheckStatus(str, Enum):
    """Severity of a single verification check."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class CheckResult:
    """A single verification finding.

    Attributes:
        section: Report section (``Config files``, ``Services``, ...).
        label: What was checked.
        status: Pass, warn or fail.
        detail: Additional explanation.
    """

    section: str
    label: str
    status: CheckStatus
    detail: str | None = None


class VerifyOutcome(str, Enum):
    """Overall verification outcome."""

    PASSED = "passed"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class VerifyReport:
    """All checks of one verification run."""

    checks: tuple[CheckResult, ...] = ()

    @property
    def failures(self) -> int:
        """Number of failed checks."""
        return sum(1 for c in self.checks if c.status == CheckStatus.FAIL)

    @property
    def warnings(self) -> int:
        """Number of warnings."""
        return sum(1 for c in self.checks if c.status == CheckStatus.WARN)

    @property
    def outcome(self) -> VerifyOutcome:
        """Full success, degraded success or failure."""
        if self.failures:
            return VerifyOutcome.FAILED
        if self.warnings:
            return VerifyOutcome.DEGRADED
        return VerifyOutcome.PASSED

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 if any hard check failed."""
        return 1 if self.outcome == VerifyOutcome.FAILED else 0

    def sections(self) -> list[str]:
        """Section names in first-seen order."""
        seen: list[str] = []
        for check in self.checks:
            if check.section not in seen:
                seen.append(check.section)
        return seen

    def in_section(self, section: str) -> list[CheckResult]:
        """Checks belonging to ``section``."""
        return [c for c in self.checks if c.section == section]


class RemovalStatus(str, Enum):
    """Outcome of removing one ledger-tracked path.

    Attributes:
        REMOVED: The symlink was removed.
        NOT_SYMLINK: Path exists but is not a symlink; left untouched.
        ABSENT: Path no longer exists.
        FAILED: Removal raised an error.
    """

    REMOVED = "removed"
    NOT_SYMLINK = "not_symlink"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Result of removing a single tracked destination."""

    path: Path
    status: RemovalStatus
    dry_run: bool = False
    error: str | None = None


@dataclass(frozen=True, slots=True)
class UninstallReport:
    """Aggregated result of an uninstall run.

    Attributes:
        ledger_found: Whether a ledger existed at all.
        removals: Per-path removal results.
        removed_dirs: Empty directories that were removed.
        profile_cleaned: Whether the bash profile was modified.
        packages: Packages recorded in the ledger.
        packages_removed: True/False for an attempted removal, None if declined.
        warnings: Human-readable warnings collected along the way.
    """

    ledger_found: bool = True
    removals: tuple[RemovalResult, ...] = ()
    removed_dirs: tuple[Path, ...] = ()
    profile_cleaned: bool = False
    packages: tuple[str, ...] = ()
    packages_removed: bool | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def count(self, status: RemovalStatus) -> int:
        """Number of removals with ``status``."""
        return sum(1 for r in self.removals if r.status == status)
