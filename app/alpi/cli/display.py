"""Shared Rich display functions for pipeline, verify and uninstall results.

Provides reusable table builders and summary printers used across CLI
commands (install, update, dry-run, verify, uninstall, ledger).
"""

from pathlib import Path

from rich.table import Table

from alpi.core.executor import PipelineKind, PipelineReport
from alpi.models.results import (
    CheckStatus,
    DeployReport,
    RemovalStatus,
    SyncStatus,
    UninstallReport,
    VerifyOutcome,
    VerifyReport,
)
from alpi.utils.formatting import console, print_error, print_info, print_success, print_warning

_SYNC_STYLES: dict[SyncStatus, str] = {
    SyncStatus.LINKED: "linked",
    SyncStatus.UNCHANGED: "muted",
    SyncStatus.REPLACED: "changed",
    SyncStatus.BACKED_UP: "backup",
    SyncStatus.SKIPPED: "warning",
    SyncStatus.FAILED: "error",
}

_CHECK_MARKS: dict[CheckStatus, str] = {
    CheckStatus.PASS: "[success]ok[/success]",
    CheckStatus.WARN: "[warning]warn[/warning]",
    CheckStatus.FAIL: "[error]FAIL[/error]",
}


def _short(path: Path, home: Path | None) -> str:
    """Render ``path`` relative to ``home`` as ``~/...`` where possible."""
    if home is not None and path.is_relative_to(home):
        return f"~/{path.relative_to(home)}"
    return str(path)


def create_sync_table(
    report: DeployReport,
    home: Path | None = None,
    *,
    show_unchanged: bool = False,
) -> Table:
    """Create a Rich table of symlink sync results.

    Unchanged destinations are hidden unless ``show_unchanged`` is set, so
    a repeated update only lists what actually moved.

    Args:
        report: Deploy report to display.
        home: Home directory used to shorten paths.
        show_unchanged: Include destinations that were already correct.

    Returns:
        Rich Table configured for sync display.
    """
    dry_run = any(r.dry_run for r in report.results)
    table = Table(
        title="Symlinks (Dry Run)" if dry_run else "Symlinks",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=10)
    table.add_column("Destination", no_wrap=True)
    table.add_column("Detail")

    for result in report.results:
        if result.status == SyncStatus.UNCHANGED and not show_unchanged:
            continue
        style = _SYNC_STYLES[result.status]
        if result.backup_path is not None:
            detail = f"backup: {_short(result.backup_path, home)}"
        else:
            detail = result.error or ""
        table.add_row(
            f"[{style}]{result.status.value}[/{style}]",
            _short(result.destination, home),
            f"[muted]{detail}[/muted]",
        )

    return table


def print_sync_summary(report: DeployReport) -> None:
    """Print per-status counts of a deploy pass."""
    parts = [
        f"{report.count(status)} {status.value}"
        for status in SyncStatus
        if report.count(status)
    ]
    console.print(f"  [muted]{', '.join(parts) or 'nothing to sync'}[/muted]")
    for missing in report.missing_sources:
        print_warning(f"Source directory not found: {missing}")


def print_pipeline_report(report: PipelineReport, home: Path) -> None:
    """Print the outcome of one install/update/preview run."""
    if report.deploy is not None:
        if any(r.status != SyncStatus.UNCHANGED for r in report.deploy.results):
            console.print()
            console.print(create_sync_table(report.deploy, home))
        print_sync_summary(report.deploy)

    for tx in report.transactions:
        if tx.failed:
            print_error(f"{tx.manager} could not install packages: {tx.error}")

    for warning in report.warnings:
        if report.deploy is not None and warning.startswith("Source directory not found"):
            continue
        print_warning(warning)

    console.print()
    if report.mode.is_preview:
        print_info(f"\\[dry-run] {report.stack}: preview complete - zero changes were made")
    elif report.failed:
        print_error(f"{report.stack}: {report.kind.value} finished with errors")
    elif report.kind == PipelineKind.INSTALL:
        print_success(f"{report.stack}: install complete")
    else:
        print_success(f"{report.stack}: update complete")


def create_verify_table(report: VerifyReport, title: str) -> Table:
    """Create a Rich table of verification checks grouped by section."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Section")
    table.add_column("Check", no_wrap=True)
    table.add_column("Status", width=6, justify="center")
    table.add_column("Detail")

    for section in report.sections():
        first = True
        for check in report.in_section(section):
            table.add_row(
                section if first else "",
                check.label,
                _CHECK_MARKS[check.status],
                f"[muted]{check.detail or ''}[/muted]",
            )
            first = False

    return table


def print_verify_summary(report: VerifyReport) -> None:
    """Print the overall verification outcome."""
    outcome = report.outcome
    if outcome == VerifyOutcome.PASSED:
        print_success("All checks passed")
    elif outcome == VerifyOutcome.DEGRADED:
        print_warning(f"Passed with {report.warnings} warning(s)")
    else:
        print_error(f"FAILED: {report.failures} error(s), {report.warnings} warning(s)")


def print_uninstall_report(report: UninstallReport, home: Path | None = None) -> None:
    """Print what an uninstall run removed and left in place."""
    if not report.ledger_found:
        for warning in report.warnings:
            print_warning(warning)
        return

    table = Table(
        title="Tracked files",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=12)
    table.add_column("Path", no_wrap=True)

    styles = {
        RemovalStatus.REMOVED: "removed",
        RemovalStatus.NOT_SYMLINK: "warning",
        RemovalStatus.ABSENT: "muted",
        RemovalStatus.FAILED: "error",
    }
    for removal in report.removals:
        style = styles[removal.status]
        table.add_row(f"[{style}]{removal.status.value}[/{style}]", _short(removal.path, home))

    if report.removals:
        console.print(table)

    console.print(
        f"  [muted]{report.count(RemovalStatus.REMOVED)} removed, "
        f"{report.count(RemovalStatus.NOT_SYMLINK)} left in place, "
        f"{report.count(RemovalStatus.ABSENT)} already gone, "
        f"{len(report.removed_dirs)} empty directories removed[/muted]"
    )
    if report.profile_cleaned:
        print_info("Session selector and Wayland exports removed from bash profile")

    if report.packages_removed is True:
        print_success(f"Removed {len(report.packages)} packages")
    elif report.packages and report.packages_removed is None:
        print_info("Packages left in place")

    for warning in report.warnings:
        print_warning(warning)
