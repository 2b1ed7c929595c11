"""pacman package operator implementation.

Executes package installation and removal using pacman through sudo.
"""

import logging

from alpi.models.mode import ExecutionMode
from alpi.operators.base import Operator, PackageTransaction, TransactionType
from alpi.utils.shell import command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)


class PacmanOperator(Operator):
    """Operator for packages from the official Arch repositories.

    ``--needed`` makes installs idempotent: already installed packages are
    silently skipped. Removal uses ``-Rns`` (package, unneeded dependencies
    and backup config files).
    """

    @property
    def name(self) -> str:
        """Return the package manager name."""
        return "pacman"

    def is_available(self) -> bool:
        """Check if pacman is available."""
        return command_exists("pacman")

    def sync_databases(self, *, mode: ExecutionMode) -> PackageTransaction:
        """Refresh package databases (``pacman -Sy``)."""
        args = ["sudo", "pacman", "-Sy", "--noconfirm"]
        return self._run(args, [], TransactionType.INSTALL, mode)

    def install(self, packages: list[str], *, mode: ExecutionMode) -> PackageTransaction:
        """Install packages with ``pacman -S --needed``."""
        args = ["sudo", "pacman", "-S", "--needed", "--noconfirm", *packages]
        return self._run(args, packages, TransactionType.INSTALL, mode)

    def remove(self, packages: list[str], *, mode: ExecutionMode) -> PackageTransaction:
        """Remove packages with ``pacman -Rns``."""
        args = ["sudo", "pacman", "-Rns", "--noconfirm", *packages]
        return self._run(args, packages, TransactionType.REMOVE, mode)

    def is_installed(self, package: str) -> bool:
        """Check ``pacman -Qq <package>``."""
        try:
            return run_command(["pacman", "-Qq", package], timeout=30.0).success
        except OSError:
            return False

    def _run(
        self,
        args: list[str],
        packages: list[str],
        transaction_type: TransactionType,
        mode: ExecutionMode,
    ) -> PackageTransaction:
        """Execute one pacman invocation, or log it in preview mode."""
        if mode.is_preview:
            logger.info("Dry-run: would run %s", " ".join(args))
            return PackageTransaction(
                transaction_type=transaction_type,
                manager=self.name,
                packages=tuple(packages),
                success=True,
                dry_run=True,
            )

        self._require_available()
        logger.info("Executing %s", " ".join(args))
        returncode = run_interactive(args)
        return PackageTransaction(
            transaction_type=transaction_type,
            manager=self.name,
            packages=tuple(packages),
            success=returncode == 0,
            error=None if returncode == 0 else f"pacman exited with {returncode}",
        )
