"""yay (AUR helper) package operator implementation."""

import logging

from alpi.models.mode import ExecutionMode
from alpi.operators.base import Operator, PackageTransaction, TransactionType
from alpi.utils.shell import command_exists, run_interactive

logger = logging.getLogger(__name__)


class YayOperator(Operator):
    """Operator for AUR packages, built and installed through yay.

    yay escalates with sudo itself and must not be run as root.
    """

    @property
    def name(self) -> str:
        """Return the package manager name."""
        return "yay"

    def is_available(self) -> bool:
        """Check if yay is available."""
        return command_exists("yay")

    def install(self, packages: list[str], *, mode: ExecutionMode) -> PackageTransaction:
        """Install AUR packages with ``yay -S --needed``."""
        args = ["yay", "-S", "--needed", "--noconfirm", *packages]
        if mode.is_preview:
            logger.info("Dry-run: would run %s", " ".join(args))
            return PackageTransaction(
                transaction_type=TransactionType.INSTALL,
                manager=self.name,
                packages=tuple(packages),
                success=True,
                dry_run=True,
            )

        self._require_available()
        logger.info("Executing %s", " ".join(args))
        returncode = run_interactive(args)
        return PackageTransaction(
            transaction_type=TransactionType.INSTALL,
            manager=self.name,
            packages=tuple(packages),
            success=returncode == 0,
            error=None if returncode == 0 else f"yay exited with {returncode}",
        )

    def remove(self, packages: list[str], *, mode: ExecutionMode) -> PackageTransaction:
        """Remove packages with ``yay -Rns``."""
        args = ["yay", "-Rns", "--noconfirm", *packages]
        if mode.is_preview:
            logger.info("Dry-run: would run %s", " ".join(args))
            return PackageTransaction(
                transaction_type=TransactionType.REMOVE,
                manager=self.name,
                packages=tuple(packages),
                success=True,
                dry_run=True,
            )

        self._require_available()
        returncode = run_interactive(args)
        return PackageTransaction(
            transaction_type=TransactionType.REMOVE,
            manager=self.name,
            packages=tuple(packages),
            success=returncode == 0,
            error=None if returncode == 0 else f"yay exited with {returncode}",
        )
