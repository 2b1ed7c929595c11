"""Abstract base class for package operators.

This module defines the Operator interface that all package management
operators must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from alpi.models.mode import ExecutionMode


class OperatorError(RuntimeError):
    """Raised when a package manager is not available."""


class TransactionType(str, Enum):
    """Kind of package transaction."""

    INSTALL = "install"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class PackageTransaction:
    """Result of one package manager invocation.

    Package managers report success per invocation, not per package, so a
    failed bulk removal means "some packages could not be removed".

    Attributes:
        transaction_type: Install or remove.
        manager: Package manager name (``pacman``, ``yay``).
        packages: Package identifiers passed to the invocation.
        success: Whether the invocation exited zero.
        dry_run: Whether this was a preview.
        error: Error message on failure.
    """

    transaction_type: TransactionType
    manager: str
    packages: tuple[str, ...]
    success: bool
    dry_run: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the invocation failed."""
        return not self.success


class Operator(ABC):
    """Abstract base class for all package operators.

    Operators execute install and remove transactions for a specific
    package manager. The execution mode is passed into every call.

    Example:
        >>> operator = PacmanOperator()
        >>> if operator.is_available():
        ...     tx = operator.install(["foot", "waybar"], mode=ExecutionMode.PREVIEW)
        ...     print(tx.success)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Package manager name for display and logs."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""

    @abstractmethod
    def install(self, packages: list[str], *, mode: ExecutionMode) -> PackageTransaction:
        """Install packages, skipping those already installed.

        Raises:
            OperatorError: If the package manager is not available.
        """

    @abstractmethod
    def remove(self, packages: list[str], *, mode: ExecutionMode) -> PackageTransaction:
        """Remove packages together with unneeded dependencies.

        Raises:
            OperatorError: If the package manager is not available.
        """

    def _require_available(self) -> None:
        """Raise OperatorError if the package manager is missing."""
        if not self.is_available():
            msg = f"{self.name} is not available on this system"
            raise OperatorError(msg)
