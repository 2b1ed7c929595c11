"""Execution mode passed explicitly into every mutating operation."""

from enum import Enum


class ExecutionMode(str, Enum):
    """Whether an operation changes the system or only reports.

    Attributes:
        APPLY: Perform filesystem, ledger and package changes.
        PREVIEW: Report what would be done without changing anything.
    """

    APPLY = "apply"
    PREVIEW = "preview"

    @property
    def is_preview(self) -> bool:
        """Check if this mode must not mutate anything."""
        return self is ExecutionMode.PREVIEW

    @classmethod
    def from_dry_run(cls, dry_run: bool) -> "ExecutionMode":
        """Map a CLI ``--dry-run`` flag to a mode."""
        return cls.PREVIEW if dry_run else cls.APPLY
