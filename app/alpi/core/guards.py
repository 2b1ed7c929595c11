"""Privilege guard.

alpi runs as the normal user and calls sudo only where needed. Running it
as root would leave root-owned files in the user's home directory.
"""

import os


class RootUserError(RuntimeError):
    """Raised when alpi is started as root."""


def is_root() -> bool:
    """Check if the effective user is root."""
    return os.geteuid() == 0


def ensure_not_root() -> None:
    """Abort if running as root.

    Raises:
        RootUserError: If the effective user id is 0.
    """
    if is_root():
        msg = "Do not run as root. Run as your normal user (with sudo rights)."
        raise RootUserError(msg)
