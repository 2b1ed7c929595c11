"""Toolchain bootstrap for a fresh Arch installation.

Ensures pacman databases are synced and that git, base-devel and yay are
present before anything else runs. yay is built from the ``yay-bin`` AUR
package when missing.
"""

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from alpi.models.mode import ExecutionMode
from alpi.operators.base import OperatorError
from alpi.operators.pacman import PacmanOperator
from alpi.utils.shell import command_exists, run_interactive

logger = logging.getLogger(__name__)

YAY_BIN_REPO = "https://aur.archlinux.org/yay-bin.git"


@dataclass(slots=True)
class BootstrapResult:
    """What the bootstrap step did.

    Attributes:
        installed: Tools that were (or would be) installed.
        present: Tools that were already available.
        dry_run: Whether this was a preview.
    """

    installed: list[str] = field(default_factory=list)
    present: list[str] = field(default_factory=list)
    dry_run: bool = False


def _build_yay(mode: ExecutionMode) -> None:
    """Clone and build yay-bin in a temporary directory.

    Raises:
        OperatorError: If cloning or building fails.
    """
    if mode.is_preview:
        logger.info("Dry-run: would build yay from %s", YAY_BIN_REPO)
        return

    with tempfile.TemporaryDirectory(prefix="alpi-yay-") as tmp:
        checkout = Path(tmp) / "yay-bin"
        if run_interactive(["git", "clone", "--depth=1", YAY_BIN_REPO, str(checkout)]) != 0:
            msg = f"Failed to clone {YAY_BIN_REPO}"
            raise OperatorError(msg)
        if run_interactive(["makepkg", "-si", "--noconfirm"], cwd=str(checkout)) != 0:
            msg = "makepkg failed while building yay"
            raise OperatorError(msg)


def bootstrap_toolchain(
    *,
    mode: ExecutionMode,
    pacman: PacmanOperator | None = None,
) -> BootstrapResult:
    """Make sure git, base-devel and yay are available.

    Args:
        mode: Apply or preview.
        pacman: Operator used for official packages.

    Returns:
        BootstrapResult listing what was present and what was installed.

    Raises:
        OperatorError: If a required install step fails.
    """
    pacman = pacman or PacmanOperator()
    result = BootstrapResult(dry_run=mode.is_preview)

    if not mode.is_preview and not pacman.is_available():
        msg = "pacman not found - alpi only supports Arch Linux"
        raise OperatorError(msg)

    sync = pacman.sync_databases(mode=mode)
    if sync.failed:
        raise OperatorError(sync.error or "pacman -Sy failed")

    if command_exists("git"):
        result.present.append("git")
    else:
        tx = pacman.install(["git"], mode=mode)
        if tx.failed:
            raise OperatorError(tx.error or "Failed to install git")
        result.installed.append("git")

    if pacman.is_installed("base-devel"):
        result.present.append("base-devel")
    else:
        tx = pacman.install(["base-devel"], mode=mode)
        if tx.failed:
            raise OperatorError(tx.error or "Failed to install base-devel")
        result.installed.append("base-devel")

    if command_exists("yay"):
        result.present.append("yay")
    else:
        _build_yay(mode)
        result.installed.append("yay")

    return result
