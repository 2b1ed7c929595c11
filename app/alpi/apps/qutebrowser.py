"""qutebrowser configuration.

``config.py`` is made of alpi-managed blocks appended after whatever the
user already has. Every run copies the file to a backup first, then
rewrites the blocks from the bundled templates, so ``update`` always
reflects the current settings.
"""

import logging
import re
import stat
import subprocess
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path

from alpi.blocks.managed import ManagedBlock, apply_block
from alpi.core.backup import copy_to_backup
from alpi.models.mode import ExecutionMode
from alpi.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

CONFIG_HEADER = (
    "# Qutebrowser config file - generated by alpi\n"
    "# This file is executed as Python code.\n"
)

USERSCRIPT_NAME = "youtube-to-piped"

# An empty try: directly followed by an except whose whole body is pass
_EMPTY_TRY_EXCEPT = re.compile(
    r"^[ \t]*try:[ \t]*\n[ \t]*except\b[^\n]*:[ \t]*\n[ \t]*pass[ \t]*\n", re.MULTILINE
)


def _managed(name: str) -> ManagedBlock:
    return ManagedBlock(
        begin=f"# >>> qutebrowser {name} (managed)",
        end=f"# <<< qutebrowser {name} (managed)",
    )


ADBLOCK_BLOCK = _managed("adblock + youtube")
DARK_UI_BLOCK = _managed("dark UI")
PRIVACY_BLOCK = _managed("privacy + performance")

# Block and bundled template, in the order they are written
MANAGED_BLOCKS: tuple[tuple[ManagedBlock, str], ...] = (
    (ADBLOCK_BLOCK, "adblock-youtube.txt"),
    (DARK_UI_BLOCK, "dark-ui.txt"),
    (PRIVACY_BLOCK, "privacy-performance.txt"),
)


def config_path(home: Path) -> Path:
    """qutebrowser ``config.py`` under ``home``."""
    return home / ".config" / "qutebrowser" / "config.py"


def userscript_path(home: Path) -> Path:
    """Installed ``youtube-to-piped`` userscript under ``home``."""
    return home / ".local" / "share" / "qutebrowser" / "userscripts" / USERSCRIPT_NAME


def load_template(name: str) -> str:
    """Read a bundled qutebrowser template."""
    return resources.files("alpi.data").joinpath("qutebrowser", name).read_text(encoding="utf-8")


def repair_config(text: str) -> str:
    """Drop empty ``try:`` statements whose handler is only ``pass``.

    Older config scripts wrapped settings in try/except and could leave
    these behind, which makes ``config.py`` unparseable.
    """
    return _EMPTY_TRY_EXCEPT.sub("", text)


@dataclass(slots=True)
class QutebrowserResult:
    """What configuring qutebrowser did.

    Attributes:
        config: Path of ``config.py``.
        created: ``config.py`` did not exist and was created.
        backup: Copy of ``config.py`` taken before modification.
        repaired: Empty try/except leftovers were removed.
        blocks_written: Begin markers of blocks that changed.
        userscript: Installed userscript path.
        adblock_updated: Headless adblock-update succeeded, None if not attempted.
        dry_run: Whether this was a preview.
    """

    config: Path
    created: bool = False
    backup: Path | None = None
    repaired: bool = False
    blocks_written: list[str] = field(default_factory=list)
    userscript: Path | None = None
    adblock_updated: bool | None = None
    dry_run: bool = False


def install_userscript(path: Path) -> None:
    """Write the bundled userscript to ``path`` with mode 0755.

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(load_template("youtube-to-piped.sh"), encoding="utf-8")
    path.chmod(stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH)


def update_adblock_lists() -> bool:
    """Run a headless ``:adblock-update``; may fail without a display."""
    if not command_exists("qutebrowser"):
        return False
    try:
        return run_command(["qutebrowser", ":adblock-update", ":quit"], timeout=120.0).success
    except OSError as e:
        logger.debug("adblock-update could not start: %s", e)
        return False
    except subprocess.TimeoutExpired:
        logger.debug("adblock-update timed out")
        return False


def configure_qutebrowser(home: Path, *, mode: ExecutionMode) -> QutebrowserResult:
    """Write the managed blocks and userscript for ``home``.

    Args:
        home: Target home directory.
        mode: Apply or preview.

    Returns:
        QutebrowserResult describing the changes.

    Raises:
        OSError: If config.py or the userscript cannot be written.
    """
    path = config_path(home)
    result = QutebrowserResult(config=path, dry_run=mode.is_preview)

    if mode.is_preview:
        logger.info("Dry-run: would configure qutebrowser at %s", path)
        result.created = not path.exists()
        result.blocks_written = [block.begin for block, _ in MANAGED_BLOCKS]
        result.userscript = userscript_path(home)
        return result

    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_HEADER, encoding="utf-8")
        result.created = True

    result.backup = copy_to_backup(path)

    original = path.read_text(encoding="utf-8")
    repaired = repair_config(original)
    if repaired != original:
        path.write_text(repaired, encoding="utf-8")
        result.repaired = True

    for block, template in MANAGED_BLOCKS:
        if apply_block(path, block, load_template(template), mode=mode):
            result.blocks_written.append(block.begin)

    result.userscript = userscript_path(home)
    install_userscript(result.userscript)

    result.adblock_updated = update_adblock_lists()
    if not result.adblock_updated:
        logger.warning("Headless adblock-update failed - run ':adblock-update' inside qutebrowser")

    return result


def missing_blocks(home: Path) -> list[ManagedBlock]:
    """Managed blocks absent from ``config.py`` (all of them if it is missing)."""
    try:
        text = config_path(home).read_text(encoding="utf-8")
    except OSError:
        return [block for block, _ in MANAGED_BLOCKS]
    return [block for block, _ in MANAGED_BLOCKS if not block.is_present(text)]
