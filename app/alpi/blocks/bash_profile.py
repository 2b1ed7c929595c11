"""Bash profile configuration for the niri session.

Coexistence with an existing X11/dwm setup:

- PATH and Wayland exports are added only if the exact line is missing;
  X11 sessions read but ignore them.
- The session selector block is rewritten if alpi already owns it. A
  foreign ``startx`` selector is left untouched (with a warning) when alpi
  has no block of its own yet.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from alpi.blocks.managed import ManagedBlock, apply_block, ensure_line, remove_block, remove_line
from alpi.models.mode import ExecutionMode
from alpi.models.stack import SESSION_BEGIN_MARKER, SESSION_END_MARKER, SessionConfig

logger = logging.getLogger(__name__)

SESSION_BLOCK = ManagedBlock(begin=SESSION_BEGIN_MARKER, end=SESSION_END_MARKER)

_FOREIGN_SELECTOR = re.compile(r"^\s*(exec\s+)?startx\b", re.MULTILINE)

_SELECTOR_TEMPLATE = """\
# Triggers on {tty} login when no display server is already running.
# Press Enter or 1 to launch niri, press 2 to stay at the shell.
if [ -z "$DISPLAY" ] && [ -z "$WAYLAND_DISPLAY" ] && [ "$(tty)" = "{tty}" ]; then
    echo ""
    echo "  ┌──────────────────────────────────────────┐"
    echo "  │         NIRUCON - niri session           │"
    echo "  ├──────────────────────────────────────────┤"
    echo "  │   1)  niri  ·  wayland                   │"
    echo "  │   2)  exit  ·  shell prompt only         │"
    echo "  └──────────────────────────────────────────┘"
    echo ""
    read -r -p "  Session [1/2, Enter = niri]: " _niru_ses
    case "$_niru_ses" in
        2) : ;;
        *) exec "{start_command}" ;;
    esac
    unset _niru_ses
fi
"""


def render_selector(session: SessionConfig) -> str:
    """Render the session selector body for ``session``."""
    return _SELECTOR_TEMPLATE.format(tty=session.tty, start_command=session.start_command)


def has_foreign_selector(text: str) -> bool:
    """Check for a ``startx`` line outside alpi's own block."""
    return bool(_FOREIGN_SELECTOR.search(SESSION_BLOCK.remove(text)))


@dataclass(slots=True)
class ProfileResult:
    """What configuring or cleaning the profile changed.

    Attributes:
        path: Profile file.
        created: The profile did not exist and was created.
        lines_added: Export lines that were appended.
        lines_removed: Export lines that were deleted.
        selector_written: The selector block was written or rewritten.
        selector_removed: The selector block was deleted.
        foreign_selector: A foreign startx selector was found and left alone.
        dry_run: Whether this was a preview.
    """

    path: Path
    created: bool = False
    lines_added: list[str] = field(default_factory=list)
    lines_removed: list[str] = field(default_factory=list)
    selector_written: bool = False
    selector_removed: bool = False
    foreign_selector: bool = False
    dry_run: bool = False


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def configure_profile(path: Path, session: SessionConfig, *, mode: ExecutionMode) -> ProfileResult:
    """Ensure exports and the session selector are present in ``path``.

    Args:
        path: Bash profile file.
        session: Session settings.
        mode: Apply or preview.

    Returns:
        ProfileResult describing the changes.

    Raises:
        OSError: If the profile cannot be read or written.
    """
    result = ProfileResult(path=path, dry_run=mode.is_preview)

    if not path.exists():
        result.created = True
        if not mode.is_preview:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()

    for line in [session.path_line, *session.exports]:
        if ensure_line(path, line, mode=mode):
            result.lines_added.append(line)

    text = _read(path)
    if not SESSION_BLOCK.is_present(text) and has_foreign_selector(text):
        logger.warning("Existing startx/dwm session selector found in %s, not modifying it", path)
        result.foreign_selector = True
        return result

    result.selector_written = apply_block(
        path,
        SESSION_BLOCK,
        render_selector(session),
        mode=mode,
        header="- managed by alpi",
    )
    return result


def clean_profile(path: Path, session: SessionConfig, *, mode: ExecutionMode) -> ProfileResult:
    """Remove alpi's selector block and Wayland export lines from ``path``.

    The PATH line is kept; other tools rely on ``~/.local/bin`` too.

    Raises:
        OSError: If the profile cannot be read or written.
    """
    result = ProfileResult(path=path, dry_run=mode.is_preview)
    if not path.exists():
        return result

    result.selector_removed = remove_block(path, SESSION_BLOCK, mode=mode)
    for line in session.exports:
        if remove_line(path, line, mode=mode):
            result.lines_removed.append(line)
    return result


def selector_state(path: Path) -> str:
    """Classify the profile's session selector.

    Returns:
        ``"managed"``, ``"foreign"`` or ``"missing"``.
    """
    text = _read(path)
    if SESSION_BLOCK.is_present(text):
        return "managed"
    if has_foreign_selector(text):
        return "foreign"
    return "missing"
