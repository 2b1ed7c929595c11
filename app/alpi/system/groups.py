"""Supplementary group membership.

niri needs the user in ``input``, ``video`` and ``seat`` for direct device
access without a display manager. Groups that do not exist on this system
are skipped. Membership changes take effect after the next login.
"""

import grp
import logging
import os
import pwd
from dataclasses import dataclass

from alpi.models.mode import ExecutionMode
from alpi.utils.shell import run_interactive

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GroupChange:
    """Result of ensuring membership in one group.

    Attributes:
        group: Group name.
        exists: Group exists on this system.
        already_member: User was a member before.
        added: User was (or would be) added.
        dry_run: Whether this was a preview.
        error: Error message if usermod failed.
    """

    group: str
    exists: bool
    already_member: bool = False
    added: bool = False
    dry_run: bool = False
    error: str | None = None


def current_user() -> str:
    """Login name of the invoking user."""
    return os.environ.get("USER") or pwd.getpwuid(os.getuid()).pw_name


def group_exists(group: str) -> bool:
    """Check if ``group`` is defined in the group database."""
    try:
        grp.getgrnam(group)
    except KeyError:
        return False
    return True


def user_groups(user: str) -> set[str]:
    """Names of all groups ``user`` belongs to (like ``id -nG``)."""
    try:
        primary = pwd.getpwnam(user).pw_gid
    except KeyError:
        return set()
    names: set[str] = set()
    for gid in os.getgrouplist(user, primary):
        try:
            names.add(grp.getgrgid(gid).gr_name)
        except KeyError:
            continue
    return names


def add_user_to_group(group: str, *, mode: ExecutionMode, user: str | None = None) -> GroupChange:
    """Add ``user`` to ``group`` if the group exists and they are not a member.

    Args:
        group: Group name.
        mode: Apply or preview.
        user: Login name, defaults to the invoking user.

    Returns:
        GroupChange describing the outcome.
    """
    user = user or current_user()

    if not group_exists(group):
        logger.warning("Group '%s' does not exist on this system, skipping", group)
        return GroupChange(group=group, exists=False, dry_run=mode.is_preview)

    if group in user_groups(user):
        return GroupChange(group=group, exists=True, already_member=True, dry_run=mode.is_preview)

    if mode.is_preview:
        logger.info("Dry-run: would run sudo usermod -aG %s %s", group, user)
        return GroupChange(group=group, exists=True, added=True, dry_run=True)

    returncode = run_interactive(["sudo", "usermod", "-aG", group, user])
    if returncode != 0:
        return GroupChange(
            group=group,
            exists=True,
            error=f"usermod exited with {returncode}",
        )
    return GroupChange(group=group, exists=True, added=True)
