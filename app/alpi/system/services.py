"""systemd unit management.

Only enables units that are not already enabled, so an existing setup
(e.g. dwm with dhcpcd or iwd) is never disrupted.
"""

import logging
from dataclasses import dataclass

from alpi.models.mode import ExecutionMode
from alpi.utils.shell import command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServiceChange:
    """Result of ensuring a unit is enabled.

    Attributes:
        unit: systemd unit name.
        already_enabled: Unit was enabled before, nothing done.
        success: Unit is (or would be) enabled afterwards.
        dry_run: Whether this was a preview.
        error: Error message if enabling failed.
    """

    unit: str
    already_enabled: bool
    success: bool
    dry_run: bool = False
    error: str | None = None


def is_service_enabled(unit: str) -> bool:
    """Check ``systemctl is-enabled --quiet <unit>``."""
    if not command_exists("systemctl"):
        return False
    try:
        result = run_command(["systemctl", "is-enabled", "--quiet", unit], timeout=10.0)
    except OSError as e:
        logger.warning("Could not query unit %s: %s", unit, e)
        return False
    return result.success


def enable_service(unit: str, *, mode: ExecutionMode) -> ServiceChange:
    """Enable and start ``unit`` unless it is already enabled.

    Args:
        unit: systemd unit name.
        mode: Apply or preview.

    Returns:
        ServiceChange describing the outcome.
    """
    if is_service_enabled(unit):
        logger.info("%s already enabled, leaving as-is", unit)
        return ServiceChange(unit=unit, already_enabled=True, success=True, dry_run=mode.is_preview)

    if mode.is_preview:
        logger.info("Dry-run: would run sudo systemctl enable --now %s", unit)
        return ServiceChange(unit=unit, already_enabled=False, success=True, dry_run=True)

    returncode = run_interactive(["sudo", "systemctl", "enable", "--now", unit])
    if returncode != 0:
        return ServiceChange(
            unit=unit,
            already_enabled=False,
            success=False,
            error=f"systemctl enable exited with {returncode}",
        )
    return ServiceChange(unit=unit, already_enabled=False, success=True)
