"""Subprocess helpers.

Two flavours: :func:`run_command` captures output for probes (``pacman -Q``,
``systemctl is-enabled``, ``git``), :func:`run_interactive` hands the
terminal to the child so sudo prompts and build output reach the user.
"""

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured result of a finished command.

    Attributes:
        stdout: Captured standard output.
        stderr: Captured standard error.
        returncode: Exit status.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the command exited with status 0."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Run ``args`` and capture its output.

    A non-zero exit status is reported in the result, never raised.

    Args:
        args: Command line.
        timeout: Seconds to wait; None for clones and other long jobs.
        cwd: Working directory.

    Raises:
        subprocess.TimeoutExpired: If the command outlives ``timeout``.
        FileNotFoundError: If the executable does not exist.
    """
    logger.debug("Running: %s", shlex.join(args))
    completed = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def run_interactive(args: list[str], *, cwd: str | None = None) -> int:
    """Run ``args`` attached to the terminal and return its exit status.

    Nothing is captured and no timeout applies.

    Raises:
        FileNotFoundError: If the executable does not exist.
    """
    logger.debug("Running interactively: %s", shlex.join(args))
    return subprocess.run(args, check=False, cwd=cwd).returncode


def command_exists(name: str) -> bool:
    """Check if ``name`` resolves on PATH."""
    return shutil.which(name) is not None
